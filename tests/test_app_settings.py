from datetime import datetime, timedelta, timezone

import pytest

from instaclone.core.app_factory import create_app
from instaclone.core.config import get_settings
from instaclone.core.database import get_db
from instaclone.modules.media.storage import get_file_store
from tests.helpers import image_upload
from tests.testclient import TestClient

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def custom_client(session, file_store):
    """A second app built with tighter limits than the process-wide settings."""
    app_settings = get_settings().model_copy(
        update={"MAX_CAPTION_LENGTH": 10, "FEED_DEFAULT_LIMIT": 2, "FEED_MAX_LIMIT": 3}
    )
    custom = create_app(settings=app_settings, file_store=file_store)
    custom.dependency_overrides[get_db] = lambda: session
    custom.dependency_overrides[get_file_store] = lambda: file_store
    with TestClient(custom) as test_client:
        yield test_client


def test_caption_limit_follows_app_settings(custom_client, alice):
    res = custom_client.post(
        "/api/posts",
        headers=alice.headers,
        data={"caption": "x" * 50},
        files=image_upload(),
    )
    assert res.status_code == 400
    assert res.json()["error"] == "Caption must be 10 characters or less"
    assert res.json()["code"] == "caption_too_long"


def test_feed_limits_follow_app_settings(custom_client, alice, make_post):
    for i in range(3):
        make_post(alice.id, created_at=BASE_TIME + timedelta(minutes=i))

    default_page = custom_client.get("/api/posts")
    assert default_page.status_code == 200
    assert len(default_page.json()["data"]) == 2

    full_page = custom_client.get("/api/posts", params={"limit": 3})
    assert len(full_page.json()["data"]) == 3

    too_many = custom_client.get("/api/posts", params={"limit": 5})
    assert too_many.status_code == 400
    assert too_many.json()["code"] == "validation_error"
    assert too_many.json()["details"] == {"field": "limit"}


def test_default_app_keeps_process_settings(client, alice):
    res = client.post(
        "/api/posts",
        headers=alice.headers,
        data={"caption": "x" * 50},
        files=image_upload(),
    )
    assert res.status_code == 201

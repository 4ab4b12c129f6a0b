# ruff: noqa: E402
import os
import tempfile
from pathlib import Path
from typing import Any

import pytest

from tests.helpers import TEST_JWT_SECRET, auth_headers

TEST_DIR = Path(__file__).resolve().parent

# Set testing environment flags before importing the app or settings
os.environ["APP_ENV"] = "test"
os.environ["AUTH_JWT_KEY"] = TEST_JWT_SECRET
os.environ["AUTH_JWT_ALGORITHMS"] = "HS256"
os.environ.pop("AUTH_JWT_ISSUER", None)
os.environ.pop("AUTH_JWT_AUDIENCE", None)
os.environ["UPLOADS_ROOT"] = tempfile.mkdtemp(prefix="instaclone-uploads-")
os.environ["UPLOADS_PUBLIC_URL"] = "http://testserver/uploads"

test_db_url = (
    os.environ.get("TEST_DATABASE_URL") or f"sqlite:///{TEST_DIR / 'test.db'}"
)
os.environ["TEST_DATABASE_URL"] = test_db_url
os.environ["DATABASE_URL"] = test_db_url

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

import instaclone.models.registry  # noqa: F401 - register every table on Base.metadata
from instaclone.core.database import Base, build_engine, get_db
from instaclone.main import app
from instaclone.modules.media.storage import LocalFileStore, get_file_store
from instaclone.modules.users.models import User
from tests.testclient import TestClient


class AttrDict(dict):
    """Dict with attribute-style access for fixtures."""

    def __getattr__(self, item: str) -> Any:
        try:
            return self[item]
        except KeyError as exc:
            raise AttributeError(item) from exc


engine = build_engine(test_db_url)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base.metadata.drop_all(bind=engine)
Base.metadata.create_all(bind=engine)


def _truncate_all() -> None:
    with engine.begin() as connection:
        if engine.dialect.name == "sqlite":
            for table in reversed(Base.metadata.sorted_tables):
                connection.execute(table.delete())
        else:
            table_names = ", ".join(f'"{tbl.name}"' for tbl in Base.metadata.sorted_tables)
            if table_names:
                connection.execute(text(f"TRUNCATE {table_names} CASCADE"))


@pytest.fixture(autouse=True, scope="function")
def _clean_db_between_tests():
    _truncate_all()
    yield


@pytest.fixture(scope="function")
def session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def file_store(tmp_path):
    return LocalFileStore(tmp_path / "uploads", "http://testserver/uploads")


@pytest.fixture(scope="function")
def client(session, file_store):
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_store] = lambda: file_store
    with TestClient(app) as test_client:
        try:
            yield test_client
        finally:
            app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_user(session):
    """Factory creating a provisioned user plus matching auth headers."""

    def _make(clerk_id: str, name: str = None) -> AttrDict:
        user = User(clerk_id=clerk_id, name=name)
        session.add(user)
        session.commit()
        session.refresh(user)
        return AttrDict(
            id=user.id,
            clerk_id=user.clerk_id,
            name=user.name,
            headers=auth_headers(clerk_id),
        )

    return _make


@pytest.fixture(scope="function")
def alice(make_user):
    return make_user("user_alice", "Alice")


@pytest.fixture(scope="function")
def bob(make_user):
    return make_user("user_bob", "Bob")


@pytest.fixture(scope="function")
def make_post(session):
    """Factory inserting a post row directly; pass `created_at` to control feed order."""
    from instaclone.modules.posts.models import Post

    def _make(user_id: str, caption: str = None, created_at=None, image_url=None) -> Post:
        post = Post(
            user_id=user_id,
            caption=caption,
            image_url=image_url or "http://testserver/uploads/seed/image.jpg",
        )
        if created_at is not None:
            post.created_at = created_at
            post.updated_at = created_at
        session.add(post)
        session.commit()
        session.refresh(post)
        return post

    return _make

from datetime import datetime, timedelta, timezone

import pytest

from instaclone.modules.posts.models import Comment
from instaclone.services.posts import FeedAssembler

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded_posts(alice, bob, make_post):
    posts = []
    for i in range(5):
        owner = alice if i % 2 == 0 else bob
        posts.append(
            make_post(owner.id, caption=f"post {i}", created_at=BASE_TIME + timedelta(minutes=i))
        )
    return posts


def _add_comment(session, post_id, user_id, content, minutes):
    comment = Comment(
        post_id=post_id,
        user_id=user_id,
        content=content,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        updated_at=BASE_TIME + timedelta(minutes=minutes),
    )
    session.add(comment)
    session.commit()
    return comment


def test_feed_is_newest_first(client, seeded_posts):
    res = client.get("/api/posts")
    assert res.status_code == 200
    captions = [post["caption"] for post in res.json()["data"]]
    assert captions == ["post 4", "post 3", "post 2", "post 1", "post 0"]


def test_feed_pages_are_disjoint(client, seeded_posts):
    first = client.get("/api/posts", params={"limit": 2, "offset": 0}).json()["data"]
    second = client.get("/api/posts", params={"limit": 2, "offset": 2}).json()["data"]
    third = client.get("/api/posts", params={"limit": 2, "offset": 4}).json()["data"]

    ids = [post["id"] for page in (first, second, third) for post in page]
    assert len(ids) == 5
    assert len(set(ids)) == 5
    assert len(third) == 1


def test_feed_filters_by_author(client, alice, seeded_posts):
    data = client.get("/api/posts", params={"userId": alice.id}).json()["data"]
    assert [post["caption"] for post in data] == ["post 4", "post 2", "post 0"]
    assert all(post["user_id"] == alice.id for post in data)


def test_feed_embeds_two_most_recent_comments(client, session, alice, bob, make_post):
    post = make_post(alice.id, created_at=BASE_TIME)
    _add_comment(session, post.id, bob.id, "oldest", 1)
    _add_comment(session, post.id, alice.id, "middle", 2)
    _add_comment(session, post.id, bob.id, "newest", 3)

    data = client.get("/api/posts").json()["data"][0]
    assert data["comments_count"] == 3
    assert [c["content"] for c in data["recent_comments"]] == ["newest", "middle"]
    assert data["recent_comments"][0]["user"] == {"id": bob.id, "name": "Bob"}


def test_feed_reports_viewer_like_state(client, alice, bob, make_post):
    liked = make_post(alice.id, caption="liked", created_at=BASE_TIME)
    make_post(alice.id, caption="not liked", created_at=BASE_TIME + timedelta(minutes=1))
    client.post("/api/likes", headers=bob.headers, json={"postId": liked.id})

    data = client.get("/api/posts", headers=bob.headers).json()["data"]
    state = {post["caption"]: (post["is_liked"], post["likes_count"]) for post in data}
    assert state == {"liked": (True, 1), "not liked": (False, 0)}

    anonymous = client.get("/api/posts").json()["data"]
    assert all(post["is_liked"] is False for post in anonymous)


def test_feed_falls_back_to_unknown_author(client, make_user, make_post):
    nameless = make_user("user_nameless", None)
    make_post(nameless.id)

    data = client.get("/api/posts").json()["data"][0]
    assert data["user"] == {"id": nameless.id, "name": "Unknown"}


def test_feed_post_shape(client, alice, make_post):
    make_post(alice.id, caption="shape")
    post = client.get("/api/posts").json()["data"][0]
    assert set(post) == {
        "id",
        "user_id",
        "image_url",
        "caption",
        "created_at",
        "updated_at",
        "likes_count",
        "comments_count",
        "user",
        "recent_comments",
        "is_liked",
    }
    assert post["updated_at"] == post["created_at"]


def test_empty_feed(client):
    res = client.get("/api/posts")
    assert res.status_code == 200
    assert res.json() == {"success": True, "data": []}


@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 101}, {"offset": -1}])
def test_feed_rejects_out_of_range_paging(client, params):
    res = client.get("/api/posts", params=params)
    assert res.status_code == 400
    assert res.json()["success"] is False
    assert res.json()["code"] == "validation_error"


def test_assembler_default_limit(session, alice, make_post):
    for i in range(12):
        make_post(alice.id, created_at=BASE_TIME + timedelta(minutes=i))
    page = FeedAssembler(session).list_posts()
    assert len(page) == 10


def test_assembler_caches_authors(session, alice, make_post):
    make_post(alice.id, created_at=BASE_TIME)
    make_post(alice.id, created_at=BASE_TIME + timedelta(minutes=1))
    assembler = FeedAssembler(session)
    page = assembler.list_posts()
    assert page[0].user == page[1].user
    assert list(assembler._authors) == [alice.id]

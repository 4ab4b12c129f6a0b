import pytest

from instaclone.core.exceptions import AlreadyLikedException, ResourceNotFoundException
from instaclone.modules.posts.models import Like
from instaclone.services.posts import LikeService, like_service
from tests.helpers import auth_headers


def _like_count(session, post_id):
    session.expire_all()
    return session.query(Like).filter(Like.post_id == post_id).count()


def test_like_is_idempotent(client, session, alice, bob, make_post):
    post = make_post(alice.id)

    first = client.post("/api/likes", headers=bob.headers, json={"postId": post.id})
    second = client.post("/api/likes", headers=bob.headers, json={"postId": post.id})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["data"]["id"] == second.json()["data"]["id"]
    assert first.json()["data"]["user_id"] == bob.id
    assert _like_count(session, post.id) == 1


def test_unlike_without_like_is_noop(client, session, alice, bob, make_post):
    post = make_post(alice.id)
    res = client.request(
        "DELETE", "/api/likes", headers=bob.headers, json={"postId": post.id}
    )
    assert res.status_code == 200
    assert res.json() == {"success": True}
    assert _like_count(session, post.id) == 0


def test_like_unlike_like_leaves_one_row(client, session, alice, bob, make_post):
    post = make_post(alice.id)
    payload = {"postId": post.id}

    client.post("/api/likes", headers=bob.headers, json=payload)
    client.request("DELETE", "/api/likes", headers=bob.headers, json=payload)
    assert _like_count(session, post.id) == 0

    client.post("/api/likes", headers=bob.headers, json=payload)
    assert _like_count(session, post.id) == 1


def test_likes_from_different_users_are_counted(client, alice, bob, make_post):
    post = make_post(alice.id)
    client.post("/api/likes", headers=alice.headers, json={"postId": post.id})
    client.post("/api/likes", headers=bob.headers, json={"postId": post.id})

    data = client.get(f"/api/posts/{post.id}").json()["data"]
    assert data["likes_count"] == 2


def test_like_missing_post(client, bob):
    res = client.post("/api/likes", headers=bob.headers, json={"postId": "nope"})
    assert res.status_code == 404
    assert res.json()["error"] == "Post not found"


@pytest.mark.parametrize("payload", [{}, {"postId": ""}, {"postId": "   "}])
def test_like_requires_post_id(client, bob, payload):
    res = client.post("/api/likes", headers=bob.headers, json=payload)
    assert res.status_code == 400
    assert res.json()["error"] == "postId is required"


def test_like_requires_identity(client, session, alice, make_post):
    post = make_post(alice.id)
    res = client.post("/api/likes", json={"postId": post.id})
    assert res.status_code == 401
    assert _like_count(session, post.id) == 0


def test_like_rejects_invalid_token(client, alice, make_post):
    post = make_post(alice.id)
    res = client.post(
        "/api/likes",
        headers={"Authorization": "Bearer not-a-jwt"},
        json={"postId": post.id},
    )
    assert res.status_code == 401
    assert res.json()["code"] == "invalid_token"


def test_like_for_unprovisioned_identity(client, alice, make_post):
    post = make_post(alice.id)
    res = client.post(
        "/api/likes", headers=auth_headers("user_ghost"), json={"postId": post.id}
    )
    assert res.status_code == 404
    assert res.json()["error"] == "User not found in database"


def test_service_unlike_missing_post(session):
    with pytest.raises(ResourceNotFoundException):
        LikeService(session).unlike_post(post_id="nope", user_id="someone")


def test_check_then_insert_path_is_idempotent(session, alice, bob, make_post, monkeypatch):
    monkeypatch.setattr(like_service, "_UPSERT_DIALECTS", {})
    post = make_post(alice.id)
    service = LikeService(session)

    first = service.like_post(post_id=post.id, user_id=bob.id)
    second = service.like_post(post_id=post.id, user_id=bob.id)

    assert first.id == second.id
    assert service.is_liked(post_id=post.id, user_id=bob.id)


def test_check_then_insert_race_reports_already_liked(
    session, alice, bob, make_post, monkeypatch
):
    monkeypatch.setattr(like_service, "_UPSERT_DIALECTS", {})
    post = make_post(alice.id)
    session.add(Like(post_id=post.id, user_id=bob.id))
    session.commit()

    real_find = LikeService._find
    calls = {"count": 0}

    def stale_first_read(self, post_id, user_id):
        calls["count"] += 1
        if calls["count"] == 1:
            return None
        return real_find(self, post_id, user_id)

    monkeypatch.setattr(LikeService, "_find", stale_first_read)

    with pytest.raises(AlreadyLikedException) as excinfo:
        LikeService(session).like_post(post_id=post.id, user_id=bob.id)
    assert excinfo.value.status_code == 409
    assert excinfo.value.message == "Already liked"
    assert _like_count(session, post.id) == 1

from instaclone.modules.users.models import User
from instaclone.services.users import UserService
from tests.helpers import auth_headers


def test_profile_counts_and_follow_state(client, alice, bob, make_user, make_post):
    carol = make_user("user_carol", "Carol")
    make_post(bob.id)
    make_post(bob.id)
    client.post("/api/follows", headers=alice.headers, json={"followingId": bob.id})
    client.post("/api/follows", headers=carol.headers, json={"followingId": bob.id})
    client.post("/api/follows", headers=bob.headers, json={"followingId": alice.id})

    res = client.get(f"/api/users/{bob.id}", headers=alice.headers)
    assert res.status_code == 200
    profile = res.json()["data"]
    assert profile["name"] == "Bob"
    assert profile["clerk_id"] == "user_bob"
    assert profile["posts_count"] == 2
    assert profile["followers_count"] == 2
    assert profile["following_count"] == 1
    assert profile["is_following"] is True

    reverse = client.get(f"/api/users/{alice.id}", headers=carol.headers).json()["data"]
    assert reverse["is_following"] is False


def test_profile_for_anonymous_and_self_views(client, alice):
    anonymous = client.get(f"/api/users/{alice.id}").json()["data"]
    assert anonymous["is_following"] is False

    own = client.get(f"/api/users/{alice.id}", headers=alice.headers).json()["data"]
    assert own["is_following"] is False


def test_profile_missing_user(client):
    res = client.get("/api/users/nope")
    assert res.status_code == 404
    assert res.json()["error"] == "User not found"


def test_me_returns_profile_without_follow_flag(client, alice, make_post):
    make_post(alice.id)
    res = client.get("/api/users/me", headers=alice.headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["id"] == alice.id
    assert data["clerk_id"] == "user_alice"
    assert data["posts_count"] == 1
    assert "is_following" not in data


def test_me_requires_identity(client):
    res = client.get("/api/users/me")
    assert res.status_code == 401


def test_me_for_unprovisioned_identity(client):
    res = client.get("/api/users/me", headers=auth_headers("user_ghost"))
    assert res.status_code == 404
    assert res.json()["error"] == "User not found in database"


def test_sync_provisions_then_reuses_row(client, session):
    headers = auth_headers("user_dana", name="Dana")

    created = client.post("/api/users/sync", headers=headers)
    assert created.status_code == 201
    user = created.json()["data"]
    assert user["clerk_id"] == "user_dana"
    assert user["name"] == "Dana"

    again = client.post("/api/users/sync", headers=headers, json={"name": "Dana S."})
    assert again.status_code == 200
    assert again.json()["data"]["id"] == user["id"]
    assert again.json()["data"]["name"] == "Dana S."
    assert session.query(User).filter(User.clerk_id == "user_dana").count() == 1

    me = client.get("/api/users/me", headers=headers)
    assert me.status_code == 200


def test_sync_requires_identity(client):
    assert client.post("/api/users/sync").status_code == 401


def test_sync_keeps_name_when_none_supplied(session, alice):
    user, created = UserService(session).sync_user(external_id=alice.clerk_id)
    assert created is False
    assert user.name == "Alice"

import time

import pytest
from sqlalchemy.exc import OperationalError

from instaclone.core.exceptions import StoreUnavailableException, UserNotProvisionedException
from instaclone.services.users.identity import IdentityResolver
from tests.helpers import auth_headers, make_token


def test_resolve_is_stable_across_calls(session, alice):
    resolver = IdentityResolver(session)
    first = resolver.resolve(alice.clerk_id)
    assert first == alice.id
    assert resolver.resolve(alice.clerk_id) == first
    assert IdentityResolver(session).resolve(alice.clerk_id) == first


def test_resolve_miss_returns_none(session):
    assert IdentityResolver(session).resolve("user_nobody") is None


def test_require_miss_raises_not_provisioned(session):
    with pytest.raises(UserNotProvisionedException) as excinfo:
        IdentityResolver(session).require("user_nobody")
    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "User not found in database"


def test_resolve_rejects_empty_identity(session):
    with pytest.raises(ValueError):
        IdentityResolver(session).resolve("")


def test_store_failure_is_distinct_from_miss(session, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(session, "query", broken_query)
    with pytest.raises(StoreUnavailableException) as excinfo:
        IdentityResolver(session).resolve("user_alice")
    assert excinfo.value.status_code == 500


def test_missing_token_is_unauthorized(client):
    res = client.post("/api/likes", json={"postId": "p1"})
    assert res.status_code == 401
    assert res.json() == {"success": False, "error": "Unauthorized", "code": "unauthorized"}


def test_bad_signature_is_invalid_token(client, alice):
    res = client.post(
        "/api/likes",
        json={"postId": "p1"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert res.status_code == 401
    assert res.json()["code"] == "invalid_token"


def test_unprovisioned_identity_is_not_found(client):
    res = client.post("/api/likes", json={"postId": "p1"}, headers=auth_headers("user_ghost"))
    assert res.status_code == 404
    assert res.json()["error"] == "User not found in database"


def test_expired_token_is_invalid(client, alice):
    token = make_token(alice.clerk_id, exp=int(time.time()) - 60)
    res = client.post(
        "/api/likes",
        json={"postId": "p1"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 401
    assert res.json()["code"] == "invalid_token"


def test_invalid_token_on_public_read_is_anonymous(client, alice, make_post):
    make_post(alice.id)
    res = client.get("/api/posts", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 200
    assert res.json()["data"][0]["is_liked"] is False

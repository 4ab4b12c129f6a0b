"""Shared helpers for minting identity tokens in tests."""

from jose import jwt

TEST_JWT_SECRET = "instaclone-test-signing-secret"


def make_token(external_id: str, **claims) -> str:
    """Mint an identity token the way the external provider would."""
    payload = {"sub": external_id, **claims}
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def auth_headers(external_id: str, **claims) -> dict:
    return {"Authorization": f"Bearer {make_token(external_id, **claims)}"}


def image_upload(data: bytes = b"\xff\xd8\xff\xe0fake-jpeg", content_type: str = "image/jpeg"):
    extension = content_type.split("/")[-1]
    return {"image": (f"photo.{extension}", data, content_type)}

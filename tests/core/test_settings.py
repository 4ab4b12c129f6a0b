"""Settings parsing and database URL resolution."""

import pytest

from instaclone.core.config import get_settings
from instaclone.core.config import environment
from instaclone.core.config.settings import Settings


def test_test_environment_selects_test_settings():
    cfg = get_settings()
    assert isinstance(cfg, environment.TestSettings)
    assert cfg.environment == "test"
    assert cfg.log_dir is None


def test_csv_fields_are_parsed():
    cfg = Settings(
        ALLOWED_IMAGE_TYPES="image/png, image/jpeg",
        auth_jwt_algorithms="RS256,HS256",
    )
    assert cfg.allowed_image_types == {"image/png", "image/jpeg"}
    assert cfg.jwt_algorithms == ["RS256", "HS256"]


def test_defaults_for_limits():
    cfg = Settings()
    assert cfg.MAX_IMAGE_BYTES == 5 * 1024 * 1024
    assert cfg.MAX_CAPTION_LENGTH == 2200
    assert cfg.FEED_DEFAULT_LIMIT == 10
    assert cfg.FEED_MAX_LIMIT == 100
    assert cfg.FEED_RECENT_COMMENTS == 2


def test_cors_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    cfg = Settings()
    assert cfg.cors_origins == ["https://a.example", "https://b.example"]


def test_cors_origins_default(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    cfg = Settings(cors_origins=None)
    assert "http://localhost:3000" in cfg.cors_origins


def test_uploads_public_url_derives_from_base_url():
    cfg = Settings(uploads_public_url=None, BASE_URL="https://photos.example/")
    assert cfg.uploads_public_url == "https://photos.example/uploads"


def test_verification_key_read_from_file(monkeypatch, tmp_path):
    monkeypatch.delenv("AUTH_JWT_KEY", raising=False)
    key_file = tmp_path / "provider.pem"
    key_file.write_text("-----BEGIN PUBLIC KEY-----\nabc\n-----END PUBLIC KEY-----\n")

    cfg = Settings(auth_jwt_key=None, auth_jwt_key_path=str(key_file))
    assert cfg.auth_verification_key.startswith("-----BEGIN PUBLIC KEY-----")


def test_empty_key_file_is_rejected(monkeypatch, tmp_path):
    monkeypatch.delenv("AUTH_JWT_KEY", raising=False)
    key_file = tmp_path / "empty.pem"
    key_file.write_text("   ")

    with pytest.raises(ValueError):
        Settings(auth_jwt_key=None, auth_jwt_key_path=str(key_file))


def test_missing_key_leaves_verification_disabled(monkeypatch):
    monkeypatch.delenv("AUTH_JWT_KEY", raising=False)
    monkeypatch.delenv("AUTH_JWT_KEY_PATH", raising=False)
    cfg = Settings(auth_jwt_key=None, auth_jwt_key_path=None)
    assert cfg.auth_verification_key is None


def test_database_url_prefers_explicit_value():
    cfg = Settings(database_url="postgresql://u:p@db/insta")
    assert cfg.get_database_url() == "postgresql://u:p@db/insta"


def test_database_url_composed_from_parts():
    cfg = Settings(
        database_url=None,
        database_hostname="db",
        database_port="5432",
        database_username="u",
        database_password="p",
        database_name="insta",
        database_ssl_mode="disable",
    )
    assert cfg.get_database_url() == "postgresql+psycopg2://u:p@db:5432/insta?sslmode=disable"


def test_test_database_url_is_derived_with_suffix():
    cfg = Settings(test_database_url=None, database_url="postgresql://u:p@db/insta")
    assert cfg.get_database_url(use_test=True) == "postgresql://u:p@db/insta_test"


def test_test_database_url_must_be_dedicated():
    cfg = Settings(test_database_url="postgresql://u:p@db/insta")
    with pytest.raises(ValueError):
        cfg.get_database_url(use_test=True)


def test_sqlite_test_database_url_is_allowed():
    cfg = Settings(test_database_url="sqlite:///./scratch.db")
    assert cfg.get_database_url(use_test=True) == "sqlite:///./scratch.db"

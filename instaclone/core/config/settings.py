"""Application settings loaded from environment with safe fallbacks.

Environment precedence:
- Loads `.env` from the repo root before reading process env vars.
- Most values are pulled straight from env; booleans go through `_env_flag` so `"0"/"false"` work.
- CORS is normalized from `CORS_ORIGINS` (comma-separated) with a conservative default allowlist.
- The identity-provider verification key comes from `AUTH_JWT_KEY` or from the file at
  `AUTH_JWT_KEY_PATH` (repo-relative if not absolute).

Key expectations (defaults in parentheses):
- `APP_ENV` controls settings class selection (`production` default).
- Database: `DATABASE_URL` or component parts (`DATABASE_*`), with `_test` suffix enforced in tests.
- Uploads: `UPLOADS_ROOT` on disk, published under `UPLOADS_PUBLIC_URL` (`{BASE_URL}/uploads`).
- Images: `MAX_IMAGE_BYTES` (5 MiB) and `ALLOWED_IMAGE_TYPES` (jpeg, png, webp).
"""

import logging
import os
from pathlib import Path
from typing import ClassVar, Optional

from dotenv import load_dotenv
from pydantic import PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Base directory of the project; used for resolving relative paths reliably.
# (__file__ is instaclone/core/config/settings.py, so we need to traverse three levels up)
BASE_DIR = Path(__file__).resolve().parents[3]


load_dotenv(BASE_DIR / ".env")

logger = logging.getLogger(__name__)


def _env_flag(name: str, *, default: Optional[bool] = False) -> Optional[bool]:
    """
    Helper to parse boolean-like environment variables.
    """
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _split_csv(raw: Optional[str]) -> list[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Behavior highlights:
    - Loads `.env` at repo root, then lets process env override.
    - Enforces safe DB URLs (prefers `DATABASE_URL`, ensures `_test` suffix for test DBs).
    - Feature toggles parsed via `_env_flag` to accept common truthy/falsey strings.
    - The JWT verification key is resolved once at construction; a missing key only
      matters when a request actually presents a bearer token.
    """

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: Optional[str] = os.getenv("DATABASE_URL")
    test_database_url: Optional[str] = os.getenv("TEST_DATABASE_URL")
    database_hostname: Optional[str] = os.getenv("DATABASE_HOSTNAME")
    database_port: str = os.getenv("DATABASE_PORT", "5432")
    database_password: Optional[str] = os.getenv("DATABASE_PASSWORD")
    database_name: Optional[str] = os.getenv("DATABASE_NAME")
    database_username: Optional[str] = os.getenv("DATABASE_USERNAME")
    database_ssl_mode: str = os.getenv("DATABASE_SSL_MODE", "require")
    environment: str = os.getenv("APP_ENV", "production")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: Optional[str] = os.getenv("LOG_DIR", "logs")
    use_json_logs: bool = _env_flag("USE_JSON_LOGS", default=True)
    # Accept raw string from env to avoid JSON parse errors; we normalize to list in __init__
    cors_origins: Optional[str] = os.getenv("CORS_ORIGINS")
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    SITE_NAME: str = os.getenv("SITE_NAME", "Instaclone")

    # External identity provider (tokens are issued elsewhere, only verified here)
    auth_jwt_key: Optional[str] = os.getenv("AUTH_JWT_KEY")
    auth_jwt_key_path: Optional[str] = os.getenv("AUTH_JWT_KEY_PATH")
    auth_jwt_algorithms: str = os.getenv("AUTH_JWT_ALGORITHMS", "RS256")
    auth_jwt_issuer: Optional[str] = os.getenv("AUTH_JWT_ISSUER")
    auth_jwt_audience: Optional[str] = os.getenv("AUTH_JWT_AUDIENCE")

    uploads_root: str = os.getenv("UPLOADS_ROOT", str(BASE_DIR / "uploads"))
    uploads_public_url: Optional[str] = os.getenv("UPLOADS_PUBLIC_URL")
    uploads_cache_control: Optional[str] = os.getenv(
        "UPLOADS_CACHE_CONTROL", "public, max-age=3600"
    )
    MAX_IMAGE_BYTES: int = int(os.getenv("MAX_IMAGE_BYTES", 5 * 1024 * 1024))
    ALLOWED_IMAGE_TYPES: str = os.getenv(
        "ALLOWED_IMAGE_TYPES", "image/jpeg,image/png,image/webp"
    )
    MAX_CAPTION_LENGTH: int = int(os.getenv("MAX_CAPTION_LENGTH", 2200))

    FEED_DEFAULT_LIMIT: int = int(os.getenv("FEED_DEFAULT_LIMIT", 10))
    FEED_MAX_LIMIT: int = int(os.getenv("FEED_MAX_LIMIT", 100))
    FEED_RECENT_COMMENTS: int = int(os.getenv("FEED_RECENT_COMMENTS", 2))

    _auth_verification_key: Optional[str] = PrivateAttr(default=None)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        env_override = os.getenv("APP_ENV")
        if env_override:
            object.__setattr__(self, "environment", env_override)
        self._auth_verification_key = self._resolve_auth_key()

        origins = _split_csv(os.getenv("CORS_ORIGINS") or self.cors_origins)
        if not origins:
            origins = [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
            ]
        object.__setattr__(self, "cors_origins", origins)

        if not self.uploads_public_url:
            object.__setattr__(
                self, "uploads_public_url", f"{self.BASE_URL.rstrip('/')}/uploads"
            )

    def get_database_url(self, *, use_test: bool = False) -> str:
        """Resolve the SQLAlchemy database URL for runtime or tests.

        Priority: explicit `DATABASE_URL` (or `_test` variant when requested),
        then composed Postgres parts, then `TEST_DATABASE_URL`, finally sqlite fallback.
        Enforces dedicated test DB names to avoid destructive writes to prod data.
        """
        if use_test:
            test_url = self._resolve_test_database_url()
            if test_url.startswith("sqlite"):
                return test_url
            if "_test" not in test_url:
                raise ValueError(
                    "Test database URL must point to a dedicated test database (contains '_test')."
                )
            return test_url

        if self.database_url:
            return self.database_url

        if (
            self.database_hostname
            and self.database_username
            and self.database_password
            and self.database_name
        ):
            base_url = (
                f"postgresql+psycopg2://{self.database_username}:{self.database_password}"
                f"@{self.database_hostname}:{self.database_port}/{self.database_name}"
            )
            if self.database_ssl_mode:
                return f"{base_url}?sslmode={self.database_ssl_mode}"
            return base_url

        if self.test_database_url:
            return self.test_database_url

        raise ValueError(
            "Database configuration is incomplete; please set DATABASE_URL or the individual components."
        )

    def _resolve_test_database_url(self) -> str:
        """
        Build a test database URL.
        Priority:
        1) Explicit TEST_DATABASE_URL env.
        2) Derive from DATABASE_URL with a *_test suffix (or reuse sqlite).
        3) Fallback to sqlite for ad-hoc local runs.
        """
        if self.test_database_url:
            return self.test_database_url

        if self.database_url:
            from sqlalchemy.engine import make_url

            url = make_url(self.database_url)
            if url.drivername.startswith("sqlite"):
                return str(url)
            db_name = url.database or ""
            suffix_name = db_name if db_name.endswith("_test") else f"{db_name}_test"
            return url.set(database=suffix_name).render_as_string(hide_password=False)

        return "sqlite:///./tests/test.db"

    def _resolve_auth_key(self) -> Optional[str]:
        if self.auth_jwt_key:
            return self.auth_jwt_key
        if not self.auth_jwt_key_path:
            logger.warning(
                "AUTH_JWT_KEY is not set; bearer tokens will be rejected until it is configured."
            )
            return None
        path = Path(self.auth_jwt_key_path)
        if not path.is_absolute():
            path = BASE_DIR / path
        try:
            key_data = path.read_text().strip()
        except OSError as exc:
            raise ValueError(f"Error reading identity provider key from {path}: {exc}") from exc
        if not key_data:
            raise ValueError(f"Identity provider key file is empty: {path}")
        return key_data

    @property
    def auth_verification_key(self) -> Optional[str]:
        return self._auth_verification_key

    @property
    def jwt_algorithms(self) -> list[str]:
        return _split_csv(self.auth_jwt_algorithms)

    @property
    def allowed_image_types(self) -> set[str]:
        return set(_split_csv(self.ALLOWED_IMAGE_TYPES))

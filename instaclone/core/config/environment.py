"""Environment-aware settings loader."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict, Type

from fastapi import Request

from .settings import Settings


class DevelopmentSettings(Settings):
    """Settings tuned for local development (verbose logging, local sqlite fallback)."""

    environment: str = "development"
    use_json_logs: bool = False


class ProductionSettings(Settings):
    """Settings tuned for production (JSON logs, explicit DATABASE_URL expected)."""

    environment: str = "production"


class TestSettings(Settings):
    """Settings tuned for automated tests (prefers test DB URLs, console-only logs)."""

    environment: str = "test"
    log_dir: str | None = None

    def model_post_init(self, __context) -> None:
        super().model_post_init(__context)
        if not self.database_url:
            object.__setattr__(
                self, "database_url", self.get_database_url(use_test=True)
            )


ENVIRONMENTS: Dict[str, Type[Settings]] = {
    "development": DevelopmentSettings,
    "dev": DevelopmentSettings,
    "production": ProductionSettings,
    "prod": ProductionSettings,
    "test": TestSettings,
    "testing": TestSettings,
}


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance keyed by APP_ENV to avoid repeated disk/env reads."""
    env = os.getenv("APP_ENV", "production").lower()
    settings_cls = ENVIRONMENTS.get(env, ProductionSettings)
    return settings_cls()


def get_request_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the running app was built with."""
    return getattr(request.app.state, "settings", None) or get_settings()

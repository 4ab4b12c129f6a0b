"""Application factory helpers to keep instaclone/main.py lightweight."""

from __future__ import annotations

import logging
import os
from http import HTTPStatus
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles

from instaclone.api.router import api_router
from instaclone.core.config import Settings, settings as default_settings
from instaclone.core.error_handlers import register_exception_handlers
from instaclone.core.logging_config import setup_logging
from instaclone.core.middleware import LoggingMiddleware, limiter
from instaclone.core.monitoring import setup_monitoring
from instaclone.modules.media.storage import LocalFileStore
from instaclone.routers import health

logger = logging.getLogger(__name__)


class CachedStaticFiles(StaticFiles):
    """StaticFiles mount that enforces Cache-Control when not provided by the file system."""

    def __init__(self, *args, cache_control: str | None = None, **kwargs):
        self._cache_control = cache_control
        super().__init__(*args, **kwargs)

    async def get_response(self, path, scope):
        response = await super().get_response(path, scope)
        if (
            self._cache_control
            and response.status_code == HTTPStatus.OK
            and "cache-control" not in response.headers
        ):
            response.headers["Cache-Control"] = self._cache_control
        return response


def _configure_app(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(LoggingMiddleware)

    origins = settings.cors_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(api_router)


def _mount_uploads(app: FastAPI, file_store: LocalFileStore, settings: Settings) -> None:
    file_store.root.mkdir(parents=True, exist_ok=True)
    app.mount(
        "/uploads",
        CachedStaticFiles(
            directory=file_store.root,
            check_dir=False,
            cache_control=settings.uploads_cache_control,
        ),
        name="uploads",
    )


def create_app(
    settings: Optional[Settings] = None,
    file_store: Optional[LocalFileStore] = None,
) -> FastAPI:
    """
    Application Factory to create and configure the FastAPI application.
    Integrates Logging, Error Handling, Rate Limiting, Middleware and the file store.
    """
    settings = settings or default_settings

    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        app_name="instaclone",
        max_bytes=10 * 1024 * 1024,  # 10 MB
        backup_count=5,
        use_json=settings.use_json_logs,
        use_colors=True,
    )

    app = FastAPI(
        title=settings.SITE_NAME,
        description="Photo sharing API: feed, posts, likes, comments and follows",
        version="1.0.0",
        default_response_class=ORJSONResponse,
    )

    app.state.environment = settings.environment
    app.state.settings = settings
    app.state.file_store = file_store or LocalFileStore(
        Path(settings.uploads_root), settings.uploads_public_url
    )

    # RateLimitExceeded is rendered by register_exception_handlers
    app.state.limiter = limiter
    if hasattr(limiter, "enabled"):
        limiter.enabled = settings.environment.lower() != "test" and (
            os.getenv("APP_ENV", settings.environment).lower() != "test"
        )

    _configure_app(app, settings)
    _mount_uploads(app, app.state.file_store, settings)

    register_exception_handlers(app)

    setup_monitoring(app)

    logger.info("Application startup complete")

    return app


__all__ = ["create_app", "CachedStaticFiles"]

"""ASGI entrypoint: `uvicorn instaclone.main:app`."""

from instaclone.core.app_factory import create_app

app = create_app()

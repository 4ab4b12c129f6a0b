"""Database-aware helpers for SQL column defaults."""

import uuid
from datetime import datetime, timezone

from sqlalchemy.sql import text


def timestamp_default():
    """Return a server-side timestamp default portable across dialects."""
    return text("CURRENT_TIMESTAMP")


def utcnow() -> datetime:
    """Client-side timestamp with sub-second precision for ordering."""
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


__all__ = ["timestamp_default", "utcnow", "new_uuid"]

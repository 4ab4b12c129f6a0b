"""SQLAlchemy models for the social graph."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.sql.sqltypes import TIMESTAMP

from instaclone.models.base import Base
from instaclone.core.db_defaults import new_uuid, timestamp_default, utcnow


class Follow(Base):
    """Directed edge: `follower_id` follows `following_id`."""

    __tablename__ = "follows"

    id = Column(String(36), primary_key=True, default=new_uuid)
    follower_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    following_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=timestamp_default(),
    )

    __table_args__ = (
        UniqueConstraint(
            "follower_id", "following_id", name="follows_follower_id_following_id_key"
        ),
        CheckConstraint("follower_id <> following_id", name="follows_no_self_follow"),
    )

"""SQLAlchemy models for posts, likes and comments."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.sql.sqltypes import TIMESTAMP

from instaclone.models.base import Base
from instaclone.core.db_defaults import new_uuid, timestamp_default, utcnow


def _created_at() -> Column:
    return Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=timestamp_default(),
        index=True,
    )


def _updated_at() -> Column:
    return Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=timestamp_default(),
    )


class Post(Base):
    """An image post owned by the user who created it."""

    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url = Column(String, nullable=False)
    caption = Column(Text, nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class Like(Base):
    __tablename__ = "likes"

    id = Column(String(36), primary_key=True, default=new_uuid)
    post_id = Column(
        String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=timestamp_default(),
    )

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="likes_post_id_user_id_key"),
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=new_uuid)
    post_id = Column(
        String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)
    created_at = _created_at()
    updated_at = _updated_at()

"""SQLAlchemy models for the users domain."""

from __future__ import annotations

from sqlalchemy import Column, String
from sqlalchemy.sql.sqltypes import TIMESTAMP

from instaclone.models.base import Base
from instaclone.core.db_defaults import new_uuid, timestamp_default, utcnow


class User(Base):
    """Application user, bridged to exactly one external-auth identity."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_uuid)
    # Subject claim issued by the external identity provider.
    clerk_id = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=True)
    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=timestamp_default(),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} clerk_id={self.clerk_id}>"

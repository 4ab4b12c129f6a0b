"""Pydantic schemas for users and profiles."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """Author reference embedded in posts and comments."""

    id: str
    name: str


class UserOut(BaseModel):
    id: str
    clerk_id: str
    name: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserProfile(BaseModel):
    id: str
    clerk_id: str
    name: Optional[str] = None
    created_at: datetime
    posts_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    is_following: Optional[bool] = None


class UserSyncRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)

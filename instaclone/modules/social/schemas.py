"""Pydantic schemas for follow edges."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FollowRequest(BaseModel):
    following_id: str = Field(alias="followingId")

    model_config = ConfigDict(populate_by_name=True)


class FollowOut(BaseModel):
    id: str
    follower_id: str
    following_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

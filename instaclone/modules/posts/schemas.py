"""Pydantic schemas for posts, likes and comments.

Request bodies accept the camelCase keys used by the web client (`postId`,
`commentId`); responses are emitted in snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from instaclone.modules.users.schemas import UserSummary


class PostOut(BaseModel):
    id: str
    user_id: str
    image_url: str
    caption: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentOut(BaseModel):
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentWithAuthor(BaseModel):
    id: str
    user_id: str
    content: str
    created_at: datetime
    user: UserSummary


class FeedPost(BaseModel):
    """A post enriched with author, counters and its most recent comments."""

    id: str
    user_id: str
    image_url: str
    caption: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    likes_count: int = 0
    comments_count: int = 0
    user: UserSummary
    recent_comments: List[CommentWithAuthor] = Field(default_factory=list)
    is_liked: bool = False


class PostDetail(FeedPost):
    comments: List[CommentWithAuthor] = Field(default_factory=list)


class LikeOut(BaseModel):
    id: str
    post_id: str
    user_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class _CamelRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LikeRequest(_CamelRequest):
    post_id: str = Field(alias="postId")


class CommentCreate(_CamelRequest):
    post_id: str = Field(alias="postId")
    content: str


class CommentDelete(_CamelRequest):
    comment_id: str = Field(alias="commentId")

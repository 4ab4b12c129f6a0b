"""Posts domain public exports."""

from .models import Comment, Like, Post
from .schemas import (
    CommentCreate,
    CommentDelete,
    CommentOut,
    CommentWithAuthor,
    FeedPost,
    LikeOut,
    LikeRequest,
    PostDetail,
    PostOut,
)

__all__ = [
    "Post",
    "Like",
    "Comment",
    "PostOut",
    "FeedPost",
    "PostDetail",
    "LikeOut",
    "LikeRequest",
    "CommentOut",
    "CommentWithAuthor",
    "CommentCreate",
    "CommentDelete",
]

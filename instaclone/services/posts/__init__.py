"""Post-domain services."""

from .feed import FeedAssembler
from .like_service import LikeService
from .post_service import PostService

__all__ = ["FeedAssembler", "LikeService", "PostService"]

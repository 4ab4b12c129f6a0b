"""Read-side assembly of feed pages and post detail.

Each page is read from the post-stats aggregate, then every post is enriched
with its author and most recent comments through follow-up queries. The
per-post reads are deliberate: pages are small and the queries are simple.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from instaclone.core.config import Settings, settings as default_settings
from instaclone.core.exceptions import ResourceNotFoundException, ValidationException
from instaclone.modules.posts.models import Comment, Like, Post
from instaclone.modules.posts.schemas import CommentWithAuthor, FeedPost, PostDetail
from instaclone.modules.posts.stats import post_stats
from instaclone.modules.users.models import User
from instaclone.modules.users.schemas import UserSummary

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"


class FeedAssembler:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self._authors: Dict[str, UserSummary] = {}

    def author(self, user_id: str) -> UserSummary:
        """Author summary for `user_id`, falling back to "Unknown" for missing rows."""
        if user_id not in self._authors:
            row = self.db.query(User.id, User.name).filter(User.id == user_id).first()
            name = row.name if row is not None and row.name else UNKNOWN_AUTHOR
            self._authors[user_id] = UserSummary(id=user_id, name=name)
        return self._authors[user_id]

    def comments(self, post_id: str, limit: Optional[int] = None) -> List[CommentWithAuthor]:
        """Comments on `post_id`, newest first."""
        query = (
            self.db.query(Comment)
            .filter(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [
            CommentWithAuthor(
                id=comment.id,
                user_id=comment.user_id,
                content=comment.content,
                created_at=comment.created_at,
                user=self.author(comment.user_id),
            )
            for comment in query.all()
        ]

    def _liked_post_ids(self, post_ids: List[str], viewer_id: Optional[str]) -> set:
        if not viewer_id or not post_ids:
            return set()
        rows = (
            self.db.query(Like.post_id)
            .filter(Like.user_id == viewer_id, Like.post_id.in_(post_ids))
            .all()
        )
        return {row.post_id for row in rows}

    def _post_fields(self, post: Post, likes_count: int, comments_count: int, **extra):
        return dict(
            id=post.id,
            user_id=post.user_id,
            image_url=post.image_url,
            caption=post.caption,
            created_at=post.created_at,
            # Posts are never edited, so updated_at tracks creation.
            updated_at=post.created_at,
            likes_count=likes_count or 0,
            comments_count=comments_count or 0,
            user=self.author(post.user_id),
            **extra,
        )

    def list_posts(
        self,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
        user_id: Optional[str] = None,
        viewer_id: Optional[str] = None,
    ) -> List[FeedPost]:
        """One page of posts, newest first; a short page means the feed is exhausted."""
        if limit is None:
            limit = self.settings.FEED_DEFAULT_LIMIT
        max_limit = self.settings.FEED_MAX_LIMIT
        if not 1 <= limit <= max_limit:
            raise ValidationException(f"limit must be between 1 and {max_limit}", field="limit")
        stmt = post_stats()
        if user_id:
            stmt = stmt.where(Post.user_id == user_id)
        stmt = stmt.order_by(Post.created_at.desc()).offset(offset).limit(limit)
        rows = self.db.execute(stmt).all()

        liked = self._liked_post_ids([row.Post.id for row in rows], viewer_id)
        recent = self.settings.FEED_RECENT_COMMENTS
        page = [
            FeedPost(
                **self._post_fields(
                    row.Post,
                    row.likes_count,
                    row.comments_count,
                    recent_comments=self.comments(row.Post.id, limit=recent),
                    is_liked=row.Post.id in liked,
                )
            )
            for row in rows
        ]
        logger.debug("Assembled feed page offset=%s size=%s", offset, len(page))
        return page

    def get_post(self, post_id: str, *, viewer_id: Optional[str] = None) -> PostDetail:
        row = self.db.execute(post_stats().where(Post.id == post_id)).first()
        if row is None:
            raise ResourceNotFoundException("Post", post_id)

        comments = self.comments(post_id)
        return PostDetail(
            **self._post_fields(
                row.Post,
                row.likes_count,
                row.comments_count,
                recent_comments=comments[: self.settings.FEED_RECENT_COMMENTS],
                comments=comments,
                is_liked=post_id in self._liked_post_ids([post_id], viewer_id),
            )
        )

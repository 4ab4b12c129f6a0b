"""Business logic for adding and deleting comments."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from instaclone.core.exceptions import (
    EmptyContentException,
    MissingFieldException,
    ResourceNotFoundException,
    StoreUnavailableException,
)
from instaclone.modules.posts.models import Comment, Post
from instaclone.services.ownership import ensure_owner

logger = logging.getLogger(__name__)


class CommentService:
    """Encapsulates comment workflows."""

    def __init__(self, db: Session):
        self.db = db

    def add_comment(self, *, post_id: str, user_id: str, content: str) -> Comment:
        if not post_id or not post_id.strip():
            raise MissingFieldException("postId")
        text = (content or "").strip()
        if not text:
            raise EmptyContentException()

        if self.db.query(Post.id).filter(Post.id == post_id).first() is None:
            raise ResourceNotFoundException("Post", post_id)

        comment = Comment(post_id=post_id, user_id=user_id, content=text)
        try:
            self.db.add(comment)
            self.db.commit()
            self.db.refresh(comment)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to create comment on post %s", post_id, exc_info=True)
            raise StoreUnavailableException("Failed to create comment") from exc
        return comment

    def delete_comment(self, *, comment_id: str, user_id: str) -> None:
        if not comment_id or not comment_id.strip():
            raise MissingFieldException("commentId")

        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if comment is None:
            raise ResourceNotFoundException("Comment", comment_id)
        ensure_owner(
            comment.user_id, user_id, message="You can only delete your own comments"
        )

        try:
            self.db.query(Comment).filter(Comment.id == comment_id).delete(
                synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to delete comment %s", comment_id, exc_info=True)
            raise StoreUnavailableException("Failed to delete comment") from exc

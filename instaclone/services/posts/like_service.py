"""Business logic for liking and unliking posts."""

from __future__ import annotations

import logging

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from instaclone.core.exceptions import (
    AlreadyLikedException,
    MissingFieldException,
    ResourceNotFoundException,
    StoreUnavailableException,
)
from instaclone.modules.posts.models import Like, Post

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class LikeService:
    """Idempotent like/unlike keyed on the (post_id, user_id) pair."""

    def __init__(self, db: Session):
        self.db = db

    def _require_post(self, post_id: str) -> None:
        if not post_id or not post_id.strip():
            raise MissingFieldException("postId")
        exists = self.db.query(Post.id).filter(Post.id == post_id).first()
        if exists is None:
            raise ResourceNotFoundException("Post", post_id)

    def _find(self, post_id: str, user_id: str):
        return (
            self.db.query(Like)
            .filter(Like.post_id == post_id, Like.user_id == user_id)
            .first()
        )

    def like_post(self, *, post_id: str, user_id: str) -> Like:
        """Insert the like or keep the existing one; both outcomes are a success."""
        self._require_post(post_id)

        insert = _UPSERT_DIALECTS.get(self.db.get_bind().dialect.name)
        try:
            if insert is not None:
                stmt = (
                    insert(Like.__table__)
                    .values(post_id=post_id, user_id=user_id)
                    .on_conflict_do_nothing(index_elements=["post_id", "user_id"])
                )
                self.db.execute(stmt)
            elif self._find(post_id, user_id) is None:
                self.db.add(Like(post_id=post_id, user_id=user_id))
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            # Only reachable when the store lacks an upsert and a concurrent
            # request inserted the same pair between the check and the insert.
            if self._find(post_id, user_id) is not None:
                raise AlreadyLikedException() from exc
            logger.error("Failed to add like on post %s", post_id, exc_info=True)
            raise StoreUnavailableException("Failed to add like") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to add like on post %s", post_id, exc_info=True)
            raise StoreUnavailableException("Failed to add like") from exc

        like = self._find(post_id, user_id)
        if like is None:
            raise StoreUnavailableException("Failed to add like")
        return like

    def unlike_post(self, *, post_id: str, user_id: str) -> None:
        """Delete the like if present; an absent like is a no-op."""
        self._require_post(post_id)
        try:
            self.db.query(Like).filter(
                Like.post_id == post_id, Like.user_id == user_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to remove like on post %s", post_id, exc_info=True)
            raise StoreUnavailableException("Failed to remove like") from exc

    def is_liked(self, *, post_id: str, user_id: str) -> bool:
        return self._find(post_id, user_id) is not None

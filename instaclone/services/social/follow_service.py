"""Business logic for follow/unfollow flows."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from instaclone.core.exceptions import (
    AlreadyFollowingException,
    MissingFieldException,
    ResourceNotFoundException,
    SelfFollowException,
    StoreUnavailableException,
)
from instaclone.modules.social.models import Follow
from instaclone.modules.users.models import User

logger = logging.getLogger(__name__)


class FollowService:
    """Encapsulates follow/unfollow workflows."""

    def __init__(self, db: Session):
        self.db = db

    def _validate_target(self, follower_id: str, following_id: str) -> None:
        if not following_id or not following_id.strip():
            raise MissingFieldException("followingId")
        if following_id == follower_id:
            raise SelfFollowException()
        if self.db.query(User.id).filter(User.id == following_id).first() is None:
            raise ResourceNotFoundException("User", following_id)

    def _find(self, follower_id: str, following_id: str):
        return (
            self.db.query(Follow)
            .filter(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
            .first()
        )

    def is_following(self, *, follower_id: str, following_id: str) -> bool:
        return self._find(follower_id, following_id) is not None

    def follow(self, *, follower_id: str, following_id: str) -> Follow:
        self._validate_target(follower_id, following_id)

        if self._find(follower_id, following_id) is not None:
            raise AlreadyFollowingException()

        follow = Follow(follower_id=follower_id, following_id=following_id)
        try:
            self.db.add(follow)
            self.db.commit()
            self.db.refresh(follow)
        except IntegrityError as exc:
            self.db.rollback()
            # A concurrent request won the unique (follower, following) pair.
            if self._find(follower_id, following_id) is not None:
                raise AlreadyFollowingException() from exc
            logger.error("Failed to follow user %s", following_id, exc_info=True)
            raise StoreUnavailableException("Failed to follow user") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to follow user %s", following_id, exc_info=True)
            raise StoreUnavailableException("Failed to follow user") from exc

        logger.info("User %s followed %s", follower_id, following_id)
        return follow

    def unfollow(self, *, follower_id: str, following_id: str) -> None:
        """Remove the edge if present; an absent edge is a no-op."""
        if not following_id or not following_id.strip():
            raise MissingFieldException("followingId")
        if self.db.query(User.id).filter(User.id == following_id).first() is None:
            raise ResourceNotFoundException("User", following_id)
        try:
            self.db.query(Follow).filter(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to unfollow user %s", following_id, exc_info=True)
            raise StoreUnavailableException("Failed to unfollow user") from exc

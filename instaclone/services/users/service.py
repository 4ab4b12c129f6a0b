"""User provisioning and profile reads."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from instaclone.core.exceptions import ResourceNotFoundException, StoreUnavailableException
from instaclone.modules.social.models import Follow
from instaclone.modules.users.models import User
from instaclone.modules.users.schemas import UserProfile
from instaclone.modules.posts.stats import user_stats

logger = logging.getLogger(__name__)


class UserService:
    """Encapsulates user sync and profile assembly."""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str, *, viewer_id: Optional[str] = None) -> UserProfile:
        """Profile with counters; `is_following` is False for anonymous or self views."""
        row = self.db.execute(user_stats().where(User.id == user_id)).first()
        if row is None:
            raise ResourceNotFoundException("User", user_id)

        is_following = False
        if viewer_id and viewer_id != user_id:
            is_following = (
                self.db.query(Follow.id)
                .filter(Follow.follower_id == viewer_id, Follow.following_id == user_id)
                .first()
                is not None
            )

        user = row.User
        return UserProfile(
            id=user.id,
            clerk_id=user.clerk_id,
            name=user.name,
            created_at=user.created_at,
            posts_count=row.posts_count or 0,
            followers_count=row.followers_count or 0,
            following_count=row.following_count or 0,
            is_following=is_following,
        )

    def sync_user(self, *, external_id: str, name: Optional[str] = None) -> Tuple[User, bool]:
        """Provision the users row for `external_id`; returns (user, created)."""
        name = name.strip() if name and name.strip() else None
        user = self.db.query(User).filter(User.clerk_id == external_id).first()
        if user is not None:
            if name and user.name != name:
                user.name = name
                try:
                    self.db.commit()
                except SQLAlchemyError as exc:
                    self.db.rollback()
                    logger.error("Failed to update user %s", user.id, exc_info=True)
                    raise StoreUnavailableException("Failed to sync user") from exc
                self.db.refresh(user)
            return user, False

        user = User(clerk_id=external_id, name=name)
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # Another request provisioned the same identity first.
            existing = self.db.query(User).filter(User.clerk_id == external_id).first()
            if existing is None:
                raise StoreUnavailableException("Failed to sync user")
            return existing, False
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to provision user for %s", external_id, exc_info=True)
            raise StoreUnavailableException("Failed to sync user") from exc

        self.db.refresh(user)
        logger.info("Provisioned user %s for identity %s", user.id, external_id)
        return user, True

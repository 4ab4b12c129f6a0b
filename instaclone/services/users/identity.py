"""Bridge between external-auth identities and internal user ids."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from instaclone.core.exceptions import StoreUnavailableException, UserNotProvisionedException
from instaclone.modules.users.models import User

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Map an external-auth subject to the internal `users.id`.

    `resolve` has three outcomes: the internal id, `None` when no row exists,
    or `StoreUnavailableException` when the lookup itself fails. A miss is a
    normal result and is never raised from `resolve`.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, external_id: str) -> Optional[str]:
        if not external_id:
            raise ValueError("external_id must be a non-empty string")
        try:
            row = (
                self.db.query(User.id).filter(User.clerk_id == external_id).first()
            )
        except SQLAlchemyError as exc:
            logger.error(
                "Identity lookup failed for %s", external_id, exc_info=True
            )
            raise StoreUnavailableException() from exc
        return row[0] if row else None

    def require(self, external_id: str) -> str:
        """Like `resolve`, but a miss becomes a 404 for the caller."""
        user_id = self.resolve(external_id)
        if user_id is None:
            logger.info("No user row for identity %s", external_id)
            raise UserNotProvisionedException()
        return user_id

"""Ownership checks for mutating posts and comments."""

from __future__ import annotations

from typing import Optional

from instaclone.core.exceptions import OwnershipRequiredException


def is_owner(owner_id: Optional[str], acting_user_id: Optional[str]) -> bool:
    """True only when both ids are present and equal."""
    return owner_id is not None and acting_user_id is not None and owner_id == acting_user_id


def ensure_owner(owner_id: Optional[str], acting_user_id: Optional[str], *, message: str) -> None:
    if not is_owner(owner_id, acting_user_id):
        raise OwnershipRequiredException(message)

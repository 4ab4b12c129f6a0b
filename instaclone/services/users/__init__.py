"""User-domain services."""

from .identity import IdentityResolver
from .service import UserService

__all__ = ["IdentityResolver", "UserService"]

"""Users domain public exports."""

from .models import User
from .schemas import UserOut, UserProfile, UserSummary, UserSyncRequest

__all__ = ["User", "UserOut", "UserProfile", "UserSummary", "UserSyncRequest"]

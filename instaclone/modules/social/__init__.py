"""Social graph public exports."""

from .models import Follow
from .schemas import FollowOut, FollowRequest

__all__ = ["Follow", "FollowOut", "FollowRequest"]

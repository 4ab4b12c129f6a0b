"""Async client for the instaclone API with optimistic like/follow toggles."""

from .api_client import ApiClient
from .errors import ApiError, ErrorKind, describe_error
from .toggle import (
    FollowToggle,
    InFlightGuard,
    LikeToggle,
    OptimisticToggle,
    ToggleOutcome,
    ToggleState,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "ErrorKind",
    "describe_error",
    "OptimisticToggle",
    "LikeToggle",
    "FollowToggle",
    "InFlightGuard",
    "ToggleOutcome",
    "ToggleState",
]

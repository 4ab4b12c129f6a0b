"""Optimistic toggles for likes and follows.

A toggle flips its local state (and counter) immediately, commits the change
through the API, and restores the previous state when the call fails. While a
call is in flight for a resource, further toggles on that resource are
suppressed, so displayed counts never diverge from what was sent.

States: IDLE -> PENDING -> IDLE on success, PENDING -> ROLLED_BACK on failure.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Optional, Set

from instaclone.client.api_client import ApiClient
from instaclone.client.errors import ApiError, ErrorKind, describe_error

logger = logging.getLogger(__name__)


class ToggleState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    ROLLED_BACK = "rolled_back"


class ToggleOutcome(str, enum.Enum):
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    SUPPRESSED = "suppressed"


class InFlightGuard:
    """At most one request in flight per resource key.

    Share one guard between toggles that render the same resource.
    """

    def __init__(self) -> None:
        self._keys: Set[str] = set()

    def acquire(self, key: str) -> bool:
        if key in self._keys:
            return False
        self._keys.add(key)
        return True

    def release(self, key: str) -> None:
        self._keys.discard(key)

    def __contains__(self, key: str) -> bool:
        return key in self._keys


class OptimisticToggle:
    """Base class; subclasses implement `_commit` and name their resource key."""

    def __init__(
        self,
        client: ApiClient,
        *,
        active: bool,
        count: int = 0,
        guard: Optional[InFlightGuard] = None,
        on_change: Optional[Callable[["OptimisticToggle"], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.client = client
        self.active = active
        self.count = max(count, 0)
        self.state = ToggleState.IDLE
        self.error: Optional[str] = None
        self.guard = guard or InFlightGuard()
        self.on_change = on_change
        self.on_error = on_error

    @property
    def key(self) -> str:
        raise NotImplementedError

    async def _commit(self, active: bool) -> None:
        raise NotImplementedError

    def is_silent(self, error: ApiError) -> bool:
        """Failures that roll back without surfacing a message."""
        return False

    def _apply(self, active: bool, count: int) -> None:
        self.active = active
        self.count = max(count, 0)
        if self.on_change:
            self.on_change(self)

    async def toggle(self) -> ToggleOutcome:
        if not self.guard.acquire(self.key):
            logger.debug("Toggle on %s suppressed: request in flight", self.key)
            return ToggleOutcome.SUPPRESSED

        previous = (self.active, self.count)
        target = not self.active
        self.state = ToggleState.PENDING
        self.error = None
        self._apply(target, self.count + (1 if target else -1))
        try:
            await self._commit(target)
        except ApiError as exc:
            self._apply(*previous)
            self.state = ToggleState.ROLLED_BACK
            if not self.is_silent(exc):
                self.error = describe_error(exc)
                logger.info("Toggle on %s rolled back: %s", self.key, exc.message)
                if self.on_error:
                    self.on_error(self.error)
            return ToggleOutcome.ROLLED_BACK
        except BaseException:
            # Cancellation or an unexpected client error: restore, then propagate.
            self._apply(*previous)
            self.state = ToggleState.ROLLED_BACK
            raise
        finally:
            self.guard.release(self.key)

        self.state = ToggleState.IDLE
        return ToggleOutcome.COMMITTED


class LikeToggle(OptimisticToggle):
    """Heart button state for one post."""

    def __init__(self, client: ApiClient, post_id: str, *, liked: bool, likes_count: int, **kwargs):
        self.post_id = post_id
        super().__init__(client, active=liked, count=likes_count, **kwargs)

    @property
    def key(self) -> str:
        return f"like:{self.post_id}"

    @property
    def liked(self) -> bool:
        return self.active

    @property
    def likes_count(self) -> int:
        return self.count

    async def _commit(self, active: bool) -> None:
        if active:
            await self.client.like(self.post_id)
        else:
            await self.client.unlike(self.post_id)

    def is_silent(self, error: ApiError) -> bool:
        return error.message in ("Already liked", "Unauthorized") or error.kind is ErrorKind.AUTH


class FollowToggle(OptimisticToggle):
    """Follow button state for one profile."""

    def __init__(
        self, client: ApiClient, user_id: str, *, following: bool, followers_count: int = 0, **kwargs
    ):
        self.user_id = user_id
        super().__init__(client, active=following, count=followers_count, **kwargs)

    @property
    def key(self) -> str:
        return f"follow:{self.user_id}"

    @property
    def following(self) -> bool:
        return self.active

    @property
    def followers_count(self) -> int:
        return self.count

    async def _commit(self, active: bool) -> None:
        if active:
            await self.client.follow(self.user_id)
        else:
            await self.client.unfollow(self.user_id)

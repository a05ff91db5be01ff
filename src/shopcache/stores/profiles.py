"""User profile cache with a per-user circuit breaker."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from shopcache.backends.base import ProfileBackend
from shopcache.cache import now_ms
from shopcache.duration import parse_duration
from shopcache.errors import ShapeError, StoreError
from shopcache.resource import CachedResource
from shopcache.toast import ToastSink
from shopcache.types import Clock, Duration, UserProfile

logger = logging.getLogger(__name__)


def _profile_payload(raw: Any) -> UserProfile:
    if not isinstance(raw, dict) or not isinstance(raw.get("profile"), dict):
        raise ShapeError("Malformed profile response: missing 'profile' object")
    return raw["profile"]


@dataclass(slots=True)
class _Failures:
    count: int
    last_failed: int  # Unix timestamp ms


class UserProfiles:
    """Cached profile lookups.

    After ``max_failures`` consecutive failed fetches for a user, further
    fetches for that user are skipped for ``reset_after`` and the last cached
    profile (or None) is returned instead.
    """

    def __init__(
        self,
        backend: ProfileBackend,
        *,
        ttl: Duration = "10m",
        max_failures: int = 3,
        reset_after: Duration = "5m",
        clock: Clock = now_ms,
        toast: ToastSink | None = None,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self._max_failures = max_failures
        self._reset_after = parse_duration(reset_after)
        self._failures: dict[str, _Failures] = {}
        self._resource: CachedResource[UserProfile] = CachedResource(
            "profiles",
            ttl=ttl,
            normalize=_profile_payload,
            clock=clock,
            toast=toast,
            error_message="Failed to load profile",
        )

    @property
    def resource(self) -> CachedResource[UserProfile]:
        return self._resource

    def failure_count(self, user_id: str) -> int:
        failures = self._failures.get(user_id)
        return failures.count if failures else 0

    async def get(self, user_id: str, use_cache: bool = True) -> UserProfile | None:
        """Profile for user_id; bypasses a valid cache entry when use_cache is False."""
        key = f"profile:{user_id}"
        if not self._should_attempt(user_id):
            logger.warning(
                "profile fetch for %s blocked after %d failures",
                user_id,
                self._max_failures,
            )
            return self._resource.stale(key)

        async def fetch() -> dict[str, Any]:
            try:
                raw = await self._backend.get_profile(user_id)
            except StoreError:
                self._record_failure(user_id)
                raise
            self._failures.pop(user_id, None)
            return raw

        return await self._resource.load(key, fetch, force=not use_cache)

    def clear(self, user_id: str | None = None) -> None:
        """Forget one user's profile and failures, or everyone's."""
        if user_id is None:
            self._resource.clear()
            self._failures.clear()
            return
        key = f"profile:{user_id}"
        self._resource.invalidate(key)
        self._resource.cancel(key)
        self._failures.pop(user_id, None)

    def _should_attempt(self, user_id: str) -> bool:
        failures = self._failures.get(user_id)
        if failures is None or failures.count < self._max_failures:
            return True
        if self._clock() - failures.last_failed < self._reset_after:
            return False
        del self._failures[user_id]
        return True

    def _record_failure(self, user_id: str) -> None:
        failures = self._failures.get(user_id)
        count = failures.count + 1 if failures else 1
        self._failures[user_id] = _Failures(count=count, last_failed=self._clock())

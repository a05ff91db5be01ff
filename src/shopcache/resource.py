"""Generic cached resource: TTL cache + single-flight fetcher.

Each data domain (products, orders, addresses, profiles) instantiates one
CachedResource instead of hand-rolling its own cache map:

    resource = CachedResource("addresses", ttl="5m", normalize=_addresses)
    data = await resource.load(f"addresses:{user_id}", fetch)

The control flow of load():
- valid cache entry and not forced: return it without awaiting
- a request for the key is in flight: join it
- otherwise: fetch, normalize, write the cache and return
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, Generic, TypeVar

from shopcache.cache import TTLCache, now_ms
from shopcache.errors import RequestCancelledError, StoreError, TransientError
from shopcache.inflight import InFlightRegistry
from shopcache.toast import LoggingToastSink, ToastSink
from shopcache.types import Clock, Duration

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _identity(raw: Any) -> Any:
    return raw


class CachedResource(Generic[T]):
    """Keyed, TTL-cached, request-deduplicated data source."""

    def __init__(
        self,
        name: str,
        *,
        ttl: Duration,
        normalize: Callable[[Any], T] = _identity,
        clock: Clock = now_ms,
        toast: ToastSink | None = None,
        error_message: str | None = None,
    ) -> None:
        self.name = name
        self._cache: TTLCache[T] = TTLCache(ttl, clock=clock)
        self._registry = InFlightRegistry()
        self._normalize = normalize
        self._toast = toast if toast is not None else LoggingToastSink()
        self._error_message = error_message or f"Failed to load {name}"

    @property
    def cache(self) -> TTLCache[T]:
        return self._cache

    @property
    def pending(self) -> InFlightRegistry:
        return self._registry

    async def load(
        self,
        key: str,
        fn: Callable[[], Awaitable[Any]],
        *,
        force: bool = False,
    ) -> T:
        """Fetch with caching, stale fallback and request coalescing.

        Args:
            key: Cache key, already scoped (user id, page, filters)
            fn: Async function performing the network call
            force: Skip the cache check (still joins an in-flight request)

        Returns:
            Cached, fresh or (on transient failure) stale data
        """
        entry = self._cache.entry(key)
        if not force and entry is not None and self._cache.is_valid(entry):
            logger.debug("%s: cache hit for %s", self.name, key)
            return entry.value

        return await self._registry.run(key, partial(self._fetch, key, fn))

    def peek(self, key: str) -> T | None:
        """Valid cached value for key, without fetching."""
        return self._cache.read(key)

    def stale(self, key: str) -> T | None:
        """Cached value for key regardless of age."""
        entry = self._cache.entry(key)
        return entry.value if entry is not None else None

    def invalidate(self, key: str | None = None) -> None:
        """Drop one cache entry, or all of them."""
        if key is None:
            self._cache.clear()
        else:
            self._cache.delete(key)

    def cancel(self, key: str) -> bool:
        """Abort the in-flight request for key."""
        return self._registry.cancel(key)

    def cancel_others(self, key: str) -> None:
        """Abort every in-flight request except the one for key."""
        for other in self._registry.keys():
            if other != key:
                logger.debug("%s: aborting superseded request %s", self.name, other)
                self._registry.cancel(other)

    def clear(self) -> None:
        """Drop all entries and abort all in-flight requests."""
        self._cache.clear()
        self._registry.cancel_all()

    async def _fetch(self, key: str, fn: Callable[[], Awaitable[Any]]) -> T:
        logger.debug("%s: fetching %s", self.name, key)
        try:
            value = self._normalize(await fn())
        except TransientError as exc:
            entry = self._cache.entry(key)
            if entry is not None:
                # Served as-is: the TTL clock is not restarted
                logger.warning(
                    "%s: serving stale %s after fetch failure: %s", self.name, key, exc
                )
                return entry.value
            logger.error("%s: fetch for %s failed: %s", self.name, key, exc)
            self._toast.show_toast(self._error_message, "error")
            raise
        except RequestCancelledError:
            raise
        except StoreError as exc:
            logger.error("%s: fetch for %s rejected: %s", self.name, key, exc)
            self._toast.show_toast(exc.message, "error")
            raise

        self._cache.write(key, value)
        return value


__all__ = ["CachedResource"]

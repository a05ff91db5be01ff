"""In-memory TTL cache cells."""

import time
from collections.abc import Iterator
from typing import Generic, TypeVar

from shopcache.duration import parse_duration
from shopcache.types import CacheEntry, Clock, Duration

T = TypeVar("T")


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


class TTLCache(Generic[T]):
    """Keyed cache cells with a fixed time to live.

    No eviction and no size bound. Writes always replace the whole entry.
    """

    def __init__(self, ttl: Duration, *, clock: Clock = now_ms) -> None:
        self._ttl = parse_duration(ttl)
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    @property
    def ttl(self) -> int:
        """Time to live in milliseconds."""
        return self._ttl

    def is_valid(self, entry: CacheEntry[T] | None) -> bool:
        """Check that an entry exists and is younger than the TTL."""
        if entry is None:
            return False
        return self._clock() - entry.created_at < self._ttl

    def read(self, key: str) -> T | None:
        """Return the cached value only while it is valid."""
        entry = self._entries.get(key)
        if entry is None or not self.is_valid(entry):
            return None
        return entry.value

    def write(self, key: str, value: T) -> CacheEntry[T]:
        """Replace the entry for key and restart its TTL."""
        entry = CacheEntry(value=value, created_at=self._clock())
        self._entries[key] = entry
        return entry

    def entry(self, key: str) -> CacheEntry[T] | None:
        """Raw entry for key, valid or stale."""
        return self._entries.get(key)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

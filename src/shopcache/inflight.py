"""In-flight request registry (single-flight coalescing)."""

import asyncio
from collections.abc import Callable, Coroutine
from functools import partial
from typing import Any, TypeVar, cast

from shopcache.errors import RequestCancelledError

T = TypeVar("T")


class InFlightRegistry:
    """Maps a cache key to the one request currently fetching it.

    At most one task exists per key. The entry is dropped the moment its task
    settles, whether it succeeded, failed or was cancelled.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Task[Any]] = {}

    def get(self, key: str) -> asyncio.Task[Any] | None:
        """Get the pending task for key."""
        return self._pending.get(key)

    def set(self, key: str, task: asyncio.Task[Any]) -> None:
        """Register task as the pending request for key."""
        self._pending[key] = task
        task.add_done_callback(partial(self._settled, key))

    def delete(self, key: str) -> None:
        """Forget the pending request for key without cancelling it."""
        self._pending.pop(key, None)

    def _settled(self, key: str, task: asyncio.Task[Any]) -> None:
        # A newer request may already own the key after a cancel()
        if self._pending.get(key) is task:
            del self._pending[key]
        if not task.cancelled():
            task.exception()  # mark retrieved when every waiter went away

    async def run(self, key: str, fn: Callable[[], Coroutine[Any, Any, T]]) -> T:
        """Join the pending request for key, or start one.

        Registration happens before the first await so concurrent callers
        cannot slip past the check.
        """
        task = self._pending.get(key)
        if task is None:
            task = asyncio.create_task(fn(), name=f"shopcache:{key}")
            self.set(key, task)

        try:
            return cast(T, await asyncio.shield(task))
        except asyncio.CancelledError:
            if task.cancelled():
                raise RequestCancelledError(key) from None
            raise

    def cancel(self, key: str) -> bool:
        """Abort the pending request for key. Returns True if one was running."""
        task = self._pending.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        """Abort every pending request."""
        for key in list(self._pending):
            self.cancel(key)

    def keys(self) -> list[str]:
        return list(self._pending)

    def __contains__(self, key: object) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

"""Order history for the signed-in user."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from shopcache.backends.base import ProfileBackend
from shopcache.cache import now_ms
from shopcache.errors import (
    NotAuthenticatedError,
    RequestCancelledError,
    ShapeError,
    StoreError,
)
from shopcache.resource import CachedResource
from shopcache.toast import LoggingToastSink, ToastSink
from shopcache.types import Clock, Duration, Order, OrderPage, PaginatedCollection

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


def _orders_payload(raw: Any) -> list[Order]:
    if not isinstance(raw, dict) or not isinstance(raw.get("orders"), list):
        raise ShapeError("Malformed orders response: missing 'orders' array")
    return raw["orders"]


def _count_payload(raw: Any) -> int:
    count = raw.get("count") if isinstance(raw, dict) else None
    if count is None:
        return 0
    if not isinstance(count, int):
        raise ShapeError("Malformed orders count response")
    return count


class OrderHistory:
    """Paginated, per-page cached orders of the current user.

    ``has_more`` is inferred from a full page by default, so an exactly full
    last page still reports more. Pass ``exact_has_more=True`` to derive it
    from the total count instead.
    """

    def __init__(
        self,
        backend: ProfileBackend,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        ttl: Duration = "5m",
        exact_has_more: bool = False,
        clock: Clock = now_ms,
        toast: ToastSink | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._backend = backend
        self._page_size = page_size
        self._exact_has_more = exact_has_more
        self._toast = toast if toast is not None else LoggingToastSink()
        self._pages: CachedResource[OrderPage] = CachedResource(
            "orders",
            ttl=ttl,
            clock=clock,
            toast=self._toast,
            error_message="Failed to load orders",
        )
        self._user_id: str | None = None
        self._collection: PaginatedCollection[Order] = PaginatedCollection()
        self._loading = False
        self._loading_more = False

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def collection(self) -> PaginatedCollection[Order]:
        return self._collection

    @property
    def orders(self) -> list[Order]:
        return list(self._collection.items)

    @property
    def total_count(self) -> int:
        return self._collection.total_count

    @property
    def has_more(self) -> bool:
        return self._collection.has_more

    @property
    def current_page(self) -> int:
        return self._collection.current_page

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_loading_more(self) -> bool:
        return self._loading_more

    @property
    def resource(self) -> CachedResource[OrderPage]:
        return self._pages

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def set_user(self, user_id: str | None) -> None:
        """Scope the store to user_id; a different user starts from empty."""
        if user_id != self._user_id:
            self.clear()
            self._user_id = user_id

    def clear(self) -> None:
        self._pages.clear()
        self._collection = PaginatedCollection()
        self._loading = False
        self._loading_more = False

    async def load_page(
        self, page: int = 0, append: bool = False, *, force: bool = False
    ) -> PaginatedCollection[Order] | None:
        """Load one page, replacing or extending the collection.

        Returns None when the load was aborted by a newer one.
        """
        user_id = self._user_id
        if user_id is None:
            return PaginatedCollection()

        key = f"orders:{user_id}:{page}"
        self._pages.cancel_others(key)
        if append:
            self._loading_more = True
        else:
            self._loading = True
        try:
            result = await self._pages.load(
                key, partial(self._fetch_page, user_id, page), force=force
            )
        except RequestCancelledError:
            logger.debug("orders page %d load superseded", page)
            return None
        finally:
            if append:
                self._loading_more = False
            else:
                self._loading = False

        if user_id != self._user_id:
            return None

        items = self._collection.items + result.items if append else list(result.items)
        self._collection = PaginatedCollection(
            items=items,
            total_count=result.total_count,
            has_more=self._has_more(page, len(result.items), result.total_count),
            current_page=page,
        )
        return self._collection

    async def load_more(self) -> PaginatedCollection[Order] | None:
        """Append the next page, if there is one and none is loading."""
        if not self._collection.has_more or self._loading_more:
            return None
        return await self.load_page(self._collection.current_page + 1, append=True)

    async def refresh(self) -> PaginatedCollection[Order] | None:
        """Drop every cached page and refetch the first one."""
        self._pages.invalidate()
        return await self.load_page(0)

    async def cancel_order(self, order_id: str) -> dict[str, Any]:
        """Cancel one of the current user's orders, then reload."""
        user_id = self._user_id
        if user_id is None:
            raise NotAuthenticatedError()
        try:
            result = await self._backend.cancel_order(order_id, user_id)
        except StoreError as exc:
            logger.error("cancelling order %s failed: %s", order_id, exc)
            self._toast.show_toast(exc.message, "error")
            raise
        self._toast.show_toast("Order cancelled successfully", "success")
        await self.refresh()
        return result

    def get_order(self, order_id: str) -> Order | None:
        for order in self._collection.items:
            if order.get("id") == order_id:
                return order
        return None

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    async def _fetch_page(self, user_id: str, page: int) -> OrderPage:
        if page == 0:
            total = _count_payload(await self._backend.count_orders(user_id))
        else:
            total = self._collection.total_count
        raw = await self._backend.list_orders(
            user_id, offset=page * self._page_size, limit=self._page_size
        )
        return OrderPage(items=_orders_payload(raw), total_count=total)

    def _has_more(self, page: int, returned: int, total: int) -> bool:
        if self._exact_has_more:
            return (page + 1) * self._page_size < total
        return returned == self._page_size

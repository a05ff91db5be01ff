"""Admin order management."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial
from typing import Any, TypeVar
from urllib.parse import urlencode

from shopcache.admin.listing import PageInfo
from shopcache.backends.base import AdminBackend
from shopcache.cache import now_ms
from shopcache.errors import ShapeError, StoreError
from shopcache.resource import CachedResource
from shopcache.toast import LoggingToastSink, ToastSink
from shopcache.types import Clock, Duration, Order

logger = logging.getLogger(__name__)

R = TypeVar("R")

SORT_COLUMNS = ("created_at", "total_amount", "status")


@dataclass(frozen=True, slots=True)
class OrderStats:
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    total_revenue: float = 0.0


@dataclass(frozen=True, slots=True)
class AdminOrderListing:
    orders: list[Order]
    count: int
    stats: OrderStats
    page_info: PageInfo


@dataclass(frozen=True, slots=True)
class DashboardStats:
    total_orders: int
    total_revenue: float
    total_users: int
    pending_orders: int


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _listing_payload(raw: Any) -> AdminOrderListing:
    if not isinstance(raw, dict) or not isinstance(raw.get("orders"), list):
        raise ShapeError("Malformed admin orders response: missing 'orders' array")
    stats = raw.get("stats") or {}
    pagination = raw.get("pagination") or {}
    if not isinstance(stats, dict) or not isinstance(pagination, dict):
        raise ShapeError("Malformed admin orders response: bad 'stats' or 'pagination'")
    count = int(_number(raw.get("count")))
    return AdminOrderListing(
        orders=raw["orders"],
        count=count,
        stats=OrderStats(
            total=int(_number(stats.get("total"))),
            pending=int(_number(stats.get("pending"))),
            confirmed=int(_number(stats.get("confirmed"))),
            processing=int(_number(stats.get("processing"))),
            shipped=int(_number(stats.get("shipped"))),
            delivered=int(_number(stats.get("delivered"))),
            cancelled=int(_number(stats.get("cancelled"))),
            total_revenue=_number(stats.get("totalRevenue")),
        ),
        page_info=PageInfo(
            page=int(_number(pagination.get("page")) or 1),
            limit=int(_number(pagination.get("limit")) or 20),
            total=int(_number(pagination.get("total"))),
            total_pages=int(_number(pagination.get("totalPages"))),
            has_next=bool(pagination.get("hasNext")),
            has_prev=bool(pagination.get("hasPrev")),
        ),
    )


class AdminOrders:
    """Server-side paginated order listing with a short-lived cache.

    Status updates are not checked against the fulfilment sequence; any
    status may be set on any order.
    """

    def __init__(
        self,
        backend: AdminBackend,
        *,
        ttl: Duration = "2m",
        clock: Clock = now_ms,
        toast: ToastSink | None = None,
    ) -> None:
        self._backend = backend
        self._toast = toast if toast is not None else LoggingToastSink()
        self._listings: CachedResource[AdminOrderListing] = CachedResource(
            "admin_orders",
            ttl=ttl,
            normalize=_listing_payload,
            clock=clock,
            toast=self._toast,
            error_message="Failed to load orders",
        )

    @property
    def resource(self) -> CachedResource[AdminOrderListing]:
        return self._listings

    async def list_orders(
        self,
        *,
        page: int = 1,
        limit: int = 20,
        status: str = "all",
        payment_status: str = "all",
        search: str = "",
        sort_by: str = "created_at",
        sort_order: str = "desc",
        force: bool = False,
    ) -> AdminOrderListing:
        """One page of orders plus the stats aggregate."""
        params: dict[str, Any] = {
            "page": page,
            "limit": limit,
            "status": status,
            "payment_status": payment_status,
            "search": search.strip(),
            "sort_by": sort_by if sort_by in SORT_COLUMNS else "created_at",
            "sort_order": "asc" if sort_order == "asc" else "desc",
        }
        key = "admin_orders:" + urlencode(sorted(params.items()))
        return await self._listings.load(
            key, partial(self._backend.list_admin_orders, params), force=force
        )

    async def get(self, order_id: str) -> Order:
        raw = await self._call("load order", partial(self._backend.get_order, order_id))
        return raw.get("order", {})

    async def update(
        self,
        order_id: str,
        *,
        status: str | None = None,
        notes: str | None = None,
        payment_status: str | None = None,
    ) -> Order:
        changes = {
            k: v
            for k, v in (
                ("status", status),
                ("notes", notes),
                ("payment_status", payment_status),
            )
            if v is not None
        }
        if not changes:
            raise ValueError("No fields to update")
        raw = await self._call(
            "update order", partial(self._backend.update_order, order_id, changes)
        )
        self._listings.invalidate()
        self._toast.show_toast("Order updated successfully", "success")
        return raw.get("order", {})

    async def stats(self) -> DashboardStats:
        raw = await self._call("load dashboard statistics", self._backend.dashboard_stats)
        stats = raw.get("stats")
        if not isinstance(stats, dict):
            raise ShapeError("Malformed stats response: missing 'stats' object")
        return DashboardStats(
            total_orders=int(_number(stats.get("totalOrders"))),
            total_revenue=_number(stats.get("totalRevenue")),
            total_users=int(_number(stats.get("totalUsers"))),
            pending_orders=int(_number(stats.get("pendingOrders"))),
        )

    async def _call(self, action: str, call: Callable[[], Awaitable[R]]) -> R:
        try:
            return await call()
        except StoreError as exc:
            logger.error("failed to %s: %s", action, exc)
            self._toast.show_toast(f"Failed to {action}: {exc.message}", "error")
            raise

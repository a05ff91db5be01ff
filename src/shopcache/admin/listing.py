"""Client-side filter, sort and pagination for admin lists."""

from __future__ import annotations

import csv
import io
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from shopcache.types import Order, Product

T = TypeVar("T")

LOW_STOCK_THRESHOLD = 10

CSV_HEADER = (
    "Order Number",
    "Customer",
    "Email",
    "Status",
    "Payment Status",
    "Total",
    "Date",
)


@dataclass(frozen=True, slots=True)
class OrderQuery:
    search: str = ""
    status: str = "all"
    payment_status: str = "all"
    sort_by: Literal["date", "amount", "status"] = "date"
    sort_order: Literal["asc", "desc"] = "desc"


@dataclass(frozen=True, slots=True)
class ProductFilters:
    search: str = ""
    category: str = ""
    status: Literal["all", "active", "inactive"] = "all"
    featured: Literal["all", "featured", "not-featured"] = "all"
    stock: Literal["all", "in-stock", "low-stock", "out-of-stock"] = "all"


@dataclass(frozen=True, slots=True)
class PageInfo:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: list[T]
    info: PageInfo


def customer_name(order: Order) -> str:
    profile = order.get("user_profile") or {}
    return f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()


def _order_matches(order: Order, term: str) -> bool:
    profile = order.get("user_profile") or {}
    haystacks = (
        order.get("order_number") or "",
        profile.get("email") or "",
        customer_name(order),
    )
    return any(term in h.lower() for h in haystacks)


def _order_sort_key(order: Order, sort_by: str) -> Any:
    if sort_by == "amount":
        return float(order.get("total_amount") or 0)
    if sort_by == "status":
        return order.get("status") or ""
    return _parse_timestamp(order.get("created_at"))


def _parse_timestamp(value: Any) -> float:
    if not value:
        return 0.0
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).timestamp()
    except ValueError:
        return 0.0


def filter_and_sort_orders(orders: list[Order], query: OrderQuery) -> list[Order]:
    """Apply search, status and payment filters, then a stable sort."""
    result = list(orders)
    term = query.search.strip().lower()
    if term:
        result = [o for o in result if _order_matches(o, term)]
    if query.status != "all":
        result = [o for o in result if o.get("status") == query.status]
    if query.payment_status != "all":
        result = [o for o in result if o.get("payment_status") == query.payment_status]
    result.sort(
        key=lambda o: _order_sort_key(o, query.sort_by),
        reverse=query.sort_order == "desc",
    )
    return result


def filter_products(products: list[Product], filters: ProductFilters) -> list[Product]:
    """Narrow the admin product list; every filter is optional."""
    result = list(products)

    term = filters.search.strip().lower()
    if term:
        result = [
            p
            for p in result
            if term in (p.get("name") or "").lower()
            or term in (p.get("sku") or "").lower()
            or term in (p.get("description") or "").lower()
        ]

    if filters.category:
        result = [p for p in result if p.get("category") == filters.category]

    if filters.status == "active":
        result = [p for p in result if p.get("is_active")]
    elif filters.status == "inactive":
        result = [p for p in result if not p.get("is_active")]

    if filters.featured == "featured":
        result = [p for p in result if p.get("is_featured")]
    elif filters.featured == "not-featured":
        result = [p for p in result if not p.get("is_featured")]

    if filters.stock == "in-stock":
        result = [p for p in result if _stock(p) > LOW_STOCK_THRESHOLD]
    elif filters.stock == "low-stock":
        result = [p for p in result if 0 < _stock(p) <= LOW_STOCK_THRESHOLD]
    elif filters.stock == "out-of-stock":
        result = [p for p in result if _stock(p) == 0]

    return result


def _stock(product: Product) -> int:
    return int(product.get("stock_quantity") or 0)


def paginate(items: list[T], page: int = 1, limit: int = 20) -> Page[T]:
    """Slice a 1-based page out of items."""
    if page < 1 or limit < 1:
        raise ValueError("page and limit must be positive")
    total = len(items)
    offset = (page - 1) * limit
    return Page(
        items=items[offset : offset + limit],
        info=PageInfo(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
            has_next=page * limit < total,
            has_prev=page > 1,
        ),
    )


def export_orders_csv(orders: list[Order]) -> str:
    """Render orders as CSV, one row per order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for order in orders:
        created = order.get("created_at")
        writer.writerow(
            (
                order.get("order_number", ""),
                customer_name(order),
                (order.get("user_profile") or {}).get("email", ""),
                order.get("status", ""),
                order.get("payment_status", ""),
                order.get("total_amount", ""),
                str(created)[:10] if created else "",
            )
        )
    return buffer.getvalue()

"""In-memory storefront backend.

Behaves like the hosted API closely enough for tests and local runs: orders
are scoped by owner, duplicate SKUs and category names are rejected, and
every call is counted. Latency and one-shot failures can be injected.
"""

from __future__ import annotations

import asyncio
import math
import uuid
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any

from shopcache.backends.base import TAXONOMY_ITEM_KEYS, TaxonomyKind
from shopcache.errors import ConflictError, NotFoundError, RequestError

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

_ADMIN_SORT_COLUMNS = ("created_at", "total_amount", "status")
_ORDER_STATUSES = ("pending", "confirmed", "processing", "shipped", "delivered", "cancelled")
_ORDER_UPDATE_FIELDS = ("status", "notes", "payment_status")
_ROLES = ("customer", "admin")

# kind -> (required fields, unique fields)
_TAXONOMY_RULES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "categories": (("name", "slug"), ("name", "slug")),
    "colors": (("name", "value"), ("name",)),
    "sizes": (("name",), ("name",)),
}


class MemoryBackend:
    """Async in-process implementation of every backend protocol."""

    def __init__(self, *, delay: float = 0.0) -> None:
        self.delay = delay
        self.calls: Counter[str] = Counter()
        self._faults: dict[str, list[BaseException]] = {}
        self._lock = asyncio.Lock()
        self._seq = 0
        self._products: dict[int, dict[str, Any]] = {}
        self._orders: dict[str, dict[str, Any]] = {}
        self._addresses: dict[str, dict[str, Any]] = {}
        self._profiles: dict[str, dict[str, Any]] = {}
        self._taxonomies: dict[str, dict[int, dict[str, Any]]] = {
            kind: {} for kind in TAXONOMY_ITEM_KEYS
        }
        self._next_id: Counter[str] = Counter()

    # -------------------------------------------------------------------------
    # Seeding and fault injection
    # -------------------------------------------------------------------------

    def add_product(self, **fields: Any) -> dict[str, Any]:
        """Insert a product directly, bypassing validation."""
        product = {
            "images": [],
            "stock_quantity": 0,
            "is_featured": False,
            "is_active": True,
            **fields,
        }
        product.setdefault("id", self._new_id("products"))
        product.setdefault("created_at", self._stamp())
        self._products[product["id"]] = product
        return dict(product)

    def add_order(self, user_id: str, **fields: Any) -> dict[str, Any]:
        """Insert an order owned by user_id."""
        order = {
            "status": "pending",
            "payment_status": "pending",
            "payment_method": "cod",
            "total_amount": 0,
            "order_items": [],
            **fields,
            "user_id": user_id,
        }
        order.setdefault("id", str(uuid.uuid4()))
        order.setdefault("order_number", f"ORD-{len(self._orders) + 1:05d}")
        order.setdefault("created_at", self._stamp())
        self._orders[order["id"]] = order
        return dict(order)

    def add_address(self, user_id: str, **fields: Any) -> dict[str, Any]:
        """Insert a shipping address owned by user_id."""
        address = {"is_default": False, **fields, "user_id": user_id}
        address.setdefault("id", str(uuid.uuid4()))
        address.setdefault("created_at", self._stamp())
        self._addresses[address["id"]] = address
        return dict(address)

    def add_profile(self, user_id: str, **fields: Any) -> dict[str, Any]:
        """Insert a user profile."""
        profile = {"role": "customer", "email": f"{user_id}@example.com", **fields}
        profile["id"] = user_id
        profile.setdefault("created_at", self._stamp())
        self._profiles[user_id] = profile
        return dict(profile)

    def add_taxonomy(self, kind: TaxonomyKind, **fields: Any) -> dict[str, Any]:
        """Insert a category, color or size."""
        item = dict(fields)
        item.setdefault("id", self._new_id(kind))
        item.setdefault("created_at", self._stamp())
        self._taxonomies[kind][item["id"]] = item
        return dict(item)

    def fail_next(self, method: str, error: BaseException) -> None:
        """Make the next call to method raise error."""
        self._faults.setdefault(method, []).append(error)

    def order(self, order_id: str) -> dict[str, Any]:
        """Inspect a stored order."""
        return dict(self._orders[order_id])

    def _new_id(self, kind: str) -> int:
        self._next_id[kind] += 1
        return self._next_id[kind]

    def _stamp(self) -> str:
        # Strictly increasing so "newest first" ordering is deterministic
        self._seq += 1
        return (_EPOCH + timedelta(seconds=self._seq)).isoformat()

    async def _enter(self, method: str) -> None:
        self.calls[method] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        faults = self._faults.get(method)
        if faults:
            raise faults.pop(0)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def list_products(
        self,
        *,
        category: str | None = None,
        featured: bool | None = None,
        active: bool = True,
    ) -> dict[str, Any]:
        await self._enter("list_products")
        async with self._lock:
            products = [
                dict(p)
                for p in self._products.values()
                if (category is None or p.get("category") == category)
                and (featured is None or bool(p.get("is_featured")) == featured)
                and (not active or p.get("is_active", True))
            ]
        products.sort(key=lambda p: p["created_at"], reverse=True)
        return {"products": products}

    # -------------------------------------------------------------------------
    # Profile-scoped
    # -------------------------------------------------------------------------

    def _user_orders(self, user_id: str) -> list[dict[str, Any]]:
        orders = [o for o in self._orders.values() if o["user_id"] == user_id]
        orders.sort(key=lambda o: o["created_at"], reverse=True)
        return orders

    async def count_orders(self, user_id: str) -> dict[str, Any]:
        await self._enter("count_orders")
        async with self._lock:
            return {"count": len(self._user_orders(user_id))}

    async def list_orders(
        self, user_id: str, *, offset: int, limit: int
    ) -> dict[str, Any]:
        await self._enter("list_orders")
        async with self._lock:
            page = self._user_orders(user_id)[offset : offset + limit]
            return {"orders": [dict(o) for o in page]}

    async def cancel_order(self, order_id: str, user_id: str) -> dict[str, Any]:
        await self._enter("cancel_order")
        async with self._lock:
            order = self._orders.get(order_id)
            if order is None or order["user_id"] != user_id:
                raise NotFoundError("Order not found or access denied", status=404)
            if order["status"] == "cancelled":
                raise RequestError("Order is already cancelled", status=400)
            if order["status"] == "delivered":
                raise RequestError("Cannot cancel a delivered order", status=400)
            if order["status"] == "shipped":
                raise RequestError(
                    "Cannot cancel a shipped order. Please contact support for returns.",
                    status=400,
                )
            order["status"] = "cancelled"
            order["updated_at"] = self._stamp()
            return {"message": "Order cancelled successfully", "order": dict(order)}

    def _owned_address(self, user_id: str, address_id: str) -> dict[str, Any]:
        address = self._addresses.get(address_id)
        if address is None or address["user_id"] != user_id:
            raise NotFoundError("Address not found", status=404)
        return address

    async def list_addresses(self, user_id: str) -> dict[str, Any]:
        await self._enter("list_addresses")
        async with self._lock:
            addresses = [
                dict(a) for a in self._addresses.values() if a["user_id"] == user_id
            ]
        addresses.sort(
            key=lambda a: (bool(a.get("is_default")), a["created_at"]), reverse=True
        )
        return {"addresses": addresses}

    async def create_address(
        self, user_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        await self._enter("create_address")
        async with self._lock:
            fields = {k: v for k, v in data.items() if k not in ("id", "user_id")}
            return {"address": self.add_address(user_id, **fields)}

    async def update_address(
        self, user_id: str, address_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        await self._enter("update_address")
        async with self._lock:
            address = self._owned_address(user_id, address_id)
            address.update(
                {k: v for k, v in changes.items() if k not in ("id", "user_id")}
            )
            address["updated_at"] = self._stamp()
            return {"address": dict(address)}

    async def delete_address(self, user_id: str, address_id: str) -> None:
        await self._enter("delete_address")
        async with self._lock:
            self._owned_address(user_id, address_id)
            del self._addresses[address_id]

    async def get_profile(self, user_id: str) -> dict[str, Any]:
        await self._enter("get_profile")
        async with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                raise NotFoundError("Profile not found", status=404)
            return {"profile": dict(profile)}

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    def _with_customer(self, order: dict[str, Any]) -> dict[str, Any]:
        result = dict(order)
        profile = self._profiles.get(order["user_id"])
        if profile is not None:
            result["user_profile"] = {
                "first_name": profile.get("first_name", ""),
                "last_name": profile.get("last_name", ""),
                "email": profile.get("email", ""),
            }
        return result

    def _order_stats(self) -> dict[str, Any]:
        orders = list(self._orders.values())
        stats: dict[str, Any] = {"total": len(orders)}
        for status in _ORDER_STATUSES:
            stats[status] = sum(1 for o in orders if o["status"] == status)
        stats["totalRevenue"] = sum(float(o.get("total_amount") or 0) for o in orders)
        return stats

    async def list_admin_orders(self, params: dict[str, Any]) -> dict[str, Any]:
        await self._enter("list_admin_orders")
        page = int(params.get("page") or 1)
        limit = int(params.get("limit") or 20)
        status = params.get("status")
        payment_status = params.get("payment_status")
        search = (params.get("search") or "").strip().lower()
        sort_by = params.get("sort_by") or "created_at"
        if sort_by not in _ADMIN_SORT_COLUMNS:
            sort_by = "created_at"
        descending = params.get("sort_order", "desc") != "asc"

        async with self._lock:
            orders = [
                o
                for o in self._orders.values()
                if (not status or status == "all" or o["status"] == status)
                and (
                    not payment_status
                    or payment_status == "all"
                    or o["payment_status"] == payment_status
                )
                and (not search or search in o["order_number"].lower())
            ]
            orders.sort(key=lambda o: o[sort_by], reverse=descending)
            count = len(orders)
            offset = (page - 1) * limit
            rows = [self._with_customer(o) for o in orders[offset : offset + limit]]
            stats = self._order_stats()

        return {
            "orders": rows,
            "count": count,
            "stats": stats,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": count,
                "totalPages": math.ceil(count / limit) if limit else 0,
                "hasNext": page * limit < count,
                "hasPrev": page > 1,
            },
        }

    async def get_order(self, order_id: str) -> dict[str, Any]:
        await self._enter("get_order")
        async with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise NotFoundError("Order not found", status=404)
            return {"order": self._with_customer(order)}

    async def update_order(
        self, order_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        await self._enter("update_order")
        update = {k: v for k, v in changes.items() if k in _ORDER_UPDATE_FIELDS}
        if not update:
            raise RequestError("No fields to update", status=400)
        async with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise NotFoundError("Order not found", status=404)
            order.update(update)
            order["updated_at"] = self._stamp()
            return {"order": dict(order)}

    async def dashboard_stats(self) -> dict[str, Any]:
        await self._enter("dashboard_stats")
        async with self._lock:
            orders = list(self._orders.values())
            return {
                "stats": {
                    "totalOrders": len(orders),
                    "totalRevenue": sum(float(o.get("total_amount") or 0) for o in orders),
                    "totalUsers": len(self._profiles),
                    "pendingOrders": sum(1 for o in orders if o["status"] == "pending"),
                }
            }

    def _check_sku(self, sku: Any, product_id: Any = None) -> None:
        if not sku:
            return
        for other in self._products.values():
            if other.get("sku") == sku and other["id"] != product_id:
                raise ConflictError("Product with this SKU already exists", status=409)

    async def create_product(self, data: dict[str, Any]) -> dict[str, Any]:
        await self._enter("create_product")
        if not data.get("name") or data.get("price") is None:
            raise RequestError("Name and price are required", status=400)
        async with self._lock:
            self._check_sku(data.get("sku"))
            fields = {k: v for k, v in data.items() if k != "id"}
            return {"product": self.add_product(**fields)}

    async def update_product(
        self, product_id: Any, changes: dict[str, Any]
    ) -> dict[str, Any]:
        await self._enter("update_product")
        async with self._lock:
            product = self._products.get(product_id)
            if product is None:
                raise NotFoundError("Product not found", status=404)
            self._check_sku(changes.get("sku"), product_id)
            product.update({k: v for k, v in changes.items() if k != "id"})
            product["updated_at"] = self._stamp()
            return {"product": dict(product)}

    async def delete_product(self, product_id: Any) -> None:
        await self._enter("delete_product")
        async with self._lock:
            if self._products.pop(product_id, None) is None:
                raise NotFoundError("Product not found", status=404)

    def _check_taxonomy(
        self, kind: TaxonomyKind, data: dict[str, Any], item_id: Any = None
    ) -> None:
        _, unique = _TAXONOMY_RULES[kind]
        for other in self._taxonomies[kind].values():
            if other["id"] == item_id:
                continue
            if any(f in data and other.get(f) == data[f] for f in unique):
                label = TAXONOMY_ITEM_KEYS[kind].capitalize()
                raise ConflictError(
                    f"{label} {' or '.join(unique)} already exists", status=400
                )

    async def list_taxonomy(self, kind: TaxonomyKind) -> dict[str, Any]:
        await self._enter("list_taxonomy")
        async with self._lock:
            items = [dict(i) for i in self._taxonomies[kind].values()]
        sort_key = "display_order" if kind == "sizes" else "name"
        items.sort(key=lambda i: i.get(sort_key) or 0)
        return {kind: items}

    async def create_taxonomy(
        self, kind: TaxonomyKind, data: dict[str, Any]
    ) -> dict[str, Any]:
        await self._enter("create_taxonomy")
        required, _ = _TAXONOMY_RULES[kind]
        if any(not data.get(f) for f in required):
            raise RequestError(
                f"{' and '.join(required).capitalize()} are required"
                if len(required) > 1
                else f"{required[0].capitalize()} is required",
                status=400,
            )
        async with self._lock:
            self._check_taxonomy(kind, data)
            fields = {k: v for k, v in data.items() if k != "id"}
            return {TAXONOMY_ITEM_KEYS[kind]: self.add_taxonomy(kind, **fields)}

    async def update_taxonomy(
        self, kind: TaxonomyKind, item_id: Any, changes: dict[str, Any]
    ) -> dict[str, Any]:
        await self._enter("update_taxonomy")
        async with self._lock:
            item = self._taxonomies[kind].get(item_id)
            if item is None:
                raise NotFoundError(
                    f"{TAXONOMY_ITEM_KEYS[kind].capitalize()} not found", status=404
                )
            self._check_taxonomy(kind, changes, item_id)
            item.update({k: v for k, v in changes.items() if k != "id"})
            return {TAXONOMY_ITEM_KEYS[kind]: dict(item)}

    async def delete_taxonomy(self, kind: TaxonomyKind, item_id: Any) -> None:
        await self._enter("delete_taxonomy")
        async with self._lock:
            if self._taxonomies[kind].pop(item_id, None) is None:
                raise NotFoundError(
                    f"{TAXONOMY_ITEM_KEYS[kind].capitalize()} not found", status=404
                )

    async def list_users(self) -> dict[str, Any]:
        await self._enter("list_users")
        async with self._lock:
            users = [dict(p) for p in self._profiles.values()]
        users.sort(key=lambda u: u["created_at"], reverse=True)
        return {"users": users}

    async def update_user_role(self, user_id: str, role: str) -> dict[str, Any]:
        await self._enter("update_user_role")
        if role not in _ROLES:
            raise RequestError("Invalid role", status=400)
        async with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                raise NotFoundError("User not found", status=404)
            profile["role"] = role
            return {"user": dict(profile)}

    async def disconnect(self) -> None:
        """Disconnect (no-op for memory)."""
        pass

"""Backend protocols for the hosted storefront API.

Backends return the decoded JSON payloads as-is; the stores validate the
shape. Failures are raised as shopcache.errors types.
"""

from typing import Any, Literal, Protocol, runtime_checkable

TaxonomyKind = Literal["categories", "colors", "sizes"]

# Payload key holding a single record of each taxonomy
TAXONOMY_ITEM_KEYS: dict[str, str] = {
    "categories": "category",
    "colors": "color",
    "sizes": "size",
}


@runtime_checkable
class CatalogBackend(Protocol):
    """Public catalog reads."""

    async def list_products(
        self,
        *,
        category: str | None = None,
        featured: bool | None = None,
        active: bool = True,
    ) -> dict[str, Any]:
        """GET /products -> {"products": [...]}."""
        ...


@runtime_checkable
class ProfileBackend(Protocol):
    """Reads and writes scoped to one user."""

    async def count_orders(self, user_id: str) -> dict[str, Any]:
        """Lightweight count query -> {"count": n}."""
        ...

    async def list_orders(
        self, user_id: str, *, offset: int, limit: int
    ) -> dict[str, Any]:
        """Newest first -> {"orders": [...]}."""
        ...

    async def cancel_order(self, order_id: str, user_id: str) -> dict[str, Any]:
        """Cancel an order owned by user_id -> {"message", "order"}."""
        ...

    async def list_addresses(self, user_id: str) -> dict[str, Any]:
        """Default first, then newest -> {"addresses": [...]}."""
        ...

    async def create_address(
        self, user_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """-> {"address": {...}}."""
        ...

    async def update_address(
        self, user_id: str, address_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """-> {"address": {...}}."""
        ...

    async def delete_address(self, user_id: str, address_id: str) -> None:
        """Delete an address owned by user_id."""
        ...

    async def get_profile(self, user_id: str) -> dict[str, Any]:
        """-> {"profile": {...}}."""
        ...


@runtime_checkable
class AdminBackend(Protocol):
    """Privileged (service-role) operations."""

    async def list_admin_orders(self, params: dict[str, Any]) -> dict[str, Any]:
        """-> {"orders", "count", "stats", "pagination"}."""
        ...

    async def get_order(self, order_id: str) -> dict[str, Any]:
        """-> {"order": {...}}."""
        ...

    async def update_order(
        self, order_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """PATCH any of status, notes, payment_status -> {"order": {...}}."""
        ...

    async def dashboard_stats(self) -> dict[str, Any]:
        """-> {"stats": {...}}."""
        ...

    async def create_product(self, data: dict[str, Any]) -> dict[str, Any]:
        """-> {"product": {...}}."""
        ...

    async def update_product(
        self, product_id: Any, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """-> {"product": {...}}."""
        ...

    async def delete_product(self, product_id: Any) -> None:
        """Delete a product."""
        ...

    async def list_taxonomy(self, kind: TaxonomyKind) -> dict[str, Any]:
        """-> {kind: [...]}."""
        ...

    async def create_taxonomy(
        self, kind: TaxonomyKind, data: dict[str, Any]
    ) -> dict[str, Any]:
        """-> {singular: {...}}."""
        ...

    async def update_taxonomy(
        self, kind: TaxonomyKind, item_id: Any, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """-> {singular: {...}}."""
        ...

    async def delete_taxonomy(self, kind: TaxonomyKind, item_id: Any) -> None:
        """Delete a category, color or size."""
        ...

    async def list_users(self) -> dict[str, Any]:
        """-> {"users": [...]}."""
        ...

    async def update_user_role(self, user_id: str, role: str) -> dict[str, Any]:
        """-> {"user": {...}}."""
        ...


@runtime_checkable
class StorefrontBackend(CatalogBackend, ProfileBackend, AdminBackend, Protocol):
    """A backend serving every store."""

    async def disconnect(self) -> None:
        """Release connections."""
        ...

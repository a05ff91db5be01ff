"""Admin catalog management: products, taxonomies and user roles."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, TypeVar

from shopcache.backends.base import TAXONOMY_ITEM_KEYS, AdminBackend, TaxonomyKind
from shopcache.errors import ShapeError, StoreError
from shopcache.stores.products import ProductStore
from shopcache.toast import LoggingToastSink, ToastSink
from shopcache.types import Product, UserProfile

logger = logging.getLogger(__name__)

R = TypeVar("R")

ROLES = ("customer", "admin")

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """'Summer T-Shirts!' -> 'summer-t-shirts'."""
    return _NON_SLUG.sub("-", name.lower()).strip("-")


class AdminCatalog:
    """Mutations on the catalog; server errors are surfaced verbatim."""

    def __init__(
        self,
        backend: AdminBackend,
        *,
        products: ProductStore | None = None,
        toast: ToastSink | None = None,
    ) -> None:
        self._backend = backend
        self._products = products
        self._toast = toast if toast is not None else LoggingToastSink()

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    async def create_product(self, data: dict[str, Any]) -> Product:
        raw = await self._call(partial(self._backend.create_product, data))
        self._catalog_changed("Product created successfully")
        return raw.get("product", {})

    async def update_product(self, product_id: Any, changes: dict[str, Any]) -> Product:
        raw = await self._call(
            partial(self._backend.update_product, product_id, changes)
        )
        self._catalog_changed("Product updated successfully")
        return raw.get("product", {})

    async def delete_product(self, product_id: Any) -> None:
        await self._call(partial(self._backend.delete_product, product_id))
        self._catalog_changed("Product deleted successfully")

    # -------------------------------------------------------------------------
    # Categories, colors and sizes
    # -------------------------------------------------------------------------

    async def list_taxonomy(self, kind: TaxonomyKind) -> list[dict[str, Any]]:
        raw = await self._call(partial(self._backend.list_taxonomy, kind))
        items = raw.get(kind)
        if not isinstance(items, list):
            raise ShapeError(f"Malformed {kind} response: missing '{kind}' array")
        return items

    async def create_taxonomy(
        self, kind: TaxonomyKind, data: dict[str, Any]
    ) -> dict[str, Any]:
        if kind == "categories" and data.get("name") and not data.get("slug"):
            data = {**data, "slug": slugify(data["name"])}
        raw = await self._call(partial(self._backend.create_taxonomy, kind, data))
        self._toast.show_toast(f"{TAXONOMY_ITEM_KEYS[kind].capitalize()} created", "success")
        return raw.get(TAXONOMY_ITEM_KEYS[kind], {})

    async def update_taxonomy(
        self, kind: TaxonomyKind, item_id: Any, changes: dict[str, Any]
    ) -> dict[str, Any]:
        if kind == "categories" and changes.get("name") and "slug" not in changes:
            changes = {**changes, "slug": slugify(changes["name"])}
        raw = await self._call(
            partial(self._backend.update_taxonomy, kind, item_id, changes)
        )
        self._toast.show_toast(f"{TAXONOMY_ITEM_KEYS[kind].capitalize()} updated", "success")
        return raw.get(TAXONOMY_ITEM_KEYS[kind], {})

    async def delete_taxonomy(self, kind: TaxonomyKind, item_id: Any) -> None:
        await self._call(partial(self._backend.delete_taxonomy, kind, item_id))
        self._toast.show_toast(f"{TAXONOMY_ITEM_KEYS[kind].capitalize()} deleted", "success")

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def list_users(self) -> list[UserProfile]:
        raw = await self._call(self._backend.list_users)
        users = raw.get("users")
        if not isinstance(users, list):
            raise ShapeError("Malformed users response: missing 'users' array")
        return users

    async def set_role(self, user_id: str, role: str) -> UserProfile:
        if role not in ROLES:
            raise ValueError(f"Invalid role: {role!r}")
        raw = await self._call(partial(self._backend.update_user_role, user_id, role))
        self._toast.show_toast("User role updated", "success")
        return raw.get("user", {})

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    async def _call(self, call: Callable[[], Awaitable[R]]) -> R:
        try:
            return await call()
        except StoreError as exc:
            logger.error("catalog operation failed: %s", exc)
            self._toast.show_toast(exc.message, "error")
            raise

    def _catalog_changed(self, message: str) -> None:
        if self._products is not None:
            self._products.invalidate()
        self._toast.show_toast(message, "success")

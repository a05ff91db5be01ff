"""Product catalog store."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from shopcache.backends.base import CatalogBackend
from shopcache.cache import now_ms
from shopcache.errors import RequestCancelledError, ShapeError
from shopcache.resource import CachedResource
from shopcache.toast import ToastSink
from shopcache.types import Clock, Duration, Product

logger = logging.getLogger(__name__)

VIEW_ALL = "VIEW ALL"


def _products_payload(raw: Any) -> list[Product]:
    """Validate a {"products": [...]} payload."""
    if not isinstance(raw, dict) or not isinstance(raw.get("products"), list):
        raise ShapeError("Malformed products response: missing 'products' array")
    products = raw["products"]
    if not all(isinstance(p, dict) and "id" in p for p in products):
        raise ShapeError("Malformed products response: product without id")
    return products


def distinct_categories(products: list[Product]) -> list[str]:
    """Category names in order of first appearance."""
    seen: dict[str, None] = {}
    for product in products:
        category = product.get("category")
        if category:
            seen.setdefault(category, None)
    return list(seen)


class ProductStore:
    """Cached catalog with category and id lookups."""

    ALL_KEY = "products:all"

    def __init__(
        self,
        backend: CatalogBackend,
        *,
        ttl: Duration = "10m",
        clock: Clock = now_ms,
        toast: ToastSink | None = None,
    ) -> None:
        self._backend = backend
        self._all: CachedResource[list[Product]] = CachedResource(
            "products",
            ttl=ttl,
            normalize=_products_payload,
            clock=clock,
            toast=toast,
            error_message="Failed to load products",
        )
        self._filtered: CachedResource[list[Product]] = CachedResource(
            "products:filtered",
            ttl=ttl,
            normalize=_products_payload,
            clock=clock,
            toast=toast,
            error_message="Failed to load products",
        )
        self._products: list[Product] = []
        self._categories: list[str] = []
        self._index: dict[str, Product] = {}

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    @property
    def resource(self) -> CachedResource[list[Product]]:
        return self._all

    async def fetch_all(self, force_refresh: bool = False) -> list[Product]:
        """All active products, from cache while it is valid.

        A load aborted by clear() returns the current, emptied, catalog.
        """
        try:
            products = await self._all.load(
                self.ALL_KEY, self._backend.list_products, force=force_refresh
            )
        except RequestCancelledError:
            logger.debug("catalog load aborted")
            return list(self._products)
        self._adopt(products)
        return products

    async def refresh(self) -> list[Product]:
        """Refetch regardless of TTL."""
        return await self.fetch_all(force_refresh=True)

    async def fetch_filtered(
        self,
        *,
        category: str | None = None,
        featured: bool | None = None,
        active: bool = True,
    ) -> list[Product]:
        """Server-side filtered listing.

        A query with different filters aborts the previous in-flight one;
        its callers get RequestCancelledError.
        """
        key = f"products:{category or '*'}:{featured}:{active}"
        self._filtered.cancel_others(key)
        return await self._filtered.load(
            key,
            partial(
                self._backend.list_products,
                category=category,
                featured=featured,
                active=active,
            ),
        )

    def get_by_category(self, name: str) -> list[Product]:
        """Products in a category, tolerating inconsistent naming.

        Tiers are tried in order and the first non-empty one wins: exact,
        case-insensitive, then substring in either direction.
        """
        if name == VIEW_ALL:
            return list(self._products)
        if not name:
            return []

        exact = [p for p in self._products if p.get("category") == name]
        if exact:
            return exact

        wanted = name.casefold()
        folded = [
            p for p in self._products if (p.get("category") or "").casefold() == wanted
        ]
        if folded:
            return folded

        return [
            p
            for p in self._products
            if p.get("category")
            and (
                wanted in p["category"].casefold() or p["category"].casefold() in wanted
            )
        ]

    def get_by_id(self, product_id: Any) -> Product | None:
        return self._index.get(str(product_id))

    def invalidate(self) -> None:
        """Forget cached listings; the next fetch goes to the network."""
        self._all.invalidate()
        self._filtered.invalidate()

    def clear(self) -> None:
        self._all.clear()
        self._filtered.clear()
        self._adopt([])

    def _adopt(self, products: list[Product]) -> None:
        self._products = list(products)
        self._categories = distinct_categories(products)
        self._index = {str(p["id"]): p for p in products}
        logger.debug(
            "catalog holds %d products in %d categories",
            len(self._products),
            len(self._categories),
        )

"""Storefront aggregate wiring every store to one backend."""

from __future__ import annotations

from dataclasses import dataclass, field

from shopcache.admin.catalog import AdminCatalog
from shopcache.admin.orders import AdminOrders
from shopcache.backends.base import StorefrontBackend
from shopcache.backends.http import HttpBackend
from shopcache.cache import now_ms
from shopcache.cart import Cart
from shopcache.config import StorefrontSettings, get_settings
from shopcache.session import ProfileSession
from shopcache.stores.addresses import AddressBook
from shopcache.stores.orders import OrderHistory
from shopcache.stores.products import ProductStore
from shopcache.stores.profiles import UserProfiles
from shopcache.toast import LoggingToastSink, ToastSink
from shopcache.types import Clock


@dataclass
class Storefront:
    """Every store of one storefront client, sharing a backend and toast sink."""

    backend: StorefrontBackend
    products: ProductStore
    session: ProfileSession
    admin_orders: AdminOrders
    admin_catalog: AdminCatalog
    cart: Cart = field(default_factory=Cart)

    @property
    def orders(self) -> OrderHistory:
        return self.session.orders

    @property
    def addresses(self) -> AddressBook:
        return self.session.addresses

    @property
    def profiles(self) -> UserProfiles:
        return self.session.profiles

    def clear(self) -> None:
        """Drop every cached value and abort pending loads."""
        self.products.clear()
        self.session.clear_cache()
        self.session.profiles.clear()
        self.admin_orders.resource.clear()

    async def disconnect(self) -> None:
        self.clear()
        await self.backend.disconnect()


def create_storefront(
    settings: StorefrontSettings | None = None,
    *,
    backend: StorefrontBackend | None = None,
    toast: ToastSink | None = None,
    clock: Clock | None = None,
) -> Storefront:
    """Create a storefront client.

    Args:
        settings: Cache policies and API connection; read from the
            environment when omitted
        backend: Data source; an HttpBackend for settings.api_base_url
            when omitted
        toast: Notification sink shared by every store
        clock: Millisecond clock shared by every cache

    Returns:
        Storefront with products, session, admin_orders, admin_catalog and cart
    """
    settings = settings if settings is not None else get_settings()
    if backend is None:
        if not settings.api_base_url:
            raise ValueError("api_base_url is required when no backend is given")
        backend = HttpBackend(
            settings.api_base_url,
            api_key=settings.api_key,
            timeout=settings.http_timeout,
        )
    toast = toast if toast is not None else LoggingToastSink()
    clock = clock if clock is not None else now_ms

    products = ProductStore(backend, ttl=settings.product_ttl, clock=clock, toast=toast)
    session = ProfileSession(
        UserProfiles(
            backend,
            ttl=settings.profile_ttl,
            max_failures=settings.profile_max_failures,
            reset_after=settings.profile_reset_after,
            clock=clock,
            toast=toast,
        ),
        OrderHistory(
            backend,
            page_size=settings.order_page_size,
            ttl=settings.profile_data_ttl,
            exact_has_more=settings.exact_has_more,
            clock=clock,
            toast=toast,
        ),
        AddressBook(backend, ttl=settings.profile_data_ttl, clock=clock, toast=toast),
        bootstrap_timeout=settings.bootstrap_timeout,
    )
    return Storefront(
        backend=backend,
        products=products,
        session=session,
        admin_orders=AdminOrders(
            backend, ttl=settings.admin_orders_ttl, clock=clock, toast=toast
        ),
        admin_catalog=AdminCatalog(backend, products=products, toast=toast),
    )


__all__ = ["Storefront", "create_storefront"]

"""Tests for the storefront factory."""

import pytest

from shopcache import (
    HttpBackend,
    MemoryBackend,
    NotFoundError,
    Storefront,
    StorefrontSettings,
    create_storefront,
)


@pytest.fixture
def storefront(backend, clock, toast) -> Storefront:
    settings = StorefrontSettings(product_ttl="1m", order_page_size=2)
    return create_storefront(settings, backend=backend, toast=toast, clock=clock)


class TestCreateStorefront:
    """Wiring every store to one backend."""

    def test_stores_share_backend(self, storefront, backend) -> None:
        assert storefront.backend is backend
        assert storefront.orders is storefront.session.orders
        assert storefront.orders.page_size == 2
        assert storefront.products.resource.cache.ttl == 60_000

    async def test_shared_clock(self, storefront, backend, clock) -> None:
        backend.add_product(name="Tee")
        await storefront.products.fetch_all()
        clock.advance(60_000)
        await storefront.products.fetch_all()
        assert backend.calls["list_products"] == 2

    async def test_admin_catalog_invalidates_products(self, storefront, backend) -> None:
        await storefront.products.fetch_all()
        await storefront.admin_catalog.create_product({"name": "Tee", "price": 10})
        assert [p["name"] for p in await storefront.products.fetch_all()] == ["Tee"]

    async def test_shared_toast_sink(self, storefront, backend, toast) -> None:
        order = backend.add_order("u2")
        storefront.session.switch_user("u1")

        with pytest.raises(NotFoundError):
            await storefront.orders.cancel_order(order["id"])
        assert toast.errors == ["Order not found or access denied"]

    async def test_clear_and_disconnect(self, storefront, backend) -> None:
        backend.add_product(name="Tee")
        await storefront.products.fetch_all()

        await storefront.disconnect()

        assert storefront.products.products == []
        assert len(storefront.products.resource.cache) == 0

    def test_http_backend_from_settings(self) -> None:
        settings = StorefrontSettings(api_base_url="https://shop.test/api", api_key="k")
        storefront = create_storefront(settings)
        assert isinstance(storefront.backend, HttpBackend)

    def test_requires_base_url_without_backend(self) -> None:
        with pytest.raises(ValueError, match="api_base_url"):
            create_storefront(StorefrontSettings(api_base_url=None))

    def test_default_cart(self) -> None:
        storefront = create_storefront(StorefrontSettings(), backend=MemoryBackend())
        assert storefront.cart.count == 0

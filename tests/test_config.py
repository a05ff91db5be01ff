"""Tests for StorefrontSettings."""

import pytest
from pydantic import ValidationError

from shopcache import StorefrontSettings, get_settings


class TestSettings:
    """Defaults and environment overrides."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("SHOPCACHE_API_BASE_URL", raising=False)
        settings = StorefrontSettings()

        assert settings.api_base_url is None
        assert settings.http_timeout == 30.0
        assert settings.product_ttl == "10m"
        assert settings.profile_data_ttl == "5m"
        assert settings.profile_ttl == "10m"
        assert settings.admin_orders_ttl == "2m"
        assert settings.order_page_size == 10
        assert settings.exact_has_more is False
        assert settings.profile_max_failures == 3
        assert settings.profile_reset_after == "5m"
        assert settings.bootstrap_timeout == 5.0

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("SHOPCACHE_API_BASE_URL", "https://shop.test/api")
        monkeypatch.setenv("SHOPCACHE_PRODUCT_TTL", "30s")
        monkeypatch.setenv("SHOPCACHE_ORDER_PAGE_SIZE", "25")
        monkeypatch.setenv("SHOPCACHE_EXACT_HAS_MORE", "true")

        settings = StorefrontSettings()

        assert settings.api_base_url == "https://shop.test/api"
        assert settings.product_ttl == "30s"
        assert settings.order_page_size == 25
        assert settings.exact_has_more is True

    def test_numeric_duration_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("SHOPCACHE_PROFILE_TTL", "1500")
        assert StorefrontSettings().profile_ttl == 1500

    def test_invalid_duration_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StorefrontSettings(product_ttl="soon")

    def test_invalid_page_size_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StorefrontSettings(order_page_size=0)

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

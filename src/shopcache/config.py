"""
Storefront configuration.

Settings are loaded from the environment with ``pydantic-settings``
using the ``SHOPCACHE_`` prefix, so ``SHOPCACHE_PRODUCT_TTL=30s``
overrides the product cache lifetime. Durations accept the same
``"500ms"``, ``"30s"``, ``"10m"`` forms as :func:`parse_duration` or a
plain millisecond integer.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopcache.duration import parse_duration


class StorefrontSettings(BaseSettings):
    """Settings for the API connection and the cache policies of each store."""

    # API connection
    api_base_url: str | None = Field(None, description="Base URL of the storefront API.")
    api_key: str | None = Field(None, description="Bearer token sent with every request.")
    http_timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds.")

    # Cache lifetimes
    product_ttl: str | int = Field("10m", description="Lifetime of cached product lists.")
    profile_data_ttl: str | int = Field("5m", description="Lifetime of cached orders and addresses.")
    profile_ttl: str | int = Field("10m", description="Lifetime of cached user profiles.")
    admin_orders_ttl: str | int = Field("2m", description="Lifetime of cached admin order pages.")

    # Order history
    order_page_size: int = Field(10, ge=1)
    exact_has_more: bool = Field(False, description="Use the total count to decide has_more.")

    # Profile circuit breaker
    profile_max_failures: int = Field(3, ge=1)
    profile_reset_after: str | int = Field("5m")

    bootstrap_timeout: float = Field(5.0, gt=0, description="Seconds to wait for the initial profile.")

    model_config = SettingsConfigDict(env_prefix="SHOPCACHE_", env_file=None, case_sensitive=False)

    @field_validator(
        "product_ttl",
        "profile_data_ttl",
        "profile_ttl",
        "admin_orders_ttl",
        "profile_reset_after",
        mode="before",
    )
    @classmethod
    def _check_duration(cls, value: str | int) -> str | int:
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if not isinstance(value, (str, int)):
            raise ValueError(f"Invalid duration: {value!r}")
        parse_duration(value)
        return value


@lru_cache()
def get_settings() -> StorefrontSettings:
    """Return a cached settings instance read from the environment."""
    return StorefrontSettings()


__all__ = ["StorefrontSettings", "get_settings"]

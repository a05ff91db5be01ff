"""Backends for the hosted storefront API."""

from shopcache.backends.base import (
    AdminBackend,
    CatalogBackend,
    ProfileBackend,
    StorefrontBackend,
    TaxonomyKind,
)
from shopcache.backends.http import HttpBackend
from shopcache.backends.memory import MemoryBackend

__all__ = [
    "AdminBackend",
    "CatalogBackend",
    "HttpBackend",
    "MemoryBackend",
    "ProfileBackend",
    "StorefrontBackend",
    "TaxonomyKind",
]

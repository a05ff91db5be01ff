"""shopcache - Cached, deduplicated data stores for a storefront client."""

import logging

# Admin helpers
from shopcache.admin import AdminCatalog, AdminOrders

# Backends
from shopcache.backends import HttpBackend, MemoryBackend, StorefrontBackend

# Core caching
from shopcache.cache import TTLCache
from shopcache.cart import Cart, CartItem
from shopcache.config import StorefrontSettings, get_settings

# Duration parsing
from shopcache.duration import parse_duration
from shopcache.errors import (
    AuthorizationError,
    ConflictError,
    FetchError,
    NotAuthenticatedError,
    NotFoundError,
    RequestCancelledError,
    RequestError,
    ShapeError,
    StoreError,
    TransientError,
)
from shopcache.inflight import InFlightRegistry
from shopcache.resource import CachedResource
from shopcache.session import ProfileSession
from shopcache.status import OrderProgress, OrderStatus, progress

# Stores
from shopcache.stores import AddressBook, OrderHistory, ProductStore, UserProfiles
from shopcache.storefront import Storefront, create_storefront
from shopcache.toast import LoggingToastSink, ToastSink

# Core types
from shopcache.types import CacheEntry, Duration, PaginatedCollection

logging.getLogger("shopcache").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AddressBook",
    "AdminCatalog",
    "AdminOrders",
    "AuthorizationError",
    "CacheEntry",
    "CachedResource",
    "Cart",
    "CartItem",
    "ConflictError",
    "Duration",
    "FetchError",
    "HttpBackend",
    "InFlightRegistry",
    "LoggingToastSink",
    "MemoryBackend",
    "NotAuthenticatedError",
    "NotFoundError",
    "OrderHistory",
    "OrderProgress",
    "OrderStatus",
    "PaginatedCollection",
    "ProductStore",
    "ProfileSession",
    "RequestCancelledError",
    "RequestError",
    "ShapeError",
    "StoreError",
    "Storefront",
    "StorefrontBackend",
    "StorefrontSettings",
    "TTLCache",
    "ToastSink",
    "TransientError",
    "UserProfiles",
    "create_storefront",
    "get_settings",
    "parse_duration",
    "progress",
]

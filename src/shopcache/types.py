"""Core types for the shopcache data layer."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

# Records are passed through from the backend untouched
Product = dict[str, Any]
Order = dict[str, Any]
Address = dict[str, Any]
UserProfile = dict[str, Any]

# Returns the current Unix time in ms
Clock = Callable[[], int]

# Duration type alias
Duration = str | int  # "30s", "5m", "2h", "1d" or milliseconds

ToastKind = Literal["success", "error", "info", "warning"]


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached value with the time it was written."""

    value: T
    created_at: int  # Unix timestamp ms


@dataclass(frozen=True, slots=True)
class OrderPage:
    """One page of a user's orders as returned by the backend."""

    items: list[Order]
    total_count: int


@dataclass(slots=True)
class PaginatedCollection(Generic[T]):
    """Items accumulated across pages plus the paging cursor."""

    items: list[T] = field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
    current_page: int = 0

"""Error types raised by stores and backends.

Read paths that have a cached fallback never raise past the store. Everything
else surfaces one of these, carrying a message fit for a toast.
"""


class StoreError(Exception):
    """Base class for all shopcache errors."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class TransientError(StoreError):
    """A failure that a stale cache entry may paper over."""


class FetchError(TransientError):
    """Network failure, timeout or server-side (5xx) error."""


class ShapeError(TransientError):
    """Response JSON is missing the fields the caller expects."""


class AuthorizationError(StoreError):
    """The backend refused the credentials (401/403)."""


class NotFoundError(StoreError):
    """The record does not exist or is not visible to the caller."""


class ConflictError(StoreError):
    """Duplicate key, e.g. an SKU or category name that already exists."""


class RequestError(StoreError):
    """The backend rejected the request as invalid."""


class NotAuthenticatedError(StoreError):
    """A user-scoped operation was attempted with no current user."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message, status=401)


class RequestCancelledError(StoreError):
    """An in-flight request was aborted by a newer request."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Request cancelled: {key}")
        self.key = key


__all__ = [
    "AuthorizationError",
    "ConflictError",
    "FetchError",
    "NotAuthenticatedError",
    "NotFoundError",
    "RequestCancelledError",
    "RequestError",
    "ShapeError",
    "StoreError",
    "TransientError",
]

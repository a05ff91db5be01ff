"""Shipping addresses of the signed-in user."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, TypeVar

from shopcache.backends.base import ProfileBackend
from shopcache.cache import now_ms
from shopcache.errors import (
    NotAuthenticatedError,
    RequestCancelledError,
    ShapeError,
    StoreError,
)
from shopcache.resource import CachedResource
from shopcache.toast import LoggingToastSink, ToastSink
from shopcache.types import Address, Clock, Duration

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _addresses_payload(raw: Any) -> list[Address]:
    if not isinstance(raw, dict) or not isinstance(raw.get("addresses"), list):
        raise ShapeError("Malformed addresses response: missing 'addresses' array")
    return raw["addresses"]


class AddressBook:
    """Cached address list; every mutation reloads it from the server."""

    def __init__(
        self,
        backend: ProfileBackend,
        *,
        ttl: Duration = "5m",
        clock: Clock = now_ms,
        toast: ToastSink | None = None,
    ) -> None:
        self._backend = backend
        self._toast = toast if toast is not None else LoggingToastSink()
        self._resource: CachedResource[list[Address]] = CachedResource(
            "addresses",
            ttl=ttl,
            normalize=_addresses_payload,
            clock=clock,
            toast=self._toast,
            error_message="Failed to load addresses",
        )
        self._user_id: str | None = None
        self._addresses: list[Address] = []
        self._loading = False

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def addresses(self) -> list[Address]:
        return list(self._addresses)

    @property
    def count(self) -> int:
        return len(self._addresses)

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def resource(self) -> CachedResource[list[Address]]:
        return self._resource

    def set_user(self, user_id: str | None) -> None:
        if user_id != self._user_id:
            self.clear()
            self._user_id = user_id

    def clear(self) -> None:
        self._resource.clear()
        self._addresses = []
        self._loading = False

    async def load(self, force: bool = False) -> list[Address]:
        """Addresses, default first then newest.

        A load aborted by a user switch returns the current, cleared, list.
        """
        user_id = self._user_id
        if user_id is None:
            return []
        self._loading = True
        try:
            addresses = await self._resource.load(
                f"addresses:{user_id}",
                partial(self._backend.list_addresses, user_id),
                force=force,
            )
        except RequestCancelledError:
            logger.debug("address load for %s aborted", user_id)
            return list(self._addresses)
        finally:
            self._loading = False
        if user_id == self._user_id:
            self._addresses = list(addresses)
        return addresses

    async def refresh(self) -> list[Address]:
        """Refetch regardless of TTL; a failure still falls back to the cache."""
        return await self.load(force=True)

    async def create(self, data: dict[str, Any]) -> Address:
        result = await self._mutate(
            "create", partial(self._backend.create_address, self._require_user(), data)
        )
        return result.get("address", {})

    async def update(self, address_id: str, changes: dict[str, Any]) -> Address:
        result = await self._mutate(
            "update",
            partial(
                self._backend.update_address, self._require_user(), address_id, changes
            ),
        )
        return result.get("address", {})

    async def delete(self, address_id: str) -> None:
        await self._mutate(
            "delete",
            partial(self._backend.delete_address, self._require_user(), address_id),
        )

    def _require_user(self) -> str:
        if self._user_id is None:
            raise NotAuthenticatedError()
        return self._user_id

    async def _mutate(self, action: str, call: Callable[[], Awaitable[R]]) -> R:
        try:
            result = await call()
        except StoreError as exc:
            logger.error("address %s failed: %s", action, exc)
            self._toast.show_toast(exc.message, "error")
            raise
        # No local patching: the server copy is the only truth
        self._resource.invalidate()
        await self.load()
        return result

"""Ties the profile-scoped stores to the signed-in identity."""

from __future__ import annotations

import asyncio
import logging

from shopcache.errors import StoreError
from shopcache.stores.addresses import AddressBook
from shopcache.stores.orders import OrderHistory
from shopcache.stores.profiles import UserProfiles
from shopcache.types import UserProfile

logger = logging.getLogger(__name__)


class ProfileSession:
    """Current user plus the stores scoped to them.

    Changing identity, including signing out, clears the orders and
    addresses caches wholesale.
    """

    def __init__(
        self,
        profiles: UserProfiles,
        orders: OrderHistory,
        addresses: AddressBook,
        *,
        bootstrap_timeout: float = 5.0,
    ) -> None:
        self.profiles = profiles
        self.orders = orders
        self.addresses = addresses
        self._bootstrap_timeout = bootstrap_timeout
        self._user_id: str | None = None
        self._profile: UserProfile | None = None

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def profile(self) -> UserProfile | None:
        return self._profile

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    @property
    def is_admin(self) -> bool:
        return bool(self._profile) and self._profile.get("role") == "admin"

    def switch_user(self, user_id: str | None) -> None:
        if user_id == self._user_id:
            return
        logger.debug("switching session user to %s", user_id)
        self._user_id = user_id
        self._profile = None
        self.orders.set_user(user_id)
        self.addresses.set_user(user_id)

    def sign_out(self) -> None:
        self.switch_user(None)

    async def bootstrap(
        self, user_id: str, timeout: float | None = None
    ) -> UserProfile | None:
        """Adopt user_id and load their profile, giving up after timeout.

        On timeout or failure the session stays signed in with no profile;
        a fetch that outlives the timer still fills the profile cache.
        """
        self.switch_user(user_id)
        limit = self._bootstrap_timeout if timeout is None else timeout
        try:
            profile = await asyncio.wait_for(self.profiles.get(user_id), limit)
        except asyncio.TimeoutError:
            logger.warning("profile bootstrap for %s timed out after %.1fs", user_id, limit)
            profile = None
        except StoreError as exc:
            logger.warning("profile bootstrap for %s failed: %s", user_id, exc)
            profile = None
        if user_id == self._user_id:
            self._profile = profile
        return profile

    async def refresh_profile(self) -> UserProfile | None:
        user_id = self._user_id
        if user_id is None:
            return None
        profile = await self.profiles.get(user_id, use_cache=False)
        if user_id != self._user_id:
            return None
        self._profile = profile
        return profile

    def clear_cache(self) -> None:
        """Drop everything cached for the current user."""
        self.orders.clear()
        self.addresses.clear()
        if self._user_id is not None:
            self.profiles.clear(self._user_id)

"""Domain stores built on CachedResource."""

from shopcache.stores.addresses import AddressBook
from shopcache.stores.orders import OrderHistory
from shopcache.stores.products import ProductStore
from shopcache.stores.profiles import UserProfiles

__all__ = [
    "AddressBook",
    "OrderHistory",
    "ProductStore",
    "UserProfiles",
]

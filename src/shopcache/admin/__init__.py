"""Admin back-office helpers."""

from shopcache.admin.catalog import AdminCatalog, slugify
from shopcache.admin.listing import (
    OrderQuery,
    Page,
    PageInfo,
    ProductFilters,
    export_orders_csv,
    filter_and_sort_orders,
    filter_products,
    paginate,
)
from shopcache.admin.orders import (
    AdminOrderListing,
    AdminOrders,
    DashboardStats,
    OrderStats,
)

__all__ = [
    "AdminCatalog",
    "AdminOrderListing",
    "AdminOrders",
    "DashboardStats",
    "OrderQuery",
    "OrderStats",
    "Page",
    "PageInfo",
    "ProductFilters",
    "export_orders_csv",
    "filter_and_sort_orders",
    "filter_products",
    "paginate",
    "slugify",
]

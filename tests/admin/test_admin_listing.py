"""Tests for client-side admin list helpers."""

import pytest

from shopcache.admin import (
    OrderQuery,
    ProductFilters,
    export_orders_csv,
    filter_and_sort_orders,
    filter_products,
    paginate,
)

ORDERS = [
    {
        "order_number": "ORD-00001",
        "status": "pending",
        "payment_status": "pending",
        "total_amount": 50,
        "created_at": "2024-01-02T10:00:00+00:00",
        "user_profile": {"first_name": "Ana", "last_name": "Silva", "email": "ana@example.com"},
    },
    {
        "order_number": "ORD-00002",
        "status": "shipped",
        "payment_status": "paid",
        "total_amount": 120,
        "created_at": "2024-01-01T10:00:00Z",
        "user_profile": {"first_name": "Bruno", "last_name": "Costa", "email": "bruno@example.com"},
    },
    {
        "order_number": "ORD-00003",
        "status": "delivered",
        "payment_status": "paid",
        "total_amount": 10,
        "created_at": "2024-01-03T10:00:00Z",
        "user_profile": None,
    },
]

PRODUCTS = [
    {"id": 1, "name": "Tee", "sku": "TEE-1", "category": "Shirts", "is_active": True, "is_featured": True, "stock_quantity": 50},
    {"id": 2, "name": "Cap", "sku": "CAP-1", "category": "Hats", "is_active": True, "is_featured": False, "stock_quantity": 4},
    {"id": 3, "name": "Old Tee", "sku": "TEE-0", "category": "Shirts", "is_active": False, "is_featured": False, "stock_quantity": 0},
]


def numbers(orders: list) -> list:
    return [o["order_number"] for o in orders]


class TestFilterAndSortOrders:
    """Search, filters and sorting."""

    def test_default_is_newest_first(self) -> None:
        result = filter_and_sort_orders(ORDERS, OrderQuery())
        assert numbers(result) == ["ORD-00003", "ORD-00001", "ORD-00002"]

    def test_search_by_customer_name(self) -> None:
        result = filter_and_sort_orders(ORDERS, OrderQuery(search="bruno costa"))
        assert numbers(result) == ["ORD-00002"]

    def test_search_by_email_and_number(self) -> None:
        assert numbers(filter_and_sort_orders(ORDERS, OrderQuery(search="ANA@"))) == ["ORD-00001"]
        assert numbers(filter_and_sort_orders(ORDERS, OrderQuery(search="00003"))) == ["ORD-00003"]

    def test_status_and_payment_filters(self) -> None:
        query = OrderQuery(payment_status="paid", status="shipped")
        assert numbers(filter_and_sort_orders(ORDERS, query)) == ["ORD-00002"]

    def test_sort_by_amount_ascending(self) -> None:
        query = OrderQuery(sort_by="amount", sort_order="asc")
        assert numbers(filter_and_sort_orders(ORDERS, query)) == [
            "ORD-00003",
            "ORD-00001",
            "ORD-00002",
        ]

    def test_input_is_not_mutated(self) -> None:
        before = numbers(ORDERS)
        filter_and_sort_orders(ORDERS, OrderQuery(sort_by="status"))
        assert numbers(ORDERS) == before


class TestFilterProducts:
    """Admin product filters."""

    def test_no_filters(self) -> None:
        assert len(filter_products(PRODUCTS, ProductFilters())) == 3

    def test_search_matches_sku(self) -> None:
        result = filter_products(PRODUCTS, ProductFilters(search="tee-"))
        assert [p["id"] for p in result] == [1, 3]

    def test_status_and_featured(self) -> None:
        assert [p["id"] for p in filter_products(PRODUCTS, ProductFilters(status="inactive"))] == [3]
        assert [p["id"] for p in filter_products(PRODUCTS, ProductFilters(featured="featured"))] == [1]

    @pytest.mark.parametrize(
        ("stock", "expected"),
        [("in-stock", [1]), ("low-stock", [2]), ("out-of-stock", [3])],
    )
    def test_stock_levels(self, stock, expected) -> None:
        result = filter_products(PRODUCTS, ProductFilters(stock=stock))
        assert [p["id"] for p in result] == expected

    def test_category(self) -> None:
        result = filter_products(PRODUCTS, ProductFilters(category="Hats"))
        assert [p["id"] for p in result] == [2]


class TestPaginate:
    """1-based slicing."""

    def test_first_page(self) -> None:
        page = paginate(list(range(45)), page=1, limit=20)
        assert page.items == list(range(20))
        assert page.info.total_pages == 3
        assert page.info.has_next
        assert not page.info.has_prev

    def test_last_page(self) -> None:
        page = paginate(list(range(45)), page=3, limit=20)
        assert page.items == list(range(40, 45))
        assert not page.info.has_next
        assert page.info.has_prev

    def test_empty(self) -> None:
        page = paginate([])
        assert page.items == []
        assert page.info.total_pages == 0

    def test_invalid_page(self) -> None:
        with pytest.raises(ValueError):
            paginate([1], page=0)


def test_export_orders_csv() -> None:
    text = export_orders_csv(ORDERS[:1] + ORDERS[2:])
    lines = text.splitlines()
    assert lines[0] == "Order Number,Customer,Email,Status,Payment Status,Total,Date"
    assert lines[1] == "ORD-00001,Ana Silva,ana@example.com,pending,pending,50,2024-01-02"
    assert lines[2] == "ORD-00003,,,delivered,paid,10,2024-01-03"

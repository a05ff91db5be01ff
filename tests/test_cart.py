"""Tests for the local shopping cart."""

import pytest

from shopcache import Cart
from shopcache.cart import is_sold_out

TEE = {"id": 1, "name": "Tee", "price": 20, "stock_quantity": 5}
CAP = {"id": 2, "name": "Cap", "price": "12.50", "stock_quantity": 3}


@pytest.fixture
def cart() -> Cart:
    return Cart()


class TestCart:
    """Adding, merging and removing lines."""

    def test_add_creates_line(self, cart) -> None:
        item = cart.add(TEE, 2, color="black", size="M")
        assert item.quantity == 2
        assert cart.count == 2
        assert cart.total == 40.0

    def test_same_variant_merges(self, cart) -> None:
        cart.add(TEE, 1, color="black", size="M")
        cart.add(TEE, 2, color="black", size="M")
        assert len(cart.items) == 1
        assert cart.count == 3

    def test_different_variant_is_new_line(self, cart) -> None:
        cart.add(TEE, 1, color="black", size="M")
        cart.add(TEE, 1, color="white", size="M")
        assert len(cart.items) == 2

    def test_string_prices(self, cart) -> None:
        cart.add(CAP, 2)
        assert cart.total == 25.0

    def test_sold_out_is_ignored(self, cart) -> None:
        assert cart.add({**TEE, "stock_quantity": 0}) is None
        assert cart.add({**TEE, "sold_out": True}) is None
        assert cart.items == []

    def test_non_positive_quantity_is_ignored(self, cart) -> None:
        assert cart.add(TEE, 0) is None

    def test_update_quantity(self, cart) -> None:
        item = cart.add(TEE)
        cart.update_quantity(item.id, 4)
        assert cart.count == 4

    def test_update_to_zero_removes(self, cart) -> None:
        item = cart.add(TEE)
        cart.update_quantity(item.id, 0)
        assert cart.items == []

    def test_remove_and_clear(self, cart) -> None:
        tee = cart.add(TEE)
        cart.add(CAP)
        cart.remove(tee.id)
        assert [i.product["name"] for i in cart.items] == ["Cap"]
        cart.clear()
        assert cart.count == 0


def test_unknown_stock_is_not_sold_out() -> None:
    assert not is_sold_out({"id": 3})

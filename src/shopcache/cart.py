"""Shopping cart held in local state."""

from __future__ import annotations

import itertools
from dataclasses import dataclass

from shopcache.types import Product


@dataclass(slots=True)
class CartItem:
    id: int
    product: Product
    quantity: int
    selected_color: str | None = None
    selected_size: str | None = None

    @property
    def line_total(self) -> float:
        return float(self.product.get("price") or 0) * self.quantity


def is_sold_out(product: Product) -> bool:
    if product.get("sold_out"):
        return True
    return product.get("stock_quantity") == 0


class Cart:
    """Lines keyed by product, color and size."""

    def __init__(self) -> None:
        self._items: list[CartItem] = []
        self._ids = itertools.count(1)

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self._items)

    def add(
        self,
        product: Product,
        quantity: int = 1,
        color: str | None = None,
        size: str | None = None,
    ) -> CartItem | None:
        """Add quantity of a product variant. Sold-out products are ignored."""
        if is_sold_out(product) or quantity <= 0:
            return None
        for item in self._items:
            if (
                item.product.get("id") == product.get("id")
                and item.selected_color == color
                and item.selected_size == size
            ):
                item.quantity += quantity
                return item
        item = CartItem(
            id=next(self._ids),
            product=product,
            quantity=quantity,
            selected_color=color,
            selected_size=size,
        )
        self._items.append(item)
        return item

    def remove(self, item_id: int) -> None:
        self._items = [item for item in self._items if item.id != item_id]

    def update_quantity(self, item_id: int, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove(item_id)
            return
        for item in self._items:
            if item.id == item_id:
                item.quantity = quantity

    def clear(self) -> None:
        self._items = []

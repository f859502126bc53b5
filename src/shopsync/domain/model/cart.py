"""Cart aggregate — the local shopping cart.

The Cart is an aggregate root that owns its line items. It never talks to
the network and none of its operations raise for ordinary input: removing
an unknown line is a no-op, and a quantity that drops to zero removes the
line.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from shopsync.domain.model.product import Product
from shopsync.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity


def new_identity() -> str:
    return uuid.uuid4().hex


@dataclass
class CartLineItem:
    """One product in the cart.

    ``unit_price`` is a snapshot of the product price. It is refreshed when
    the same product is added again, and left alone by quantity changes.
    """

    id: str
    product_id: int
    product_name: str
    unit_price: Money
    quantity: Quantity

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Cart:
    """Aggregate root for the shopping cart.

    Invariants:
    - at most one line item per ``product_id``
    - ``total`` and ``item_count`` are always computed from the current
      line items, never stored alongside them
    """

    id: str = field(default_factory=new_identity)
    items: list[CartLineItem] = field(default_factory=list)

    # --- Mutations ------------------------------------------------------------

    def add_item(self, product: Product, quantity: int = 1) -> CartLineItem | None:
        """Add ``quantity`` units of ``product``.

        Merges into the existing line for the product if there is one.
        Returns the affected line, or None when ``quantity`` is not positive.
        """
        if quantity <= 0:
            return None

        existing = self.get_item(product.id)
        if existing is not None:
            existing.quantity = existing.quantity + quantity
            existing.unit_price = product.price
            existing.product_name = product.name
            return existing

        item = CartLineItem(
            id=new_identity(),
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=Quantity(quantity),
        )
        self.items.append(item)
        return item

    def remove_item(self, line_item_id: str) -> bool:
        """Drop a line. Returns False if it was not in the cart."""
        remaining = [item for item in self.items if item.id != line_item_id]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed

    def update_quantity(self, line_item_id: str, quantity: int) -> bool:
        """Set a line's quantity; zero or less removes the line.

        Returns False if the line does not exist.
        """
        if quantity <= 0:
            return self.remove_item(line_item_id)

        item = self.find_line(line_item_id)
        if item is None:
            return False
        item.quantity = Quantity(quantity)
        return True

    # --- Queries --------------------------------------------------------------

    def get_item(self, product_id: int) -> CartLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def find_line(self, line_item_id: str) -> CartLineItem | None:
        for item in self.items:
            if item.id == line_item_id:
                return item
        return None

    @property
    def total(self) -> Money:
        currency = self.items[0].unit_price.currency if self.items else DEFAULT_CURRENCY
        result = Money.zero(currency)
        for item in self.items:
            result = result + item.subtotal
        return result

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

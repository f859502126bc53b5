"""Cart store: the application-facing owner of the Cart aggregate.

Wraps the aggregate, notifies subscribers (the snapshot persister among
them) after every mutation, and exposes the read accessors views use.
All operations are synchronous and total: none of them raises for
ordinary input.
"""

from __future__ import annotations

import structlog

from shopsync.application.state import StateContainer
from shopsync.domain.model.cart import Cart, CartLineItem
from shopsync.domain.model.product import Product
from shopsync.domain.model.value_objects import Money

logger = structlog.get_logger(__name__)


class CartStore(StateContainer):

    def __init__(self, cart: Cart | None = None) -> None:
        super().__init__()
        self._cart = cart if cart is not None else Cart()
        self.error: str | None = None

    @property
    def cart(self) -> Cart:
        return self._cart

    # --- Mutations ------------------------------------------------------------

    def add_item(self, product: Product, quantity: int = 1) -> None:
        item = self._cart.add_item(product, quantity)
        if item is None:
            logger.warning(
                "cart_add_ignored", product_id=product.id, quantity=quantity
            )
            return
        logger.info(
            "cart_item_added",
            product_id=product.id,
            line_id=item.id,
            quantity=item.quantity.value,
        )
        self._changed()

    def remove_item(self, line_item_id: str) -> None:
        if self._cart.remove_item(line_item_id):
            logger.info("cart_item_removed", line_id=line_item_id)
        self._changed()

    def update_quantity(self, line_item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(line_item_id)
            return
        self._cart.update_quantity(line_item_id, quantity)
        self._changed()

    def clear_cart(self) -> None:
        self._cart = Cart()
        logger.info("cart_cleared", cart_id=self._cart.id)
        self._changed()

    def restore(self, cart: Cart) -> None:
        """Seed the store from a snapshot. Subscribers are not notified."""
        self._cart = cart
        self.error = None

    # --- Queries --------------------------------------------------------------

    def get_item_count(self) -> int:
        return self._cart.item_count

    def get_cart_total(self) -> Money:
        return self._cart.total

    def get_item(self, product_id: int) -> CartLineItem | None:
        return self._cart.get_item(product_id)

    # --- Internal helpers -----------------------------------------------------

    def _changed(self) -> None:
        self.error = None
        self._notify()

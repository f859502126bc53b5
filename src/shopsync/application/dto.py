"""Data Transfer Objects: plain containers handed to the presentation layer.

Views render these instead of reaching into the aggregates, so they can
never mutate store state by accident.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopsync.domain.model.cart import Cart
from shopsync.domain.model.product import Product


@dataclass(frozen=True)
class CartLineItemDTO:
    id: str
    product_id: int
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    subtotal: str


@dataclass(frozen=True)
class CartDTO:
    id: str
    items: list[CartLineItemDTO]
    total: str
    item_count: int

    @staticmethod
    def from_cart(cart: Cart) -> CartDTO:
        return CartDTO(
            id=cart.id,
            items=[
                CartLineItemDTO(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    unit_price=str(item.unit_price),
                    subtotal=str(item.subtotal),
                )
                for item in cart.items
            ],
            total=str(cart.total),
            item_count=cart.item_count,
        )


@dataclass(frozen=True)
class ProductDTO:
    id: int
    name: str
    price: str
    stock: int
    available: bool
    seller: str

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            price=str(product.price),
            stock=product.stock,
            available=product.in_stock,
            seller=product.seller.full_name if product.seller else "",
        )

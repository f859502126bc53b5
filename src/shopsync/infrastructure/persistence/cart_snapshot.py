"""Serialization of the Cart aggregate to and from its snapshot projection.

Amounts are written as decimal strings. ``total`` and ``itemCount`` are
written for readers of the file but recomputed on restore.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from shopsync.application.cart_store import CartStore
from shopsync.domain.model.cart import Cart, CartLineItem
from shopsync.domain.model.value_objects import Money, Quantity


def cart_to_projection(cart: Cart) -> dict[str, Any]:
    return {
        "id": cart.id,
        "items": [
            {
                "id": item.id,
                "productId": item.product_id,
                "productName": item.product_name,
                "unitPrice": str(item.unit_price.amount),
                "currency": item.unit_price.currency,
                "quantity": item.quantity.value,
            }
            for item in cart.items
        ],
        "total": str(cart.total.amount),
        "itemCount": cart.item_count,
    }


def cart_from_projection(raw: dict[str, Any]) -> Cart:
    items: list[CartLineItem] = []
    seen: set[int] = set()
    for entry in raw.get("items", []):
        product_id = entry["productId"]
        # one line per product, even if the file was edited by hand
        if product_id in seen:
            continue
        seen.add(product_id)
        items.append(
            CartLineItem(
                id=entry["id"],
                product_id=product_id,
                product_name=entry.get("productName", ""),
                unit_price=Money(Decimal(entry["unitPrice"]), entry.get("currency", "USD")),
                quantity=Quantity(int(entry["quantity"])),
            )
        )
    return Cart(id=raw["id"], items=items)


def project_cart_store(store: CartStore) -> dict[str, Any]:
    return {"cart": cart_to_projection(store.cart)}


def seed_cart_store(store: CartStore, projection: dict[str, Any]) -> None:
    store.restore(cart_from_projection(projection["cart"]))

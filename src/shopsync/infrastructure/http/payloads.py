"""Wire models for the catalog REST API and their mapping to the domain.

The service speaks camelCase JSON; field names here mirror it so pydantic
can validate responses without aliases.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict

from shopsync.domain.model.product import Product, ProductChanges, ProductDraft, SellerRef
from shopsync.domain.model.value_objects import Money


class SellerPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    fullName: str = ""
    email: str = ""


class ProductPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    description: str | None = ""
    price: Decimal
    stock: int = 0
    active: bool = True
    available: bool = True
    imageData: str | None = None
    imageContentType: str | None = None
    seller: SellerPayload | None = None
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            description=self.description or "",
            price=Money(self.price),
            stock=self.stock,
            active=self.active,
            available=self.available,
            seller=(
                SellerRef(id=self.seller.id, full_name=self.seller.fullName, email=self.seller.email)
                if self.seller is not None
                else None
            ),
            image_data=self.imageData,
            image_content_type=self.imageContentType,
            created_at=self.createdAt,
            updated_at=self.updatedAt,
        )


_CAMEL = {
    "image_data": "imageData",
    "image_content_type": "imageContentType",
    "seller_id": "sellerId",
}


def draft_to_json(draft: ProductDraft) -> dict[str, Any]:
    body: dict[str, Any] = {
        "name": draft.name.strip(),
        "description": draft.description,
        "price": str(draft.price.amount),
        "stock": draft.stock,
        "sellerId": draft.seller_id,
    }
    if draft.image_data and draft.image_content_type:
        body["imageData"] = draft.image_data
        body["imageContentType"] = draft.image_content_type
    return body


def changes_to_json(changes: ProductChanges) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for name, value in changes.changed_fields().items():
        if isinstance(value, Money):
            value = str(value.amount)
        body[_CAMEL.get(name, name)] = value
    return body

"""Product aggregate and the payloads used to create or change one.

Products are owned by the remote catalog. The client holds read-only
copies; the only way to change one is a create/update/delete round-trip
through the ProductStore.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime

from shopsync.domain.exceptions import ValidationError
from shopsync.domain.model.value_objects import Money


@dataclass(frozen=True)
class SellerRef:
    id: int
    full_name: str = ""
    email: str = ""


@dataclass(frozen=True)
class Product:
    """A product as last reported by the catalog service."""

    id: int
    name: str
    price: Money
    description: str = ""
    stock: int = 0
    active: bool = True
    available: bool = True
    seller: SellerRef | None = None
    image_data: str | None = None
    image_content_type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Product stock cannot be negative, got {self.stock}")

    @property
    def image_data_url(self) -> str | None:
        if not self.image_data or not self.image_content_type:
            return None
        return f"data:{self.image_content_type};base64,{self.image_data}"

    @property
    def in_stock(self) -> bool:
        return self.available and self.stock > 0


@dataclass(frozen=True)
class ProductDraft:
    """Everything the catalog needs to create a product."""

    name: str
    description: str
    price: Money
    stock: int
    seller_id: int
    image_data: str | None = None
    image_content_type: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")
        if self.stock < 0:
            raise ValidationError("Product stock cannot be negative")


@dataclass(frozen=True)
class ProductChanges:
    """A partial update. Fields left as ``None`` are not sent."""

    name: str | None = None
    description: str | None = None
    price: Money | None = None
    stock: int | None = None
    active: bool | None = None
    image_data: str | None = None
    image_content_type: str | None = None

    def __post_init__(self) -> None:
        if self.name is not None and not self.name.strip():
            raise ValidationError("Product name cannot be blank")
        if self.stock is not None and self.stock < 0:
            raise ValidationError("Product stock cannot be negative")

    def changed_fields(self) -> dict[str, object]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def is_empty(self) -> bool:
        return not self.changed_fields()

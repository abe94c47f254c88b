"""Product entities.

Products are stored as documents in the ``products`` collection using the
storefront's camelCase field names (``productName``, ``quantity``, ...).

Business rules implemented:
- Price must be greater than zero (enforced by the input DTOs).
- Stock quantity cannot be negative; a missing or null quantity reads as 0.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from shared.domain.entities import DocumentEntity

PRODUCTS_COLLECTION = "products"


class Variant(BaseModel):
    """A named product option, e.g. ``Size: XL``."""

    name: str
    value: str


class Product(DocumentEntity):
    product_name: str
    description: str = ""
    price: Decimal
    images: List[str] = Field(default_factory=list)
    quantity: int = 0
    variants: List[Variant] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def missing_quantity_is_zero(cls, v):
        return 0 if v is None else v

    def __str__(self) -> str:
        return f"{self.product_name} ({self.quantity} in stock)"

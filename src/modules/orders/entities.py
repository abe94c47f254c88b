"""Order entities.

Orders are placed by the storefront and stored as documents in the
``orders`` collection.  This backend never recomputes prices: line item
prices and ``total_amount`` are trusted as stored.

Business rules implemented:
- Status is open-ended: the storefront and other tools may write values
  this backend does not know.  Stored values are compared
  case-insensitively and any status without an entry in
  ``VALID_TRANSITIONS`` is terminal.
- Only pending orders can transition.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from modules.orders.constants import VALID_TRANSITIONS, OrderStatus
from modules.products.entities import Variant
from shared.domain.entities import DocumentEntity


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LineItem(_CamelModel):
    """One product reference plus quantity and price within an order."""

    product_id: str
    product_name: str = ""
    quantity: int
    price: Decimal = Decimal("0")
    final_price: Decimal = Decimal("0")
    selected_variant: Optional[Variant] = None


class CustomerDetails(_CamelModel):
    full_name: str = ""
    company_name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""


class Order(DocumentEntity):
    """Order aggregate root."""

    status: str = OrderStatus.PENDING.value
    items: List[LineItem] = Field(default_factory=list)
    total_amount: Decimal = Decimal("0")
    notes: str = ""
    customer_details: CustomerDetails = Field(default_factory=CustomerDetails)
    created_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    cancelled_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalise_status(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return not VALID_TRANSITIONS.get(self.status)

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    def __str__(self) -> str:
        return f"{self.id} ({self.status})"

"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``ItemErrorDTO``: a line item whose stock could not be adjusted.
- ``StockAdjustmentDTO``: a stock movement applied during approval.
- ``ApprovalResultDTO``: outcome of ``OrderService.approve_order``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from pydantic import BaseModel, ConfigDict

from modules.orders.entities import Order

if TYPE_CHECKING:
    from modules.orders.exceptions import StockAdjustmentFailed
    from modules.products.ledger import StockAdjustment


class ItemErrorDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int
    error: str

    @classmethod
    def from_exception(cls, exc: StockAdjustmentFailed) -> ItemErrorDTO:
        return cls(product_id=exc.product_id, quantity=exc.quantity, error=exc.reason)


class StockAdjustmentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    previous_quantity: int
    new_quantity: int

    @classmethod
    def from_adjustment(cls, adjustment: StockAdjustment) -> StockAdjustmentDTO:
        return cls(
            product_id=adjustment.product_id,
            previous_quantity=adjustment.previous_quantity,
            new_quantity=adjustment.new_quantity,
        )


class ApprovalResultDTO(BaseModel):
    """Immutable result of an approval.

    The approval itself succeeded whenever this object exists; callers
    must still inspect ``item_errors`` for stock adjustments that failed.
    """

    model_config = ConfigDict(frozen=True)

    order: Order
    item_errors: List[ItemErrorDTO] = []
    adjustments: List[StockAdjustmentDTO] = []

    @property
    def fully_applied(self) -> bool:
        return not self.item_errors

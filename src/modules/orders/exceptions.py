"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from modules.orders.dtos import ItemErrorDTO


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidStateTransition(Exception):
    """The order's current status does not allow the requested transition."""


class StatusWriteFailed(Exception):
    """The store rejected the status write; the order was left unchanged."""


class StockAdjustmentFailed(Exception):
    """Stock for one line item could not be adjusted.

    Non-fatal in best-effort mode: collected per item and reported next to
    a successful approval.
    """

    def __init__(self, product_id: str, quantity: int, reason: str) -> None:
        super().__init__(f"Stock adjustment failed for product {product_id}: {reason}")
        self.product_id = product_id
        self.quantity = quantity
        self.reason = reason


class ApprovalRolledBack(Exception):
    """Strict mode: a stock adjustment failed and the approval was undone."""

    def __init__(self, order_id: str, item_errors: List[ItemErrorDTO]) -> None:
        super().__init__(
            f"Approval of order {order_id} was rolled back: "
            f"{len(item_errors)} stock adjustment(s) failed."
        )
        self.order_id = order_id
        self.item_errors = item_errors


class MalformedOrder(Exception):
    """The stored order document cannot be read as an order."""


class CompensationFailed(Exception):
    """Strict mode: undoing a failed approval did not complete.

    The stored order and the product stock may disagree and need manual
    reconciliation.  ``failed_steps`` names the steps that raised.
    """

    def __init__(
        self, order_id: str, item_errors: List[ItemErrorDTO], failed_steps: List[str]
    ) -> None:
        super().__init__(
            f"Approval of order {order_id} failed and could not be fully undone "
            f"(failed steps: {', '.join(failed_steps)})."
        )
        self.order_id = order_id
        self.item_errors = item_errors
        self.failed_steps = failed_steps

"""Order domain constants.

Defines status choices and valid status transitions for the order
state machine, plus the approval modes.
"""

from django.db import models

ORDERS_COLLECTION = "orders"


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


# Statuses missing from this table (including values written by other
# clients that this backend does not know) allow no transition.
VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.APPROVED, OrderStatus.CANCELLED},
    OrderStatus.APPROVED: set(),
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


class ApprovalMode(models.TextChoices):
    """How the approval workflow reacts to a failed stock adjustment.

    ``BEST_EFFORT`` keeps the approval and reports the failed items.
    ``STRICT`` undoes every applied adjustment, resets the order to
    pending and fails the approval.
    """

    BEST_EFFORT = "best_effort", "Best effort"
    STRICT = "strict", "Strict"

"""Order service layer (Use Cases).

Orchestrates order verification: look-up, approval with stock
adjustment, and cancellation.  Orders and products are separate
documents and the store offers no multi-document transaction, so the
approval is a short sequence of independent writes:

1. fetch the order and check the state machine (no writes on failure);
2. write ``status=approved`` (abort with ``StatusWriteFailed`` on error,
   stock untouched);
3. decrement stock per line item, in order.  Each item is isolated: a
   failure is recorded and the remaining items are still processed.

What happens after a failed item depends on the approval mode:

- ``best_effort``: the approval stands and failed items are reported in
  ``ApprovalResultDTO.item_errors``.
- ``strict``: applied decrements are restocked in reverse order, the
  order is reset to pending, and ``ApprovalRolledBack`` is raised.  If
  any undo step fails, ``CompensationFailed`` is raised instead and no
  rollback event is published.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog
from django.conf import settings
from django.utils import timezone

from modules.orders.constants import ApprovalMode, OrderStatus
from modules.orders.dtos import ApprovalResultDTO, ItemErrorDTO, StockAdjustmentDTO
from modules.orders.events import (
    OrderApprovalRolledBack,
    OrderApproved,
    OrderCancelled,
)
from modules.orders.exceptions import (
    ApprovalRolledBack,
    CompensationFailed,
    InvalidStateTransition,
    OrderNotFound,
    StatusWriteFailed,
    StockAdjustmentFailed,
)
from modules.products.exceptions import InvalidStockAmount, ProductNotFound
from shared.domain.documents import DocumentStoreError
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.orders.entities import LineItem, Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.ledger import InventoryLedger, StockAdjustment
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives the order repository and the inventory ledger via
    constructor injection (DIP).  ``mode`` defaults to the
    ``ORDER_APPROVAL_MODE`` setting.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        inventory_ledger: InventoryLedger,
        mode: Optional[str] = None,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._ledger = inventory_ledger
        self._mode = ApprovalMode(mode or settings.ORDER_APPROVAL_MODE)
        self._event_bus = event_bus or default_event_bus

    @property
    def mode(self) -> ApprovalMode:
        return self._mode

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def approve_order(
        self, order_id: str, approved_by: Optional[str] = None
    ) -> ApprovalResultDTO:
        """Approve a pending order and take its items out of stock.

        ``approved_by`` identifies the caller and is stored on the order.

        Raises:
            OrderNotFound: order does not exist.
            MalformedOrder: the stored document is not a readable order.
            InvalidStateTransition: order is not pending; nothing written.
            StatusWriteFailed: the status write failed; stock untouched.
            ApprovalRolledBack: strict mode only, a stock adjustment failed
                and the approval was compensated.
            CompensationFailed: strict mode only, undoing the approval
                failed part-way; stored status and stock need reconciling.
        """
        log = logger.bind(order_id=order_id, mode=self._mode.value)
        log.info("order.approval_started", approved_by=approved_by)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            log.warning("order.not_found")
            raise OrderNotFound(f"Order {order_id} not found.")

        if not order.can_transition_to(OrderStatus.APPROVED):
            log.warning("order.invalid_transition", current_status=order.status)
            raise InvalidStateTransition(
                f"Only pending orders can be approved (order is {order.status})."
            )

        approved_at = timezone.now()
        try:
            self._order_repo.set_approved(order_id, approved_at, approved_by)
        except (OrderNotFound, DocumentStoreError) as exc:
            log.error("order.status_write_failed", error=str(exc))
            raise StatusWriteFailed(
                f"Failed to approve order {order_id}. Please try again."
            ) from exc

        adjustments, item_errors = self._decrement_items(order.items, log)

        if item_errors and self._mode == ApprovalMode.STRICT:
            failed_steps = self._compensate(order_id, adjustments, log)
            if failed_steps:
                raise CompensationFailed(order_id, item_errors, failed_steps)
            self._event_bus.publish(
                OrderApprovalRolledBack(
                    aggregate_id=order_id,
                    payload={"failed_items": [e.product_id for e in item_errors]},
                )
            )
            raise ApprovalRolledBack(order_id, item_errors)

        approved = order.model_copy(
            update={
                "status": OrderStatus.APPROVED.value,
                "approved_at": approved_at,
                "approved_by": approved_by,
            }
        )
        log.info(
            "order.approved",
            adjusted_items=len(adjustments),
            failed_items=len(item_errors),
        )
        self._event_bus.publish(
            OrderApproved(
                aggregate_id=order_id,
                payload={"failed_items": [e.product_id for e in item_errors]},
            )
        )
        return ApprovalResultDTO(
            order=approved,
            item_errors=item_errors,
            adjustments=[StockAdjustmentDTO.from_adjustment(a) for a in adjustments],
        )

    def cancel_order(self, order_id: str) -> Order:
        """Cancel a pending order.

        Stock is only taken on approval, so cancelling a pending order
        releases nothing.

        Raises:
            OrderNotFound: order does not exist.
            MalformedOrder: the stored document is not a readable order.
            InvalidStateTransition: order is not pending.
            StatusWriteFailed: the status write failed.
        """
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=order_id, current_status=order.status)

        if not order.can_transition_to(OrderStatus.CANCELLED):
            log.warning("order.cancel_not_allowed")
            raise InvalidStateTransition(f"Cannot cancel order in status {order.status}.")

        cancelled_at = timezone.now()
        try:
            self._order_repo.set_cancelled(order_id, cancelled_at)
        except (OrderNotFound, DocumentStoreError) as exc:
            log.error("order.status_write_failed", error=str(exc))
            raise StatusWriteFailed(
                f"Failed to cancel order {order_id}. Please try again."
            ) from exc

        log.info("order.cancelled")
        self._event_bus.publish(OrderCancelled(aggregate_id=order_id))
        return order.model_copy(
            update={"status": OrderStatus.CANCELLED.value, "cancelled_at": cancelled_at}
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
            MalformedOrder: the stored document is not a readable order.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, status: Optional[str] = None) -> List[Order]:
        """Return orders newest first, optionally filtered by status."""
        orders = self._order_repo.list(status)
        return sorted(
            orders,
            key=lambda o: o.created_at.timestamp() if o.created_at else 0.0,
            reverse=True,
        )

    # ------------------------------------------------------------------
    # Approval steps
    # ------------------------------------------------------------------

    def _decrement_items(
        self, items: List[LineItem], log
    ) -> tuple[List[StockAdjustment], List[ItemErrorDTO]]:
        adjustments: List[StockAdjustment] = []
        item_errors: List[ItemErrorDTO] = []

        for item in items:
            try:
                adjustment = self._ledger.decrement_stock(item.product_id, item.quantity)
            except (ProductNotFound, InvalidStockAmount, DocumentStoreError) as exc:
                failure = StockAdjustmentFailed(item.product_id, item.quantity, str(exc))
                log.warning(
                    "order.stock_adjustment_failed",
                    product_id=item.product_id,
                    quantity=item.quantity,
                    error=failure.reason,
                )
                item_errors.append(ItemErrorDTO.from_exception(failure))
                continue
            adjustments.append(adjustment)

        return adjustments, item_errors

    def _compensate(
        self, order_id: str, adjustments: List[StockAdjustment], log
    ) -> List[str]:
        """Undo a partially applied approval, newest write first.

        Every step is attempted even if an earlier one fails.  Returns the
        names of the steps that failed; an empty list means the order is
        pending again and every removed unit is back in stock.
        """
        log.warning("order.approval_compensation_started", steps=len(adjustments) + 1)
        failed_steps: List[str] = []

        for adjustment in reversed(adjustments):
            removed = adjustment.previous_quantity - adjustment.new_quantity
            if removed <= 0:
                continue
            try:
                self._ledger.restock(adjustment.product_id, removed)
            except (ProductNotFound, DocumentStoreError) as exc:
                failed_steps.append(f"restock:{adjustment.product_id}")
                log.error(
                    "order.compensation_failed",
                    step="restock",
                    product_id=adjustment.product_id,
                    quantity=removed,
                    error=str(exc),
                )

        try:
            self._order_repo.reset_to_pending(order_id)
        except (OrderNotFound, DocumentStoreError) as exc:
            failed_steps.append("reset_status")
            log.error("order.compensation_failed", step="reset_status", error=str(exc))

        if failed_steps:
            log.error("order.approval_compensation_incomplete", failed_steps=failed_steps)
        else:
            log.info("order.approval_compensated")
        return failed_steps

"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderApprovalRolledBack,
    OrderApproved,
    OrderCancelled,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderApprovedHandler(IEventHandler[OrderApproved]):
    def handle(self, event: OrderApproved) -> None:
        failed = event.payload.get("failed_items", [])
        log = logger.bind(order_id=event.aggregate_id, failed_items=len(failed))
        if failed:
            log.warning("order.approved_with_stock_errors")
        else:
            log.info("order.approved_notification")


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info("order.cancelled_notification", order_id=event.aggregate_id)


class OrderApprovalRolledBackHandler(IEventHandler[OrderApprovalRolledBack]):
    def handle(self, event: OrderApprovalRolledBack) -> None:
        logger.warning(
            "order.approval_rolled_back_notification",
            order_id=event.aggregate_id,
            failed_items=event.payload.get("failed_items", []),
        )


order_approved_handler = OrderApprovedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_approval_rolled_back_handler = OrderApprovalRolledBackHandler()

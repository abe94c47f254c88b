"""Unit tests for Orders event handlers."""

from __future__ import annotations

import logging

import pytest

from modules.orders.events import OrderApprovalRolledBack, OrderApproved, OrderCancelled
from modules.orders.handlers import (
    OrderApprovalRolledBackHandler,
    OrderApprovedHandler,
    OrderCancelledHandler,
)

pytestmark = pytest.mark.unit


def test_order_approved_handler_logs(caplog):
    event = OrderApproved(aggregate_id="order-1", payload={"failed_items": []})

    with caplog.at_level(logging.INFO, logger="modules.orders.handlers"):
        OrderApprovedHandler().handle(event)

    assert any(
        "order.approved_notification" in record.getMessage()
        for record in caplog.records
    )


def test_order_approved_with_failures_logs_warning(caplog):
    event = OrderApproved(aggregate_id="order-1", payload={"failed_items": ["p-1"]})

    with caplog.at_level(logging.INFO, logger="modules.orders.handlers"):
        OrderApprovedHandler().handle(event)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any(
        "order.approved_with_stock_errors" in record.getMessage() for record in warnings
    )


def test_order_cancelled_handler_logs(caplog):
    with caplog.at_level(logging.INFO, logger="modules.orders.handlers"):
        OrderCancelledHandler().handle(OrderCancelled(aggregate_id="order-1"))

    assert any(
        "order.cancelled_notification" in record.getMessage()
        for record in caplog.records
    )


def test_rolled_back_handler_logs(caplog):
    event = OrderApprovalRolledBack(
        aggregate_id="order-1", payload={"failed_items": ["p-1"]}
    )

    with caplog.at_level(logging.WARNING, logger="modules.orders.handlers"):
        OrderApprovalRolledBackHandler().handle(event)

    assert any(
        "order.approval_rolled_back_notification" in record.getMessage()
        for record in caplog.records
    )

"""Unit tests for OrderService: approval, stock adjustment and cancellation."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from modules.orders.constants import ApprovalMode, OrderStatus
from modules.orders.events import OrderApprovalRolledBack, OrderApproved, OrderCancelled
from modules.orders.exceptions import (
    ApprovalRolledBack,
    CompensationFailed,
    InvalidStateTransition,
    MalformedOrder,
    OrderNotFound,
    StatusWriteFailed,
)
from modules.orders.repositories.document_repository import OrderDocumentRepository
from modules.orders.services import OrderService
from modules.products.exceptions import ProductNotFound
from modules.products.ledger import InventoryLedger
from shared.domain.documents import DocumentStoreError
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


class Recorder:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


@pytest.fixture()
def bus():
    return InMemoryEventBus()


def _service(store, bus, mode=ApprovalMode.BEST_EFFORT):
    return OrderService(
        order_repository=OrderDocumentRepository(store),
        inventory_ledger=InventoryLedger(store),
        mode=mode,
        event_bus=bus,
    )


@pytest.fixture()
def service(memory_store, bus):
    return _service(memory_store, bus)


@pytest.fixture()
def strict_service(memory_store, bus):
    return _service(memory_store, bus, ApprovalMode.STRICT)


def _stock(store, product_id):
    return store.get("products", product_id)["quantity"]


def _status(store, order_id):
    return store.get("orders", order_id)["status"]


# ---------------------------------------------------------------------------
# Approval: best effort
# ---------------------------------------------------------------------------


class TestApproveOrder:
    def test_approves_and_decrements_each_item(
        self, service, memory_store, make_product, make_order
    ):
        shirt = make_product(memory_store, "Shirt", quantity=10)
        scarf = make_product(memory_store, "Scarf", quantity=4)
        order = make_order(memory_store, [(shirt.id, 3), (scarf.id, 1)])

        result = service.approve_order(order.id)

        assert result.order.status == OrderStatus.APPROVED
        assert result.fully_applied
        assert _status(memory_store, order.id) == "approved"
        assert _stock(memory_store, shirt.id) == 7
        assert _stock(memory_store, scarf.id) == 3
        assert [a.new_quantity for a in result.adjustments] == [7, 3]

    def test_decrement_clamps_at_zero(
        self, service, memory_store, make_product, make_order
    ):
        product = make_product(memory_store, quantity=2)
        order = make_order(memory_store, [(product.id, 5)])

        result = service.approve_order(order.id)

        assert result.item_errors == []
        assert _stock(memory_store, product.id) == 0

    def test_missing_product_reported_and_not_created(
        self, service, memory_store, make_product, make_order
    ):
        present = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [("deleted-product", 2), (present.id, 1)])

        result = service.approve_order(order.id)

        assert _status(memory_store, order.id) == "approved"
        assert [e.product_id for e in result.item_errors] == ["deleted-product"]
        assert result.item_errors[0].quantity == 2
        assert memory_store.get("products", "deleted-product") is None
        # Later items are still processed.
        assert _stock(memory_store, present.id) == 9

    def test_order_without_items(self, service, memory_store, make_order):
        order = make_order(memory_store, [])

        result = service.approve_order(order.id)

        assert result.order.status == OrderStatus.APPROVED
        assert result.adjustments == []
        assert result.item_errors == []

    def test_same_product_twice_is_applied_twice(
        self, service, memory_store, make_product, make_order
    ):
        product = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(product.id, 2), (product.id, 3)])

        service.approve_order(order.id)

        assert _stock(memory_store, product.id) == 5

    @pytest.mark.parametrize(
        "status", ["approved", "cancelled", "completed", "shipped"]
    )
    def test_non_pending_order_rejected_without_writes(
        self, service, memory_store, make_product, make_order, status
    ):
        product = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(product.id, 1)], status=status)

        with pytest.raises(InvalidStateTransition, match="Only pending orders"):
            service.approve_order(order.id)

        assert _status(memory_store, order.id) == status
        assert _stock(memory_store, product.id) == 10

    def test_second_approval_does_not_decrement_again(
        self, service, memory_store, make_product, make_order
    ):
        product = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(product.id, 4)])
        service.approve_order(order.id)

        with pytest.raises(InvalidStateTransition):
            service.approve_order(order.id)

        assert _stock(memory_store, product.id) == 6

    def test_stored_status_is_compared_case_insensitively(
        self, service, memory_store, make_order
    ):
        order = make_order(memory_store, [])
        memory_store.update("orders", order.id, {"status": "Pending"})

        assert service.approve_order(order.id).order.status == OrderStatus.APPROVED

    def test_missing_order(self, service):
        with pytest.raises(OrderNotFound):
            service.approve_order("ghost")

    def test_records_approver_and_timestamp(self, service, memory_store, make_order):
        order = make_order(memory_store, [])

        with freeze_time("2024-06-01 12:00:00"):
            result = service.approve_order(order.id, approved_by="admin")

        stored = memory_store.get("orders", order.id)
        assert stored["approvedBy"] == "admin"
        assert stored["approvedAt"].startswith("2024-06-01T12:00:00")
        assert result.order.approved_by == "admin"

    def test_status_write_is_field_level(self, service, memory_store, make_order):
        order = make_order(memory_store, [], total="500.00")
        memory_store.update("orders", order.id, {"notes": "Leave at gate"})

        service.approve_order(order.id)

        stored = memory_store.get("orders", order.id)
        assert stored["notes"] == "Leave at gate"
        assert stored["totalAmount"] == "500.00"
        assert stored["customerDetails"]["fullName"] == "Ada Obi"

    def test_publishes_order_approved(
        self, service, bus, memory_store, make_order
    ):
        recorder = Recorder()
        bus.subscribe(OrderApproved, recorder)
        order = make_order(memory_store, [("ghost", 1)])

        service.approve_order(order.id)

        assert len(recorder.events) == 1
        assert recorder.events[0].aggregate_id == order.id
        assert recorder.events[0].payload == {"failed_items": ["ghost"]}


class TestStatusWriteFailure:
    def test_stock_untouched_when_status_write_fails(
        self, memory_store, bus, make_product, make_order
    ):
        product = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(product.id, 3)])

        repo = MagicMock(wraps=OrderDocumentRepository(memory_store))
        repo.set_approved.side_effect = DocumentStoreError("store unavailable")
        service = OrderService(repo, InventoryLedger(memory_store), "best_effort", bus)

        with pytest.raises(StatusWriteFailed):
            service.approve_order(order.id)

        assert _stock(memory_store, product.id) == 10
        assert _status(memory_store, order.id) == "pending"

    def test_order_deleted_between_read_and_write(self, bus):
        repo = MagicMock()
        repo.set_approved.side_effect = OrderNotFound("gone")
        ledger = MagicMock()
        service = OrderService(repo, ledger, "best_effort", bus)

        with pytest.raises(StatusWriteFailed):
            service.approve_order("order-1")

        ledger.decrement_stock.assert_not_called()


class TestItemFailureIsolation:
    def test_store_error_on_one_item_does_not_stop_the_rest(
        self, memory_store, bus, make_product, make_order
    ):
        first = make_product(memory_store, quantity=5)
        second = make_product(memory_store, quantity=5)
        order = make_order(memory_store, [(first.id, 1), (second.id, 1)])

        ledger = InventoryLedger(memory_store)
        real_decrement = ledger.decrement_stock

        def flaky(product_id, amount):
            if product_id == first.id:
                raise DocumentStoreError("timeout")
            return real_decrement(product_id, amount)

        ledger.decrement_stock = flaky
        service = OrderService(
            OrderDocumentRepository(memory_store), ledger, "best_effort", bus
        )

        result = service.approve_order(order.id)

        assert [e.product_id for e in result.item_errors] == [first.id]
        assert "timeout" in result.item_errors[0].error
        assert _stock(memory_store, first.id) == 5
        assert _stock(memory_store, second.id) == 4

    def test_non_integer_stock_is_reported_per_item(
        self, service, memory_store, make_product, make_order
    ):
        broken = make_product(memory_store, quantity=5)
        memory_store.update("products", broken.id, {"quantity": "abc"})
        healthy = make_product(memory_store, quantity=5)
        order = make_order(memory_store, [(broken.id, 1), (healthy.id, 2)])

        result = service.approve_order(order.id)

        assert [e.product_id for e in result.item_errors] == [broken.id]
        assert "not an integer" in result.item_errors[0].error
        assert memory_store.get("products", broken.id)["quantity"] == "abc"
        assert _stock(memory_store, healthy.id) == 3
        assert _status(memory_store, order.id) == "approved"


# ---------------------------------------------------------------------------
# Approval: strict
# ---------------------------------------------------------------------------


class TestStrictApproval:
    def test_rolls_back_applied_decrements(
        self, strict_service, bus, memory_store, make_product, make_order
    ):
        recorder = Recorder()
        bus.subscribe(OrderApprovalRolledBack, recorder)
        shirt = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(shirt.id, 3), ("ghost", 1)])

        with pytest.raises(ApprovalRolledBack) as exc_info:
            strict_service.approve_order(order.id, approved_by="admin")

        assert [e.product_id for e in exc_info.value.item_errors] == ["ghost"]
        assert _stock(memory_store, shirt.id) == 10
        stored = memory_store.get("orders", order.id)
        assert stored["status"] == "pending"
        assert stored["approvedBy"] is None
        assert len(recorder.events) == 1

    def test_restores_only_what_was_removed(
        self, strict_service, memory_store, make_product, make_order
    ):
        product = make_product(memory_store, quantity=2)
        order = make_order(memory_store, [(product.id, 5), ("ghost", 1)])

        with pytest.raises(ApprovalRolledBack):
            strict_service.approve_order(order.id)

        assert _stock(memory_store, product.id) == 2

    def test_failed_status_reset_is_not_reported_as_rollback(
        self, bus, memory_store, make_product, make_order
    ):
        recorder = Recorder()
        bus.subscribe(OrderApprovalRolledBack, recorder)
        shirt = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(shirt.id, 3), ("ghost", 1)])

        repo = MagicMock(wraps=OrderDocumentRepository(memory_store))
        repo.reset_to_pending.side_effect = DocumentStoreError("store unavailable")
        service = OrderService(repo, InventoryLedger(memory_store), "strict", bus)

        with pytest.raises(CompensationFailed) as exc_info:
            service.approve_order(order.id)

        assert exc_info.value.failed_steps == ["reset_status"]
        assert [e.product_id for e in exc_info.value.item_errors] == ["ghost"]
        # Stock is still restored; only the status write failed.
        assert _stock(memory_store, shirt.id) == 10
        assert _status(memory_store, order.id) == "approved"
        assert recorder.events == []

    def test_failed_restock_does_not_stop_remaining_steps(
        self, bus, memory_store, make_product, make_order, caplog
    ):
        recorder = Recorder()
        bus.subscribe(OrderApprovalRolledBack, recorder)
        first = make_product(memory_store, quantity=10)
        second = make_product(memory_store, quantity=10)
        order = make_order(
            memory_store, [(first.id, 2), (second.id, 3), ("ghost", 1)]
        )

        ledger = InventoryLedger(memory_store)
        real_restock = ledger.restock

        def flaky(product_id, amount):
            if product_id == second.id:
                raise DocumentStoreError("timeout")
            return real_restock(product_id, amount)

        ledger.restock = flaky
        service = OrderService(
            OrderDocumentRepository(memory_store), ledger, "strict", bus
        )

        with caplog.at_level(logging.ERROR, logger="modules.orders.services"):
            with pytest.raises(CompensationFailed) as exc_info:
                service.approve_order(order.id)

        assert exc_info.value.failed_steps == [f"restock:{second.id}"]
        assert _stock(memory_store, first.id) == 10
        assert _stock(memory_store, second.id) == 7
        assert _status(memory_store, order.id) == "pending"
        assert recorder.events == []
        assert any(
            "order.approval_compensation_incomplete" in record.getMessage()
            for record in caplog.records
        )

    def test_failed_restock_and_reset_are_both_reported(
        self, bus, memory_store, make_product, make_order
    ):
        product = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(product.id, 4), ("ghost", 1)])

        ledger = MagicMock(wraps=InventoryLedger(memory_store))
        ledger.restock.side_effect = ProductNotFound("deleted meanwhile")
        repo = MagicMock(wraps=OrderDocumentRepository(memory_store))
        repo.reset_to_pending.side_effect = OrderNotFound("deleted meanwhile")
        service = OrderService(repo, ledger, "strict", bus)

        with pytest.raises(CompensationFailed) as exc_info:
            service.approve_order(order.id)

        assert exc_info.value.failed_steps == [f"restock:{product.id}", "reset_status"]
        assert order.id in str(exc_info.value)
        repo.reset_to_pending.assert_called_once_with(order.id)
        assert _stock(memory_store, product.id) == 6

    def test_success_behaves_like_best_effort(
        self, strict_service, memory_store, make_product, make_order
    ):
        product = make_product(memory_store, quantity=2)
        order = make_order(memory_store, [(product.id, 1)])

        result = strict_service.approve_order(order.id)

        assert result.fully_applied
        assert _stock(memory_store, product.id) == 1

    def test_mode_defaults_to_setting(self, memory_store, settings):
        settings.ORDER_APPROVAL_MODE = "strict"
        service = OrderService(
            OrderDocumentRepository(memory_store), InventoryLedger(memory_store)
        )
        assert service.mode == ApprovalMode.STRICT


# ---------------------------------------------------------------------------
# Cancellation / queries
# ---------------------------------------------------------------------------


class TestCancelOrder:
    def test_cancels_pending_order_without_touching_stock(
        self, service, bus, memory_store, make_product, make_order
    ):
        recorder = Recorder()
        bus.subscribe(OrderCancelled, recorder)
        product = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(product.id, 3)])

        cancelled = service.cancel_order(order.id)

        assert cancelled.status == OrderStatus.CANCELLED
        assert memory_store.get("orders", order.id)["cancelledAt"] is not None
        assert _stock(memory_store, product.id) == 10
        assert len(recorder.events) == 1

    def test_cannot_cancel_approved_order(self, service, memory_store, make_order):
        order = make_order(memory_store, [], status="approved")
        with pytest.raises(InvalidStateTransition):
            service.cancel_order(order.id)

    def test_missing_order(self, service):
        with pytest.raises(OrderNotFound):
            service.cancel_order("ghost")


class TestQueries:
    def test_get_order(self, service, memory_store, make_order):
        order = make_order(memory_store, [], total="120.00")
        assert service.get_order(order.id).total_amount == order.total_amount

    def test_list_filters_by_status(self, service, memory_store, make_order):
        make_order(memory_store, [])
        make_order(memory_store, [], status="approved")
        assert [o.status for o in service.list_orders("approved")] == ["approved"]
        assert len(service.list_orders()) == 2


class TestUnreadableOrders:
    def test_completed_order_cannot_be_approved(
        self, service, memory_store, make_product, make_order
    ):
        product = make_product(memory_store, quantity=10)
        order = make_order(memory_store, [(product.id, 1)])
        memory_store.update("orders", order.id, {"status": "completed"})

        with pytest.raises(InvalidStateTransition):
            service.approve_order(order.id)

        assert _status(memory_store, order.id) == "completed"
        assert _stock(memory_store, product.id) == 10

    def test_malformed_document_raises_domain_error(self, service, memory_store):
        memory_store.set("orders", "broken", {"status": "pending", "items": "none"})

        with pytest.raises(MalformedOrder, match="broken"):
            service.approve_order("broken")
        with pytest.raises(MalformedOrder):
            service.cancel_order("broken")
        with pytest.raises(MalformedOrder):
            service.get_order("broken")

        assert _status(memory_store, "broken") == "pending"

    def test_listing_skips_malformed_documents(self, service, memory_store, make_order):
        readable = make_order(memory_store, [])
        memory_store.set("orders", "broken", {"totalAmount": "lots"})

        assert [o.id for o in service.list_orders()] == [readable.id]
        assert [o.id for o in service.list_orders("pending")] == [readable.id]

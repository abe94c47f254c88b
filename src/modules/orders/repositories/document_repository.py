"""Document-store implementation of the Order repository.

Status writes are field-level merges (``IDocumentStore.update``): only
``status`` and its timestamp fields are touched, never the items or the
customer details written by the storefront.

Order documents are written by the storefront, so a document may not
parse as an ``Order``.  Single look-ups raise ``MalformedOrder``; listings
skip such documents and log them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError

from modules.orders.constants import ORDERS_COLLECTION, OrderStatus
from modules.orders.entities import Order
from modules.orders.exceptions import MalformedOrder, OrderNotFound
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.documents import DocumentNotFound, IDocumentStore

logger = structlog.get_logger(__name__)


class OrderDocumentRepository(IOrderRepository):
    """Concrete Order repository backed by an ``IDocumentStore``."""

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store

    def get_by_id(self, id: str) -> Optional[Order]:
        data = self._store.get(ORDERS_COLLECTION, id)
        if data is None:
            return None
        try:
            return Order.from_document(id, data)
        except ValidationError as exc:
            logger.warning(
                "order.malformed_document", order_id=id, errors=exc.error_count()
            )
            raise MalformedOrder(f"Order {id} could not be read.") from exc

    def list(self, status: Optional[str] = None) -> List[Order]:
        orders = []
        for key, data in self._store.list(ORDERS_COLLECTION):
            try:
                orders.append(Order.from_document(key, data))
            except ValidationError as exc:
                logger.warning(
                    "order.malformed_document_skipped",
                    order_id=key,
                    errors=exc.error_count(),
                )
        if status:
            orders = [order for order in orders if order.status == status.lower()]
        return orders

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order.model_validate({**data, "id": ""})
        key = self._store.create(ORDERS_COLLECTION, order.to_document())
        logger.info("order.saved", order_id=key, status=order.status)
        return order.model_copy(update={"id": key})

    def set_approved(
        self,
        id: str,
        approved_at: datetime,
        approved_by: Optional[str] = None,
    ) -> None:
        self._write_status(
            id,
            {
                "status": OrderStatus.APPROVED.value,
                "approvedAt": approved_at,
                "approvedBy": approved_by,
            },
        )

    def set_cancelled(self, id: str, cancelled_at: datetime) -> None:
        self._write_status(
            id,
            {"status": OrderStatus.CANCELLED.value, "cancelledAt": cancelled_at},
        )

    def reset_to_pending(self, id: str) -> None:
        self._write_status(
            id,
            {
                "status": OrderStatus.PENDING.value,
                "approvedAt": None,
                "approvedBy": None,
            },
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write_status(self, id: str, fields: Dict[str, Any]) -> None:
        try:
            self._store.update(ORDERS_COLLECTION, id, fields)
        except DocumentNotFound as exc:
            raise OrderNotFound(f"Order {id} not found.") from exc
        logger.info("order.status_written", order_id=id, status=fields["status"])

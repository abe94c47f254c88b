"""Inventory Ledger.

Owns product stock quantities.  Every adjustment goes through the
document store's atomic bounded ``increment`` so the read, the floor
computation and the write happen under one lock: two approvals that
share a product can no longer overwrite each other's decrement.

Business rules implemented:
- Stock quantity is never negative; decrements clamp at zero.
- A missing product is never created or written to.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from modules.products.entities import PRODUCTS_COLLECTION
from modules.products.exceptions import InvalidStockAmount, ProductNotFound
from shared.domain.documents import DocumentNotFound, IDocumentStore

logger = structlog.get_logger(__name__)

QUANTITY_FIELD = "quantity"


@dataclass(frozen=True)
class StockAdjustment:
    """Outcome of a single ledger write."""

    product_id: str
    previous_quantity: int
    new_quantity: int

    @property
    def delta(self) -> int:
        return self.new_quantity - self.previous_quantity


class InventoryLedger:
    """Applies bounded stock movements to product documents."""

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store

    def decrement_stock(self, product_id: str, amount: int) -> StockAdjustment:
        """Remove ``amount`` units, flooring the result at zero.

        The returned adjustment records what was actually removed, which
        can be less than ``amount`` when stock ran out.

        Raises:
            InvalidStockAmount: ``amount`` is negative.
            ProductNotFound: no product document exists; nothing is written.
            DocumentStoreError: the store failed.
        """
        self._check_amount(amount)
        adjustment = self._apply(product_id, -amount)
        log = logger.bind(
            product_id=product_id,
            requested=amount,
            previous=adjustment.previous_quantity,
            remaining=adjustment.new_quantity,
        )
        if adjustment.previous_quantity - adjustment.new_quantity < amount:
            log.warning("inventory.stock_clamped")
        else:
            log.info("inventory.stock_decremented")
        return adjustment

    def restock(self, product_id: str, amount: int) -> StockAdjustment:
        """Add ``amount`` units back to a product.

        Raises:
            InvalidStockAmount: ``amount`` is negative.
            ProductNotFound: no product document exists.
            DocumentStoreError: the store failed.
        """
        self._check_amount(amount)
        adjustment = self._apply(product_id, amount)
        logger.info(
            "inventory.stock_restored",
            product_id=product_id,
            quantity=amount,
            remaining=adjustment.new_quantity,
        )
        return adjustment

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_amount(amount: int) -> None:
        if amount < 0:
            raise InvalidStockAmount(
                f"Stock adjustment amount must not be negative (got {amount})."
            )

    def _apply(self, product_id: str, delta: int) -> StockAdjustment:
        try:
            before, after = self._store.increment(
                PRODUCTS_COLLECTION, product_id, QUANTITY_FIELD, delta, minimum=0
            )
        except DocumentNotFound as exc:
            logger.warning("inventory.product_missing", product_id=product_id)
            raise ProductNotFound(f"Product {product_id} not found.") from exc
        return StockAdjustment(
            product_id=product_id, previous_quantity=before, new_quantity=after
        )

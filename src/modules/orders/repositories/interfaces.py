"""Order repository interface (the order record store).

Extends ``IRepository[Order]`` with the status writes required by the
approval workflow.  The repository is the sole writer of order
documents; it does **not** validate transitions; the Service Layer
checks the state machine before calling a status write.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.entities import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order, or ``None`` if it does not exist.

        Raises:
            MalformedOrder: the stored document is not a readable order.
        """

    @abstractmethod
    def list(self, status: Optional[str] = None) -> List[Order]:
        """List readable orders, optionally only those in ``status``."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert an order document and return the stored entity."""

    @abstractmethod
    def set_approved(
        self,
        id: str,
        approved_at: datetime,
        approved_by: Optional[str] = None,
    ) -> None:
        """Write ``status=approved`` together with the approval stamp.

        Raises:
            OrderNotFound: the order document does not exist.
            DocumentStoreError: the store rejected the write.
        """

    @abstractmethod
    def set_cancelled(self, id: str, cancelled_at: datetime) -> None:
        """Write ``status=cancelled`` together with the cancellation stamp.

        Raises:
            OrderNotFound: the order document does not exist.
            DocumentStoreError: the store rejected the write.
        """

    @abstractmethod
    def reset_to_pending(self, id: str) -> None:
        """Undo an approval: ``status=pending`` and clear the approval stamp.

        Used only to compensate a failed strict-mode approval.
        """

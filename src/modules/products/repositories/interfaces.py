"""Product repository interface.

Extends ``IRepository[Product]`` with the writes needed by product
management.  Approval-driven stock changes do **not** go through this
contract: the ``InventoryLedger`` adjusts ``quantity`` in place.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.entities import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Product:
        """Insert a product document and return the stored entity."""

    @abstractmethod
    def update(self, id: str, changes: Dict[str, Any]) -> Product:
        """Merge ``changes`` (snake_case field names) into a product.

        Only the changed fields are written, so a concurrent stock
        adjustment is not overwritten by an unrelated edit.

        Raises:
            ProductNotFound: the product does not exist.
        """

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Hard-delete a product.  Returns ``False`` if it did not exist."""

"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- Price must be greater than zero (validated by DTO).
- Quantity cannot be negative (validated by DTO).
- ``created_at`` / ``updated_at`` are stamped by the service, never by
  the client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.utils import timezone

from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.entities import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> Product:
        now = timezone.now()
        product = self._repo.create(
            {
                **dto.model_dump(),
                "created_at": now,
                "updated_at": now,
            }
        )
        logger.info(
            "product.created",
            product_id=product.id,
            product_name=product.product_name,
            quantity=product.quantity,
        )
        return product

    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields to an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if self._repo.get_by_id(id) is None:
            raise ProductNotFound(f"Product {id} not found.")

        changes = dto.changes()
        changes["updated_at"] = timezone.now()
        product = self._repo.update(id, changes)
        logger.info("product.updated", product_id=id, fields=sorted(dto.changes()))
        return product

    def delete_product(self, id: str) -> None:
        """Hard-delete a product.

        Orders keep their line items untouched; approving an order that
        references a deleted product reports a stock adjustment error for
        that item.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        """Return every product, newest first."""
        products = self._repo.list()
        return sorted(
            products,
            key=lambda p: p.created_at.timestamp() if p.created_at else 0.0,
            reverse=True,
        )

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

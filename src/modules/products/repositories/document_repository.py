"""Document-store implementation of the Product repository.

Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising; the Service Layer decides how to translate a
missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError

from modules.products.entities import PRODUCTS_COLLECTION, Product
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.interfaces import IProductRepository
from shared.domain.documents import DocumentNotFound, IDocumentStore

logger = structlog.get_logger(__name__)


class ProductDocumentRepository(IProductRepository):
    """Concrete Product repository backed by an ``IDocumentStore``."""

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store

    def get_by_id(self, id: str) -> Optional[Product]:
        data = self._store.get(PRODUCTS_COLLECTION, id)
        if data is None:
            return None
        return Product.from_document(id, data)

    def list(self) -> List[Product]:
        products = []
        for key, data in self._store.list(PRODUCTS_COLLECTION):
            try:
                products.append(Product.from_document(key, data))
            except ValidationError as exc:
                logger.warning(
                    "product.malformed_document_skipped",
                    product_id=key,
                    errors=exc.error_count(),
                )
        return products

    def create(self, data: Dict[str, Any]) -> Product:
        product = Product.model_validate({**data, "id": ""})
        key = self._store.create(PRODUCTS_COLLECTION, product.to_document())
        logger.info("product.saved", product_id=key)
        return product.model_copy(update={"id": key})

    def update(self, id: str, changes: Dict[str, Any]) -> Product:
        current = self.get_by_id(id)
        if current is None:
            raise ProductNotFound(f"Product {id} not found.")

        merged = Product.model_validate({**current.model_dump(), **changes})
        document = merged.to_document()
        aliases = {Product.model_fields[name].alias or name for name in changes}
        payload = {key: value for key, value in document.items() if key in aliases}

        try:
            self._store.update(PRODUCTS_COLLECTION, id, payload)
        except DocumentNotFound as exc:
            raise ProductNotFound(f"Product {id} not found.") from exc

        logger.info("product.saved", product_id=id, fields=sorted(payload))
        return merged

    def delete(self, id: str) -> bool:
        deleted = self._store.delete(PRODUCTS_COLLECTION, id)
        if deleted:
            logger.info("product.deleted", product_id=id)
        return deleted

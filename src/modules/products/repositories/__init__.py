"""Product repositories package."""

from modules.products.repositories.document_repository import (
    ProductDocumentRepository,
)
from modules.products.repositories.interfaces import IProductRepository

__all__ = ["IProductRepository", "ProductDocumentRepository"]

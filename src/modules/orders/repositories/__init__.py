"""Order repositories package."""

from modules.orders.repositories.document_repository import OrderDocumentRepository
from modules.orders.repositories.interfaces import IOrderRepository

__all__ = ["IOrderRepository", "OrderDocumentRepository"]

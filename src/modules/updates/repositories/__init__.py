"""System update repositories package."""

from modules.updates.repositories.document_repository import (
    SystemUpdateDocumentRepository,
)
from modules.updates.repositories.interfaces import ISystemUpdateRepository

__all__ = ["ISystemUpdateRepository", "SystemUpdateDocumentRepository"]

"""Document store contract.

The store modules keep their aggregates as schemaless documents grouped
in named collections (``orders``, ``products``, ``updates``).  Services
and repositories depend on ``IDocumentStore`` only; the concrete backend
is chosen by the ``DOCUMENT_STORE_BACKEND`` setting.

Documents are plain ``dict`` payloads.  Implementations normalise values
through JSON on the way in, so ``Decimal`` and ``datetime`` values come
back as strings: entity models parse them again on read.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

Document = Dict[str, Any]


class DocumentStoreError(Exception):
    """The backing store failed to complete a read or write."""


class DocumentNotFound(DocumentStoreError):
    """A write targeted a document that does not exist."""

    def __init__(self, collection: str, key: str) -> None:
        super().__init__(f"Document {collection}/{key} not found.")
        self.collection = collection
        self.key = key


class IDocumentStore(ABC):
    """Key/document access to named collections."""

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[Document]:
        """Return the document payload, or ``None`` when it does not exist."""

    @abstractmethod
    def create(self, collection: str, fields: Document) -> str:
        """Insert a new document and return its store-assigned key."""

    @abstractmethod
    def set(self, collection: str, key: str, fields: Document) -> None:
        """Create or fully replace the document stored under ``key``."""

    @abstractmethod
    def update(self, collection: str, key: str, fields: Document) -> None:
        """Merge ``fields`` into an existing document.

        Raises:
            DocumentNotFound: no document is stored under ``key``.
        """

    @abstractmethod
    def delete(self, collection: str, key: str) -> bool:
        """Remove a document.  Returns ``False`` when it did not exist."""

    @abstractmethod
    def list(self, collection: str) -> List[Tuple[str, Document]]:
        """Return ``(key, document)`` pairs in insertion order."""

    @abstractmethod
    def increment(
        self,
        collection: str,
        key: str,
        field: str,
        amount: int,
        minimum: Optional[int] = None,
    ) -> Tuple[int, int]:
        """Atomically add ``amount`` to an integer field.

        The result is floored at ``minimum`` when one is given.  A missing
        or null field counts as ``0``.  Returns ``(before, after)``.

        Raises:
            DocumentNotFound: no document is stored under ``key``.
        """

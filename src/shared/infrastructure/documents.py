"""In-memory document store.

Process-local implementation of ``IDocumentStore`` used by unit tests,
management scripts and local experiments.  Payloads are JSON-normalised
exactly like the database backend so both behave the same to callers.
"""

from __future__ import annotations

import json
import threading
from typing import Dict, List, Optional, Tuple

import uuid6
from django.core.serializers.json import DjangoJSONEncoder

from shared.domain.documents import (
    Document,
    DocumentNotFound,
    DocumentStoreError,
    IDocumentStore,
)


def normalise(fields: Document) -> Document:
    """Round-trip ``fields`` through JSON (Decimal/datetime become strings)."""
    return json.loads(json.dumps(fields, cls=DjangoJSONEncoder))


def read_counter(document: Document, collection: str, key: str, field: str) -> int:
    """Current integer value of ``field``; a missing or null field is 0.

    Whole numbers stored as floats or numeric strings are accepted.

    Raises:
        DocumentStoreError: the stored value is not a whole number.
    """
    value = document.get(field)
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().removeprefix("-").isdecimal():
        return int(value)
    raise DocumentStoreError(
        f"{collection}/{key}: field '{field}' is not an integer ({value!r})."
    )


class InMemoryDocumentStore(IDocumentStore):
    """Dictionary-backed document store guarded by a single lock."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._lock = threading.RLock()

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    def get(self, collection: str, key: str) -> Optional[Document]:
        with self._lock:
            document = self._collection(collection).get(key)
            return normalise(document) if document is not None else None

    def create(self, collection: str, fields: Document) -> str:
        key = str(uuid6.uuid7())
        self.set(collection, key, fields)
        return key

    def set(self, collection: str, key: str, fields: Document) -> None:
        with self._lock:
            self._collection(collection)[key] = normalise(fields)

    def update(self, collection: str, key: str, fields: Document) -> None:
        with self._lock:
            documents = self._collection(collection)
            if key not in documents:
                raise DocumentNotFound(collection, key)
            documents[key].update(normalise(fields))

    def delete(self, collection: str, key: str) -> bool:
        with self._lock:
            return self._collection(collection).pop(key, None) is not None

    def list(self, collection: str) -> List[Tuple[str, Document]]:
        with self._lock:
            return [
                (key, normalise(document))
                for key, document in self._collection(collection).items()
            ]

    def increment(
        self,
        collection: str,
        key: str,
        field: str,
        amount: int,
        minimum: Optional[int] = None,
    ) -> Tuple[int, int]:
        with self._lock:
            document = self._collection(collection).get(key)
            if document is None:
                raise DocumentNotFound(collection, key)
            before = read_counter(document, collection, key, field)
            after = before + amount
            if minimum is not None:
                after = max(minimum, after)
            document[field] = after
            return before, after

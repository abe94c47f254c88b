"""Django ORM implementation of the document store.

Every collection lives in the single ``documents`` table; a document is
one ``StoredDocument`` row.  Writes that read before they write
(``update``, ``increment``) lock the row with ``SELECT ... FOR UPDATE``
so concurrent stock adjustments on the same product serialise instead of
overwriting each other.

Database errors are re-raised as ``DocumentStoreError``: callers never
see ORM exceptions.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, List, Optional, Tuple, TypeVar, cast

import structlog
import uuid6
from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils.module_loading import import_string

from modules.core.models import StoredDocument
from shared.domain.documents import (
    Document,
    DocumentNotFound,
    DocumentStoreError,
    IDocumentStore,
)
from shared.infrastructure.documents import normalise, read_counter

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _translate_errors(func: F) -> F:
    @wraps(func)
    def wrapper(self, collection: str, *args: Any, **kwargs: Any) -> Any:
        try:
            return func(self, collection, *args, **kwargs)
        except DatabaseError as exc:
            logger.error(
                "document_store.database_error",
                collection=collection,
                operation=func.__name__,
                error=str(exc),
            )
            raise DocumentStoreError(str(exc)) from exc

    return cast(F, wrapper)


class DjangoDocumentStore(IDocumentStore):
    """Concrete document store backed by Django ORM."""

    @_translate_errors
    def get(self, collection: str, key: str) -> Optional[Document]:
        document = (
            StoredDocument.objects.filter(collection=collection, key=key)
            .only("data")
            .first()
        )
        return document.data if document else None

    @_translate_errors
    def create(self, collection: str, fields: Document) -> str:
        key = str(uuid6.uuid7())
        StoredDocument.objects.create(
            collection=collection, key=key, data=normalise(fields)
        )
        return key

    @_translate_errors
    def set(self, collection: str, key: str, fields: Document) -> None:
        StoredDocument.objects.update_or_create(
            collection=collection,
            key=key,
            defaults={"data": normalise(fields)},
        )

    @_translate_errors
    @transaction.atomic
    def update(self, collection: str, key: str, fields: Document) -> None:
        document = self._get_for_update(collection, key)
        document.data.update(normalise(fields))
        document.save(update_fields=["data"])

    @_translate_errors
    def delete(self, collection: str, key: str) -> bool:
        deleted, _ = StoredDocument.objects.filter(
            collection=collection, key=key
        ).delete()
        return deleted > 0

    @_translate_errors
    def list(self, collection: str) -> List[Tuple[str, Document]]:
        rows = StoredDocument.objects.filter(collection=collection).values_list(
            "key", "data"
        )
        return [(key, data) for key, data in rows]

    @_translate_errors
    @transaction.atomic
    def increment(
        self,
        collection: str,
        key: str,
        field: str,
        amount: int,
        minimum: Optional[int] = None,
    ) -> Tuple[int, int]:
        document = self._get_for_update(collection, key)
        before = read_counter(document.data, collection, key, field)
        after = before + amount
        if minimum is not None:
            after = max(minimum, after)
        document.data[field] = after
        document.save(update_fields=["data"])
        return before, after

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _get_for_update(collection: str, key: str) -> StoredDocument:
        document = (
            StoredDocument.objects.select_for_update()
            .filter(collection=collection, key=key)
            .first()
        )
        if document is None:
            raise DocumentNotFound(collection, key)
        return document


def get_document_store() -> IDocumentStore:
    """Instantiate the backend named by ``settings.DOCUMENT_STORE_BACKEND``."""
    backend = import_string(settings.DOCUMENT_STORE_BACKEND)
    return backend()

"""Base abstract model and document storage for the store backend.

Provides:
- ``BaseModel``: UUIDv7 primary key + created_at / updated_at timestamps.
- ``StoredDocument``: one row per document of a named collection, with
  the document payload held in a JSON column.  Backs
  ``DjangoDocumentStore``.
"""

from __future__ import annotations

import uuid6
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Document storage
# ---------------------------------------------------------------------------


class StoredDocument(BaseModel):
    """A schemaless document addressed by ``(collection, key)``.

    ``key`` is the identifier exposed to clients (order IDs typed into the
    verification screen, product IDs referenced by order line items).  It is
    kept separate from the UUID primary key so that documents imported from
    other stores keep their original identifiers.
    """

    collection = models.CharField(max_length=100)
    key = models.CharField(max_length=255)
    data = models.JSONField(default=dict, encoder=DjangoJSONEncoder)

    class Meta:
        db_table = "documents"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["collection", "key"],
                name="documents_collection_key_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.collection}/{self.key}"

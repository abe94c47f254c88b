"""Base class for entities persisted as documents."""

from __future__ import annotations

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

E = TypeVar("E", bound="DocumentEntity")


class DocumentEntity(BaseModel):
    """Pydantic entity stored as a camelCase document.

    The document key lives outside the payload, so ``id`` is merged in on
    read and stripped on write.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str

    @classmethod
    def from_document(cls: Type[E], key: str, data: Dict[str, Any]) -> E:
        return cls.model_validate({**data, "id": key})

    def to_document(self) -> Dict[str, Any]:
        """Payload to hand to the document store (camelCase, JSON-safe)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})

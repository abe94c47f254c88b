"""Document-store implementation of the system update repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from modules.updates.entities import UPDATES_COLLECTION, SystemUpdate
from modules.updates.repositories.interfaces import ISystemUpdateRepository
from shared.domain.documents import IDocumentStore


class SystemUpdateDocumentRepository(ISystemUpdateRepository):
    def __init__(self, store: IDocumentStore) -> None:
        self._store = store

    def get_by_id(self, id: str) -> Optional[SystemUpdate]:
        data = self._store.get(UPDATES_COLLECTION, id)
        return SystemUpdate.from_document(id, data) if data is not None else None

    def list(self) -> List[SystemUpdate]:
        return [
            SystemUpdate.from_document(key, data)
            for key, data in self._store.list(UPDATES_COLLECTION)
        ]

    def create(self, data: Dict[str, Any]) -> SystemUpdate:
        update = SystemUpdate.model_validate({**data, "id": ""})
        key = self._store.create(UPDATES_COLLECTION, update.to_document())
        return update.model_copy(update={"id": key})

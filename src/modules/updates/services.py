"""System update service layer.

Announcements are written by admins and shown to every dashboard user.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.utils import timezone

from modules.updates.exceptions import SystemUpdateNotFound

if TYPE_CHECKING:
    from modules.updates.dtos import CreateSystemUpdateDTO
    from modules.updates.entities import SystemUpdate
    from modules.updates.repositories.interfaces import ISystemUpdateRepository

logger = structlog.get_logger(__name__)


class SystemUpdateService:
    def __init__(self, repository: ISystemUpdateRepository) -> None:
        self._repo = repository

    def publish_update(self, dto: CreateSystemUpdateDTO) -> SystemUpdate:
        now = timezone.now()
        update = self._repo.create(
            {"title": dto.title, "body": dto.body, "created_at": now, "updated_at": now}
        )
        logger.info("system_update.published", update_id=update.id, title=update.title)
        return update

    def list_updates(self) -> List[SystemUpdate]:
        """Newest announcement first."""
        return sorted(
            self._repo.list(),
            key=lambda u: u.created_at.timestamp() if u.created_at else 0.0,
            reverse=True,
        )

    def get_update(self, id: str) -> SystemUpdate:
        update = self._repo.get_by_id(id)
        if update is None:
            raise SystemUpdateNotFound(f"System update {id} not found.")
        return update

"""System update repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.updates.entities import SystemUpdate


class ISystemUpdateRepository(IRepository["SystemUpdate"]):
    """Repository contract for system announcements."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> SystemUpdate:
        """Insert an announcement and return the stored entity."""

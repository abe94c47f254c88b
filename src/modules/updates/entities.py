"""System update (announcement) entity, stored in the ``updates`` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from shared.domain.entities import DocumentEntity

UPDATES_COLLECTION = "updates"


class SystemUpdate(DocumentEntity):
    title: str
    body: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

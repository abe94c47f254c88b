"""Pagination for list endpoints backed by the document store.

Documents come back from services as lists of pydantic entities rather
than querysets, so the viewsets page them through the configured
``DEFAULT_PAGINATION_CLASS`` directly.
"""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.settings import api_settings


def paginated_response(
    request: Request, view, items: Sequence[BaseModel]
) -> Response:
    """Return one page of ``items`` with ``count``/``next``/``previous``."""
    paginator = api_settings.DEFAULT_PAGINATION_CLASS()
    page = paginator.paginate_queryset(items, request, view=view)
    return paginator.get_paginated_response(
        [item.model_dump(mode="json") for item in page]
    )

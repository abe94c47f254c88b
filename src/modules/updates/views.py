"""System update API views."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.pagination import paginated_response
from modules.core.repositories.document_store import get_document_store
from modules.updates.dtos import CreateSystemUpdateDTO
from modules.updates.exceptions import SystemUpdateNotFound
from modules.updates.repositories.document_repository import (
    SystemUpdateDocumentRepository,
)
from modules.updates.services import SystemUpdateService


class SystemUpdateViewSet(ViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = SystemUpdateService(
            repository=SystemUpdateDocumentRepository(get_document_store())
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/updates/"""
        return paginated_response(request, self, self._service.list_updates())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/updates/{pk}/"""
        try:
            update = self._service.get_update(pk or "")
        except SystemUpdateNotFound:
            return Response(
                {"detail": "System update not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(update.model_dump(mode="json"))

    def create(self, request: Request) -> Response:
        """POST /api/v1/updates/"""
        try:
            dto = CreateSystemUpdateDTO(
                title=request.data.get("title", ""),
                body=request.data.get("body", ""),
            )
        except PydanticValidationError as exc:
            errors = {
                str(error["loc"][0]): error["msg"].removeprefix("Value error, ")
                for error in exc.errors()
            }
            return Response(
                {"detail": "Invalid system update.", "errors": errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        update = self._service.publish_update(dto)
        return Response(update.model_dump(mode="json"), status=status.HTTP_201_CREATED)

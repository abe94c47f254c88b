"""Dashboard API views."""

from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.repositories.document_store import get_document_store
from modules.dashboard.services import DashboardService
from modules.orders.repositories.document_repository import OrderDocumentRepository
from modules.products.repositories.document_repository import (
    ProductDocumentRepository,
)


class DashboardStatsView(APIView):
    """GET /api/v1/dashboard/stats/"""

    def get(self, request: Request) -> Response:
        store = get_document_store()
        service = DashboardService(
            order_repository=OrderDocumentRepository(store),
            product_repository=ProductDocumentRepository(store),
        )
        return Response(service.get_stats().model_dump(mode="json"))

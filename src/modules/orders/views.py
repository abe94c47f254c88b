"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes: the view never swallows generic exceptions.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.pagination import paginated_response
from modules.core.repositories.document_store import get_document_store
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    ApprovalRolledBack,
    CompensationFailed,
    InvalidStateTransition,
    MalformedOrder,
    OrderNotFound,
    StatusWriteFailed,
)
from modules.orders.repositories.document_repository import OrderDocumentRepository
from modules.orders.services import OrderService
from modules.products.ledger import InventoryLedger

_NOT_FOUND = {"detail": "Order not found. Please check the Order ID."}


def _caller_identity(request: Request) -> str | None:
    user = request.user
    if not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "username", None) or str(user)


class OrderViewSet(ViewSet):
    """ViewSet for order verification.

    Uses ``OrderService`` with the order repository and the inventory
    ledger sharing one document store (DIP).
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        store = get_document_store()
        self._service = OrderService(
            order_repository=OrderDocumentRepository(store),
            inventory_ledger=InventoryLedger(store),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?status=pending"""
        status_filter = request.query_params.get("status")
        if status_filter and status_filter.lower() not in OrderStatus.values:
            return Response(
                {"detail": f"Unknown status '{status_filter}'."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        orders = self._service.list_orders(status_filter)
        return paginated_response(request, self, orders)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order_id = (pk or "").strip()
        if not order_id:
            return Response(
                {"detail": "Please enter an Order ID."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            order = self._service.get_order(order_id)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except MalformedOrder as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(order.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Approve / Cancel
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def approve(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/approve/

        Returns the approved order plus any per-item stock errors.  A 200
        with a non-empty ``item_errors`` list means the approval stands but
        some stock could not be adjusted.
        """
        try:
            result = self._service.approve_order(
                (pk or "").strip(), approved_by=_caller_identity(request)
            )
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except MalformedOrder as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except InvalidStateTransition as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except StatusWriteFailed as exc:
            return Response(
                {"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        except ApprovalRolledBack as exc:
            return Response(
                {
                    "detail": str(exc),
                    "item_errors": [e.model_dump(mode="json") for e in exc.item_errors],
                },
                status=status.HTTP_409_CONFLICT,
            )
        except CompensationFailed as exc:
            return Response(
                {
                    "detail": str(exc),
                    "item_errors": [e.model_dump(mode="json") for e in exc.item_errors],
                    "failed_steps": exc.failed_steps,
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(result.model_dump(mode="json"))

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        try:
            order = self._service.cancel_order((pk or "").strip())
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except MalformedOrder as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except InvalidStateTransition as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except StatusWriteFailed as exc:
            return Response(
                {"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

        return Response(order.model_dump(mode="json"))

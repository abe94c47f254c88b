"""Order verification routes: list, retrieve, approve and cancel."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

# SimpleRouter: all modules mount under api/v1/, so none of them owns the API root.
router = SimpleRouter()
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls

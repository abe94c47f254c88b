"""System update announcement routes."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.updates.views import SystemUpdateViewSet

router = SimpleRouter()
router.register("updates", SystemUpdateViewSet, basename="system-update")

urlpatterns = router.urls

"""Dashboard URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.dashboard.views import DashboardStatsView

urlpatterns = [
    path("dashboard/stats/", DashboardStatsView.as_view(), name="dashboard_stats"),
]

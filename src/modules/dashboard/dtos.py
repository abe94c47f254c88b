"""Dashboard DTOs."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class DashboardStatsDTO(BaseModel):
    """Headline numbers for the dashboard landing page.

    Revenue figures are sums of the stored ``total_amount`` values.
    """

    model_config = ConfigDict(frozen=True)

    total_products: int
    total_orders: int
    total_revenue: Decimal
    approved_orders: int
    approved_revenue: Decimal
    pending_orders: int
    pending_revenue: Decimal

"""Dashboard statistics service."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import structlog

from modules.dashboard.dtos import DashboardStatsDTO
from modules.orders.constants import OrderStatus

if TYPE_CHECKING:
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class DashboardService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository

    def get_stats(self) -> DashboardStatsDTO:
        orders = self._order_repo.list()
        total_products = len(self._product_repo.list())

        total_revenue = Decimal("0")
        approved_revenue = Decimal("0")
        pending_revenue = Decimal("0")
        approved_orders = 0
        pending_orders = 0

        for order in orders:
            total_revenue += order.total_amount
            if order.status == OrderStatus.APPROVED:
                approved_orders += 1
                approved_revenue += order.total_amount
            elif order.status == OrderStatus.PENDING:
                pending_orders += 1
                pending_revenue += order.total_amount

        stats = DashboardStatsDTO(
            total_products=total_products,
            total_orders=len(orders),
            total_revenue=total_revenue,
            approved_orders=approved_orders,
            approved_revenue=approved_revenue,
            pending_orders=pending_orders,
            pending_revenue=pending_revenue,
        )
        logger.info(
            "dashboard.stats_computed",
            total_orders=stats.total_orders,
            total_products=stats.total_products,
        )
        return stats

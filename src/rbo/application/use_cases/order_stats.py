from __future__ import annotations

from rbo.application.dto.responses import (
    OrderListResponse,
    OrderStatsResponse,
    RevenueReportResponse,
)
from rbo.application.mappers.order_mapper import to_order_response
from rbo.application.mappers.stats_mapper import (
    to_order_stats_response,
    to_revenue_report_response,
)
from rbo.application.ports.repositories import OrderRepository
from rbo.application.use_cases.get_order import resolve_period
from rbo.domain.analytics.aggregates import (
    compute_order_stats,
    compute_revenue_report,
    orders_in_month,
    recent_completed_orders,
)

MAX_RECENT_ORDERS = 100


class InvalidRecentOrdersLimitError(Exception):
    pass


class GetOrderStats:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        month: int | str | None = None,
        year: int | None = None,
    ) -> OrderStatsResponse:
        orders = self._order_repository.list_all()
        period = resolve_period(month, year)
        if period is not None:
            orders = orders_in_month(orders, *period)
        return to_order_stats_response(compute_order_stats(orders))


class GetRevenueReport:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self) -> RevenueReportResponse:
        return to_revenue_report_response(
            compute_revenue_report(self._order_repository.list_all())
        )


class GetRecentOrders:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, limit: int = 10) -> OrderListResponse:
        if limit < 1 or limit > MAX_RECENT_ORDERS:
            raise InvalidRecentOrdersLimitError(
                f"limit must be between 1 and {MAX_RECENT_ORDERS}"
            )
        orders = recent_completed_orders(self._order_repository.list_all(), limit)
        return OrderListResponse(orders=[to_order_response(order) for order in orders])

from __future__ import annotations

from rbo.application.exports.orders_csv import render_orders_csv
from rbo.application.ports.repositories import OrderRepository
from rbo.application.use_cases.get_order import resolve_period
from rbo.domain.analytics.aggregates import orders_in_month
from rbo.domain.order.entities import OrderStatus


class ExportOrdersCsv:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        *,
        status: str | None = None,
        month: int | str | None = None,
        year: int | None = None,
    ) -> str:
        orders = self._order_repository.list_all()
        period = resolve_period(month, year)
        if period is not None:
            orders = orders_in_month(orders, *period)
        if status:
            order_status = OrderStatus.parse(status)
            orders = [order for order in orders if order.status == order_status]
        return render_orders_csv(orders)

from __future__ import annotations

from datetime import datetime, timezone

from rbo.application.dto.responses import (
    ActiveOrderListResponse,
    ActiveOrderResponse,
    OrderListResponse,
    OrderResponse,
)
from rbo.application.mappers.order_mapper import to_order_response
from rbo.application.ports.repositories import OrderRepository, TableRepository
from rbo.domain.analytics.aggregates import orders_in_month, parse_month
from rbo.domain.common.ids import OrderId
from rbo.domain.order.entities import OrderStatus


class OrderNotFoundError(Exception):
    pass


class InvalidStatsPeriodError(Exception):
    pass


def resolve_period(month: int | str | None, year: int | None) -> tuple[int, int] | None:
    """Month/year scope for order queries, or ``None`` for all orders."""
    if month is None:
        return None
    try:
        month_number = parse_month(month)
    except ValueError as exc:
        raise InvalidStatsPeriodError(str(exc)) from exc
    return month_number, year if year is not None else datetime.now(timezone.utc).year


class GetOrder:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, order_id: OrderId) -> OrderResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        return to_order_response(order)


class ListOrders:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        *,
        status: str | None = None,
        month: int | str | None = None,
        year: int | None = None,
    ) -> OrderListResponse:
        order_status = OrderStatus.parse(status) if status else None
        orders = self._order_repository.list_all()

        period = resolve_period(month, year)
        if period is not None:
            orders = orders_in_month(orders, *period)
        if order_status is not None:
            orders = [order for order in orders if order.status == order_status]

        return OrderListResponse(orders=[to_order_response(order) for order in orders])


class ListActiveOrders:
    """Orders still in progress, each with the table currently holding it."""

    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository

    def execute(self) -> ActiveOrderListResponse:
        tables_by_order = {
            table.order_id: table
            for table in self._table_repository.list_all()
            if table.order_id is not None
        }

        active = []
        for order in self._order_repository.list_all():
            if order.status.is_terminal:
                continue
            table = tables_by_order.get(order.order_id)
            payload = to_order_response(order).model_dump()
            if table is not None:
                payload["tableId"] = str(table.table_id)
            active.append(
                ActiveOrderResponse(
                    **payload,
                    tableStatus=table.status.value if table is not None else None,
                )
            )
        return ActiveOrderListResponse(orders=active)

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from rbo.api.middleware.request_id import get_request_id
from rbo.api.providers import event_publisher, order_notifier, order_repository, table_repository
from rbo.application.dto.requests import (
    PlaceOrderRequest,
    UpdateOrderPaymentRequest,
    UpdateOrderStatusRequest,
)
from rbo.application.dto.responses import ActiveOrderListResponse, OrderListResponse, OrderResponse
from rbo.application.use_cases.context import TraceContext
from rbo.application.use_cases.delete_order import DeleteOrder
from rbo.application.use_cases.export_orders import ExportOrdersCsv
from rbo.application.use_cases.get_order import GetOrder, ListActiveOrders, ListOrders, resolve_period
from rbo.application.use_cases.place_order import PlaceOrder
from rbo.application.use_cases.update_order_payment import UpdateOrderPayment
from rbo.application.use_cases.update_order_status import UpdateOrderStatus
from rbo.domain.analytics.aggregates import MONTH_NAMES
from rbo.domain.common.ids import OrderId
from rbo.infrastructure.observability.otel import current_trace_id

router = APIRouter()


def _trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())


def _export_filename(month: str | None, year: int | None) -> str:
    period = resolve_period(month, year)
    if period is None:
        return "Orders.csv"
    month_number, period_year = period
    return f"{MONTH_NAMES[month_number - 1].capitalize()}_{period_year}_Orders.csv"


@router.get("/v1/orders", response_model=OrderListResponse)
def list_orders(
    status: str | None = Query(default=None),
    month: str | None = Query(default=None),
    year: int | None = Query(default=None),
) -> OrderListResponse:
    return ListOrders(order_repository()).execute(status=status, month=month, year=year)


@router.post("/v1/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def place_order(request_dto: PlaceOrderRequest) -> OrderResponse:
    use_case = PlaceOrder(
        order_repository=order_repository(),
        table_repository=table_repository(),
        publisher=event_publisher(),
        notifier=order_notifier(),
    )
    return use_case.execute(request_dto=request_dto, trace_ctx=_trace_context())


@router.get("/v1/orders/active", response_model=ActiveOrderListResponse)
def list_active_orders() -> ActiveOrderListResponse:
    return ListActiveOrders(order_repository(), table_repository()).execute()


@router.get("/v1/orders/export.csv")
def export_orders(
    status: str | None = Query(default=None),
    month: str | None = Query(default=None),
    year: int | None = Query(default=None),
) -> Response:
    content = ExportOrdersCsv(order_repository()).execute(status=status, month=month, year=year)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{_export_filename(month, year)}"'},
    )


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str) -> OrderResponse:
    return GetOrder(order_repository()).execute(order_id=OrderId(order_id))


@router.delete("/v1/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(order_id: str) -> Response:
    DeleteOrder(order_repository(), table_repository()).execute(OrderId(order_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/v1/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: str, request_dto: UpdateOrderStatusRequest) -> OrderResponse:
    use_case = UpdateOrderStatus(order_repository(), table_repository(), event_publisher())
    return use_case.execute(OrderId(order_id), request_dto.status, _trace_context())


@router.post("/v1/orders/{order_id}/payment", response_model=OrderResponse)
def update_order_payment(order_id: str, request_dto: UpdateOrderPaymentRequest) -> OrderResponse:
    return UpdateOrderPayment(order_repository(), table_repository()).execute(
        OrderId(order_id),
        request_dto.payment_status,
        request_dto.payment_method,
    )

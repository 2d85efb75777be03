from __future__ import annotations

from prometheus_client import Counter, Histogram

from rbo.domain.order.entities import Order, OrderStatus
from rbo.domain.table.entities import TableStatus

ORDERS_PLACED_TOTAL = Counter(
    "rbo_orders_placed_total",
    "Total number of orders placed at checkout.",
    ["order_type"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "rbo_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

ORDER_TIME_TO_COMPLETE_SECONDS = Histogram(
    "rbo_order_time_to_complete_seconds",
    "Time between order placement and completion.",
)

PAYMENTS_TOTAL = Counter(
    "rbo_payments_total",
    "Total number of payment status updates.",
    ["payment_status"],
)

TABLE_STATUS_CHANGES_TOTAL = Counter(
    "rbo_table_status_changes_total",
    "Total number of table status writes by target status.",
    ["status"],
)

TABLE_RECONCILIATIONS_TOTAL = Counter(
    "rbo_table_reconciliations_total",
    "Total number of order-driven table reconciliations.",
    ["order_status", "outcome"],
)

NOTIFICATIONS_TOTAL = Counter(
    "rbo_notifications_total",
    "Total number of outbound notifications by kind and outcome.",
    ["kind", "outcome"],
)


def record_order_placed(order: Order) -> None:
    ORDERS_PLACED_TOTAL.labels(order_type=order.order_type.value).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_time_to_complete(order: Order) -> None:
    if order.completed_at is None:
        return
    ORDER_TIME_TO_COMPLETE_SECONDS.observe(
        max((order.completed_at - order.created_at).total_seconds(), 0.0)
    )


def record_payment(payment_status: str) -> None:
    PAYMENTS_TOTAL.labels(payment_status=payment_status).inc()


def record_table_status_change(status: TableStatus) -> None:
    TABLE_STATUS_CHANGES_TOTAL.labels(status=status.value).inc()


def record_reconciliation(order_status: str, outcome: str) -> None:
    TABLE_RECONCILIATIONS_TOTAL.labels(order_status=order_status, outcome=outcome).inc()


def record_notification(kind: str, outcome: str) -> None:
    NOTIFICATIONS_TOTAL.labels(kind=kind, outcome=outcome).inc()

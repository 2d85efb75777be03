from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from rbo.application.dto.requests import OrderItemRequest, PlaceOrderRequest
from rbo.application.dto.responses import OrderResponse
from rbo.application.mappers.event_envelope import serialize_order_event
from rbo.application.mappers.order_mapper import to_order_response
from rbo.application.metrics.order_lifecycle import record_order_placed
from rbo.application.ports.notifier import OrderNotifier
from rbo.application.ports.publisher import ORDERS_CHANNEL, EventPublisher
from rbo.application.ports.repositories import OrderRepository, TableRepository
from rbo.application.use_cases.context import TraceContext
from rbo.application.use_cases.table_registry import AssignOrderToTable
from rbo.domain.common.ids import ItemId, OrderId, TableId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import (
    Customer,
    ItemVariant,
    OrderItem,
    OrderType,
    create_pending_order,
)

logger = logging.getLogger(__name__)


class TableNotFoundError(Exception):
    pass


class InvalidOrderError(Exception):
    pass


def _parse_order_type(value: str) -> OrderType:
    normalized = value.strip().lower().replace("-", "_")
    try:
        return OrderType(normalized)
    except ValueError as exc:
        raise InvalidOrderError(f"invalid order type: {value}") from exc


def _to_order_item(request_item: OrderItemRequest, currency: str) -> OrderItem:
    if request_item.quantity < 1:
        raise InvalidOrderError(f"quantity for item {request_item.item_id} must be >= 1")
    try:
        return OrderItem(
            item_id=ItemId(request_item.item_id),
            name=request_item.name,
            unit_price=Money(amount_minor=request_item.price_minor, currency=currency),
            quantity=request_item.quantity,
            category=request_item.category,
            selected_variant=request_item.selected_variant,
            variants=tuple(
                ItemVariant(
                    size=variant.size,
                    price=Money(amount_minor=variant.price_minor, currency=currency),
                )
                for variant in request_item.variants
            ),
        )
    except ValueError as exc:
        raise InvalidOrderError(str(exc)) from exc


def new_order_id(now: datetime) -> OrderId:
    return OrderId(f"ORD-{now:%Y%m%d}-{uuid4().hex[:6].upper()}")


class PlaceOrder:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        publisher: EventPublisher,
        notifier: OrderNotifier,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._publisher = publisher
        self._notifier = notifier

    def execute(self, request_dto: PlaceOrderRequest, trace_ctx: TraceContext) -> OrderResponse:
        order_type = _parse_order_type(request_dto.order_type)
        currency = request_dto.currency.upper()
        items = [_to_order_item(item, currency) for item in request_dto.items]

        table_id = TableId(request_dto.table_id) if request_dto.table_id else None
        if order_type == OrderType.DINE_IN and table_id is not None:
            if self._table_repository.get(table_id) is None:
                raise TableNotFoundError(f"table {table_id} not found")

        customer = None
        if request_dto.customer is not None:
            customer = Customer(
                name=request_dto.customer.name,
                phone=request_dto.customer.phone,
                email=request_dto.customer.email,
                address=request_dto.customer.address,
                special_instructions=request_dto.customer.special_instructions,
            )

        now = datetime.now(timezone.utc)
        order = create_pending_order(
            order_id=new_order_id(now),
            items=items,
            order_type=order_type,
            now=now,
            table_id=table_id if order_type == OrderType.DINE_IN else None,
            customer=customer,
            payment_method=request_dto.payment_method,
        )
        self._order_repository.add(order)
        record_order_placed(order)
        logger.info(
            "order_placed",
            extra={
                "order_id": str(order.order_id),
                "order_type": order.order_type.value,
                "table_id": order.table_id,
                "total_minor": order.total.amount_minor,
            },
        )

        if order.table_id is not None:
            AssignOrderToTable(self._table_repository).execute(order.table_id, order.order_id)

        message = serialize_order_event(
            event_type="order.placed",
            occurred_at=now,
            order=order,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        try:
            self._publisher.publish(channel=ORDERS_CHANNEL, message=message)
        except Exception:
            logger.exception("order_event_publish_failed", extra={"order_id": str(order.order_id)})

        self._notifier.notify(order)
        return to_order_response(order)

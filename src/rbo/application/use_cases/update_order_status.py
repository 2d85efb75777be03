from __future__ import annotations

import logging
from datetime import datetime, timezone

from rbo.application.dto.responses import OrderResponse
from rbo.application.mappers.event_envelope import serialize_status_changed_event
from rbo.application.mappers.order_mapper import to_order_response
from rbo.application.metrics.order_lifecycle import record_time_to_complete, record_transition
from rbo.application.ports.publisher import ORDERS_CHANNEL, EventPublisher
from rbo.application.ports.repositories import OrderRepository, TableRepository
from rbo.application.use_cases.context import TraceContext
from rbo.application.use_cases.get_order import OrderNotFoundError
from rbo.application.use_cases.reconcile_table import ReconcileTableForOrder
from rbo.domain.common.ids import OrderId
from rbo.domain.order.entities import OrderStatus
from rbo.domain.order.events import OrderStatusChanged

logger = logging.getLogger(__name__)


class UpdateOrderStatus:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repository = order_repository
        self._reconcile = ReconcileTableForOrder(table_repository, publisher)
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        status: OrderStatus | str,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        new_status = status if isinstance(status, OrderStatus) else OrderStatus.parse(status)

        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        if order.status == new_status:
            return to_order_response(order)

        now = datetime.now(timezone.utc)
        updated = order.transition_to(new_status, now)
        self._order_repository.update(updated)

        record_transition(from_status=order.status, to_status=new_status)
        if new_status == OrderStatus.COMPLETED:
            record_time_to_complete(updated)
        logger.info(
            "order_status_changed",
            extra={
                "order_id": str(order_id),
                "from_status": order.status.value,
                "to_status": new_status.value,
            },
        )

        self._reconcile.execute(order_id, new_status, trace_ctx)

        event = OrderStatusChanged(
            order_id=order_id,
            from_status=order.status,
            to_status=new_status,
            occurred_at=now,
        )
        message = serialize_status_changed_event(
            event=event,
            order=updated,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        try:
            self._publisher.publish(channel=ORDERS_CHANNEL, message=message)
        except Exception:
            logger.exception("order_event_publish_failed", extra={"order_id": str(order_id)})

        return to_order_response(updated)

from __future__ import annotations

import logging
from datetime import datetime, timezone

from rbo.application.mappers.event_envelope import serialize_table_reconciled_event
from rbo.application.metrics.order_lifecycle import (
    record_reconciliation,
    record_table_status_change,
)
from rbo.application.ports.publisher import TABLES_CHANNEL, EventPublisher
from rbo.application.ports.repositories import TableRepository
from rbo.application.use_cases.context import TraceContext
from rbo.domain.common.ids import OrderId
from rbo.domain.order.entities import OrderStatus
from rbo.domain.order.events import TableReconciled
from rbo.domain.table.reconciliation import map_order_status_to_table_status

logger = logging.getLogger(__name__)


class ReconcileTableForOrder:
    """Bring the table holding an order in line with that order's status.

    Returns ``False`` when no table references the order. Unknown statuses
    leave the table as it is but still count as a match.
    """

    def __init__(
        self,
        table_repository: TableRepository,
        publisher: EventPublisher | None = None,
    ) -> None:
        self._table_repository = table_repository
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        order_status: OrderStatus | str,
        trace_ctx: TraceContext | None = None,
    ) -> bool:
        status_label = (
            order_status.value if isinstance(order_status, OrderStatus) else str(order_status)
        )
        table = self._table_repository.find_by_order(order_id)
        if table is None:
            record_reconciliation(order_status=status_label, outcome="no_table")
            logger.info(
                "table_reconcile_skipped",
                extra={"order_id": str(order_id), "order_status": status_label},
            )
            return False

        transition = map_order_status_to_table_status(order_status)
        updated = transition.apply(table)
        self._table_repository.save(updated)

        if updated == table:
            record_reconciliation(order_status=status_label, outcome="unchanged")
            return True

        record_reconciliation(order_status=status_label, outcome="updated")
        record_table_status_change(updated.status)
        logger.info(
            "table_reconciled",
            extra={
                "order_id": str(order_id),
                "order_status": status_label,
                "table_id": str(table.table_id),
                "from_status": table.status.value,
                "to_status": updated.status.value,
            },
        )
        self._publish(
            TableReconciled(
                table_id=table.table_id,
                order_id=order_id,
                from_status=table.status,
                to_status=updated.status,
                occurred_at=datetime.now(timezone.utc),
            ),
            trace_ctx or TraceContext(),
        )
        return True

    def _publish(self, event: TableReconciled, trace_ctx: TraceContext) -> None:
        if self._publisher is None:
            return
        message = serialize_table_reconciled_event(
            event=event,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        try:
            self._publisher.publish(channel=TABLES_CHANNEL, message=message)
        except Exception:
            logger.exception("table_event_publish_failed", extra={"table_id": str(event.table_id)})

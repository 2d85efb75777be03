from __future__ import annotations

import logging
from datetime import datetime, timezone

from rbo.application.dto.responses import OrderResponse
from rbo.application.mappers.order_mapper import to_order_response
from rbo.application.metrics.order_lifecycle import record_payment
from rbo.application.ports.repositories import OrderRepository, TableRepository
from rbo.application.use_cases.get_order import OrderNotFoundError
from rbo.application.use_cases.table_registry import FreeTable
from rbo.domain.common.ids import OrderId
from rbo.domain.order.entities import PaymentStatus

logger = logging.getLogger(__name__)


class InvalidPaymentStatusError(Exception):
    pass


class UpdateOrderPayment:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository

    def execute(
        self,
        order_id: OrderId,
        payment_status: PaymentStatus | str,
        payment_method: str | None = None,
    ) -> OrderResponse:
        if not isinstance(payment_status, PaymentStatus):
            try:
                payment_status = PaymentStatus(payment_status.strip().lower())
            except ValueError as exc:
                raise InvalidPaymentStatusError(
                    f"invalid payment status: {payment_status}"
                ) from exc

        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        updated = order.with_payment(payment_status, payment_method, datetime.now(timezone.utc))
        self._order_repository.update(updated)
        record_payment(payment_status.value)
        logger.info(
            "order_payment_updated",
            extra={
                "order_id": str(order_id),
                "payment_status": payment_status.value,
                "payment_method": updated.payment_method,
            },
        )

        if payment_status == PaymentStatus.COMPLETED:
            table = self._table_repository.find_by_order(order_id)
            if table is not None:
                FreeTable(self._table_repository).execute(table.table_id)

        return to_order_response(updated)

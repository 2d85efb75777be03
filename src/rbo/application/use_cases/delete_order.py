from __future__ import annotations

import logging

from rbo.application.ports.repositories import OrderRepository, TableRepository
from rbo.application.use_cases.get_order import OrderNotFoundError
from rbo.application.use_cases.reconcile_table import ReconcileTableForOrder
from rbo.domain.common.ids import OrderId
from rbo.domain.order.entities import OrderStatus

logger = logging.getLogger(__name__)


class DeleteOrder:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository

    def execute(self, order_id: OrderId) -> None:
        if not self._order_repository.delete(order_id):
            raise OrderNotFoundError(f"order {order_id} not found")
        logger.info("order_deleted", extra={"order_id": str(order_id)})

        # A deleted order must not keep its table occupied.
        ReconcileTableForOrder(self._table_repository).execute(order_id, OrderStatus.CANCELLED)

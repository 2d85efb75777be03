from __future__ import annotations

import logging

from rbo.application.ports.repositories import OrderRepository
from rbo.application.ports.storage import DocumentStore, StorageUnavailableError
from rbo.domain.common.ids import OrderId
from rbo.domain.order.entities import Order
from rbo.infrastructure.storage.records import order_from_record, order_to_record

ORDERS_KEY = "restaurantOrders"

logger = logging.getLogger(__name__)


class DocumentOrderRepository(OrderRepository):
    """Orders kept as one JSON list, newest first."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def _read_records(self) -> list[dict]:
        # Raises StorageUnavailableError so writes never replace a list they could not read.
        records = self._store.get(ORDERS_KEY)
        return records if isinstance(records, list) else []

    def list_all(self) -> list[Order]:
        try:
            records = self._read_records()
        except StorageUnavailableError:
            logger.warning("storage_unavailable", extra={"key": ORDERS_KEY})
            return []

        orders: list[Order] = []
        for record in records:
            try:
                order = order_from_record(record)
            except (KeyError, TypeError, ValueError):
                logger.warning(
                    "order_record_invalid",
                    extra={"order_id": record.get("id") if isinstance(record, dict) else None},
                )
                continue
            if order.total_drift():
                logger.warning(
                    "order_total_mismatch",
                    extra={"order_id": str(order.order_id), "drift_minor": order.total_drift()},
                )
            orders.append(order)
        return orders

    def get(self, order_id: OrderId) -> Order | None:
        for order in self.list_all():
            if order.order_id == order_id:
                return order
        return None

    def add(self, order: Order) -> None:
        records = self._read_records()
        records.insert(0, order_to_record(order))
        self._store.set(ORDERS_KEY, records)

    def update(self, order: Order) -> None:
        records = self._read_records()
        for index, record in enumerate(records):
            if str(record.get("id")) == str(order.order_id):
                records[index] = order_to_record(order)
                self._store.set(ORDERS_KEY, records)
                return
        raise KeyError(f"order {order.order_id} not stored")

    def delete(self, order_id: OrderId) -> bool:
        records = self._read_records()
        remaining = [record for record in records if str(record.get("id")) != str(order_id)]
        if len(remaining) == len(records):
            return False
        self._store.set(ORDERS_KEY, remaining)
        return True

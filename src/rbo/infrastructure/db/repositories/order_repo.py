from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import SQLAlchemyError

from rbo.application.ports.repositories import OrderRepository
from rbo.domain.common.ids import OrderId, TableId
from rbo.domain.order.entities import (
    Customer,
    Order,
    OrderStatus,
    OrderType,
    PaymentStatus,
)
from rbo.infrastructure.db.models.order import OrderRecordModel
from rbo.infrastructure.db.session import get_engine, session_factory
from rbo.infrastructure.storage.records import item_from_record, item_to_record

logger = logging.getLogger(__name__)


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyOrderRepository(OrderRepository):
    """Relational order store, one row per order with items kept as JSON."""

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()
        self._sessions = session_factory(self._engine)

    def list_all(self) -> list[Order]:
        statement = select(OrderRecordModel).order_by(
            OrderRecordModel.timestamp.desc(), OrderRecordModel.order_id.desc()
        )
        try:
            with self._sessions() as session:
                models = list(session.execute(statement).scalars().all())
        except SQLAlchemyError:
            logger.exception("order_list_failed")
            return []
        return [self._to_domain(model) for model in models]

    def get(self, order_id: OrderId) -> Order | None:
        with self._sessions() as session:
            model = session.get(OrderRecordModel, str(order_id))
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, order: Order) -> None:
        with self._sessions() as session:
            session.add(self._to_model(order))
            session.commit()

    def update(self, order: Order) -> None:
        with self._sessions() as session:
            session.merge(self._to_model(order))
            session.commit()

    def delete(self, order_id: OrderId) -> bool:
        statement = delete(OrderRecordModel).where(OrderRecordModel.order_id == str(order_id))
        with self._sessions() as session:
            result = session.execute(statement)
            session.commit()
        return result.rowcount == 1

    def _to_model(self, order: Order) -> OrderRecordModel:
        customer = order.customer
        return OrderRecordModel(
            order_id=str(order.order_id),
            timestamp=order.created_at,
            customer_name=customer.name if customer else None,
            customer_phone=customer.phone if customer else None,
            order_type=order.order_type.value,
            table_number=str(order.table_id) if order.table_id is not None else None,
            delivery_address=customer.address if customer else None,
            payment_method=order.payment_method,
            status=order.status.value,
            items=[item_to_record(item) for item in order.items],
            is_paid=order.is_paid,
            currency=order.currency,
            updated_at=order.updated_at,
            completed_at=order.completed_at,
            paid_at=order.paid_at,
        )

    def _to_domain(self, model: OrderRecordModel) -> Order:
        customer = None
        if model.customer_name or model.customer_phone:
            customer = Customer(
                name=model.customer_name or "",
                phone=model.customer_phone or "",
                address=model.delivery_address,
            )
        return Order(
            order_id=OrderId(model.order_id),
            items=tuple(item_from_record(item, model.currency) for item in model.items),
            status=OrderStatus.parse(model.status),
            payment_status=PaymentStatus.COMPLETED if model.is_paid else PaymentStatus.PENDING,
            order_type=OrderType(model.order_type),
            created_at=_aware(model.timestamp),
            updated_at=_aware(model.updated_at),
            payment_method=model.payment_method,
            table_id=TableId(model.table_number) if model.table_number else None,
            customer=customer,
            completed_at=_aware(model.completed_at),
            paid_at=_aware(model.paid_at),
            currency=model.currency,
        )

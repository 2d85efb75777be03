from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.domain.common.ids import ItemId, OrderId, TableId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import (
    Customer,
    OrderItem,
    OrderStatus,
    OrderType,
    PaymentStatus,
    create_pending_order,
)
from rbo.infrastructure.db.models.order import Base
from rbo.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository


@pytest.fixture
def engine() -> Engine:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def _order(order_id: str, created_at: datetime):
    return create_pending_order(
        order_id=OrderId(order_id),
        items=[
            OrderItem(
                item_id=ItemId("itm_002"),
                name="Dum Aloo",
                unit_price=Money(amount_minor=22000),
                quantity=1,
                category="Main Course",
            )
        ],
        order_type=OrderType.DELIVERY,
        now=created_at,
        customer=Customer(name="Ravi", phone="9000000000", address="Kuchmulla"),
        payment_method="Online",
    )


def test_add_and_get_round_trip(engine: Engine) -> None:
    repository = SqlAlchemyOrderRepository(engine)
    created_at = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)

    repository.add(_order("ORD-1", created_at))

    loaded = repository.get(OrderId("ORD-1"))
    assert loaded is not None
    assert loaded.created_at == created_at
    assert loaded.total == Money(amount_minor=22000)
    assert loaded.order_type == OrderType.DELIVERY
    assert loaded.customer is not None
    assert loaded.customer.address == "Kuchmulla"
    assert repository.get(OrderId("ORD-missing")) is None


def test_list_all_is_newest_first(engine: Engine) -> None:
    repository = SqlAlchemyOrderRepository(engine)
    start = datetime(2026, 6, 1, tzinfo=timezone.utc)
    repository.add(_order("ORD-old", start))
    repository.add(_order("ORD-new", start + timedelta(hours=2)))

    assert [str(order.order_id) for order in repository.list_all()] == ["ORD-new", "ORD-old"]


def test_update_persists_status_and_payment(engine: Engine) -> None:
    repository = SqlAlchemyOrderRepository(engine)
    order = _order("ORD-1", datetime(2026, 6, 1, tzinfo=timezone.utc))
    repository.add(order)
    now = datetime(2026, 6, 1, 1, 0, tzinfo=timezone.utc)

    repository.update(
        order.transition_to(OrderStatus.DELIVERED, now).with_payment(PaymentStatus.COMPLETED, None, now)
    )

    loaded = repository.get(OrderId("ORD-1"))
    assert loaded is not None
    assert loaded.status == OrderStatus.DELIVERED
    assert loaded.is_paid
    assert loaded.paid_at == now


def test_delete_reports_missing_rows(engine: Engine) -> None:
    repository = SqlAlchemyOrderRepository(engine)
    repository.add(_order("ORD-1", datetime(2026, 6, 1, tzinfo=timezone.utc)))

    assert repository.delete(OrderId("ORD-1")) is True
    assert repository.delete(OrderId("ORD-1")) is False


def test_list_all_returns_empty_when_table_is_missing() -> None:
    engine = create_engine("sqlite://", poolclass=StaticPool)

    assert SqlAlchemyOrderRepository(engine).list_all() == []


def test_table_number_round_trip(engine: Engine) -> None:
    repository = SqlAlchemyOrderRepository(engine)
    order = create_pending_order(
        order_id=OrderId("ORD-9"),
        items=[
            OrderItem(item_id=ItemId("itm_004"), name="Kahwa", unit_price=Money(amount_minor=6000), quantity=2)
        ],
        order_type=OrderType.DINE_IN,
        now=datetime(2026, 6, 2, tzinfo=timezone.utc),
        table_id=TableId("t3"),
    )

    repository.add(order)

    loaded = repository.get(OrderId("ORD-9"))
    assert loaded is not None
    assert loaded.table_id == TableId("t3")
    assert loaded.customer is None

from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.domain.common.ids import ItemId, OrderId, TableId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import (
    InvalidOrderStatusError,
    ItemVariant,
    OrderItem,
    OrderStatus,
    OrderTransitionError,
    OrderType,
    PaymentStatus,
    create_pending_order,
)


def _item(price_minor: int = 10000, quantity: int = 1, **kwargs) -> OrderItem:
    return OrderItem(
        item_id=ItemId(kwargs.pop("item_id", "itm_001")),
        name=kwargs.pop("name", "Rogan Josh"),
        unit_price=Money(amount_minor=price_minor),
        quantity=quantity,
        **kwargs,
    )


def _order(*items: OrderItem):
    now = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)
    return create_pending_order(
        order_id=OrderId("ORD-1"),
        items=list(items) or [_item()],
        order_type=OrderType.DINE_IN,
        now=now,
        table_id=TableId("m1"),
    )


def test_money_format_renders_rupees() -> None:
    assert Money(amount_minor=50000).format() == "₹500.00"
    assert Money(amount_minor=1205).format() == "₹12.05"
    assert Money(amount_minor=100, currency="USD").format() == "USD 1.00"


def test_money_rejects_negative_amount() -> None:
    with pytest.raises(ValueError):
        Money(amount_minor=-1)


def test_order_total_is_derived_from_items() -> None:
    order = _order(_item(10000, 2), _item(5000, 1, item_id="itm_002", name="Kahwa"))

    assert order.total == Money(amount_minor=25000)


def test_selected_variant_overrides_price_and_name() -> None:
    item = _item(
        10000,
        2,
        selected_variant="Full",
        variants=(
            ItemVariant(size="Half", price=Money(amount_minor=6000)),
            ItemVariant(size="Full", price=Money(amount_minor=11000)),
        ),
    )

    assert item.effective_price == Money(amount_minor=11000)
    assert item.display_name == "Rogan Josh (Full)"
    assert item.line_total == Money(amount_minor=22000)


def test_unknown_variant_falls_back_to_base_price() -> None:
    item = _item(10000, 1, selected_variant="Jumbo")

    assert item.effective_price == Money(amount_minor=10000)
    assert item.display_name == "Rogan Josh"


def test_order_requires_items() -> None:
    with pytest.raises(ValueError):
        create_pending_order(
            order_id=OrderId("ORD-1"),
            items=[],
            order_type=OrderType.DELIVERY,
            now=datetime.now(timezone.utc),
        )


def test_item_quantity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        _item(quantity=0)


def test_total_drift_compares_stored_total() -> None:
    order = _order(_item(10000, 1))

    assert order.total_drift() == 0
    assert replace(order, stored_total=Money(amount_minor=10500)).total_drift() == 500


def test_status_parse_is_case_insensitive_and_maps_approved() -> None:
    assert OrderStatus.parse(" Ready ") == OrderStatus.READY
    assert OrderStatus.parse("approved") == OrderStatus.CONFIRMED
    with pytest.raises(InvalidOrderStatusError):
        OrderStatus.parse("lost")


def test_transition_to_completed_sets_completed_at() -> None:
    order = _order()
    later = order.created_at + timedelta(minutes=40)

    completed = order.transition_to(OrderStatus.COMPLETED, later)

    assert completed.status == OrderStatus.COMPLETED
    assert completed.completed_at == later
    assert completed.updated_at == later


def test_transition_may_skip_intermediate_states() -> None:
    order = _order()

    assert order.transition_to(OrderStatus.READY, order.created_at).status == OrderStatus.READY


def test_terminal_order_cannot_be_reopened() -> None:
    order = _order().transition_to(OrderStatus.CANCELLED, datetime.now(timezone.utc))

    with pytest.raises(OrderTransitionError):
        order.transition_to(OrderStatus.PREPARING, datetime.now(timezone.utc))


def test_same_status_transition_is_noop() -> None:
    order = _order()

    assert order.transition_to(OrderStatus.PENDING, datetime.now(timezone.utc)) is order


def test_with_payment_completed_records_paid_at_and_keeps_method() -> None:
    order = replace(_order(), payment_method="Online")
    now = datetime.now(timezone.utc)

    paid = order.with_payment(PaymentStatus.COMPLETED, None, now)

    assert paid.is_paid
    assert paid.paid_at == now
    assert paid.payment_method == "Online"

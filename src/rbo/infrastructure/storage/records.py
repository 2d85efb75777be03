from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from rbo.domain.common.ids import ItemId, OrderId, TableId
from rbo.domain.common.money import DEFAULT_CURRENCY, Money
from rbo.domain.order.entities import (
    Customer,
    ItemVariant,
    Order,
    OrderItem,
    OrderStatus,
    OrderType,
    PaymentStatus,
)
from rbo.domain.table.entities import FloorLocation, Table, TableStatus


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _minor_amount(record: dict[str, Any], minor_key: str, major_key: str) -> int | None:
    """Read an amount in paise, falling back to a rupee value written by older clients."""
    if record.get(minor_key) is not None:
        return int(record[minor_key])
    if record.get(major_key) is None:
        return None
    try:
        rupees = Decimal(str(record[major_key]))
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {record[major_key]!r}") from exc
    return int((rupees * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def table_to_record(table: Table) -> dict[str, Any]:
    return {
        "id": str(table.table_id),
        "name": table.name,
        "capacity": table.capacity,
        "status": table.status.value,
        "orderId": str(table.order_id) if table.order_id is not None else None,
        "location": table.location.value,
        "section": table.section,
    }


def table_from_record(record: dict[str, Any], location: FloorLocation) -> Table:
    order_id = record.get("orderId")
    return Table(
        table_id=TableId(str(record["id"])),
        name=record["name"],
        capacity=int(record["capacity"]),
        status=TableStatus(record["status"]),
        order_id=OrderId(str(order_id)) if order_id is not None else None,
        location=FloorLocation(record.get("location", location.value)),
        section=record.get("section", ""),
    )


def item_to_record(item: OrderItem) -> dict[str, Any]:
    return {
        "id": str(item.item_id),
        "name": item.name,
        "category": item.category,
        "priceMinor": item.unit_price.amount_minor,
        "quantity": item.quantity,
        "selectedVariant": item.selected_variant,
        "variants": [
            {"size": variant.size, "priceMinor": variant.price.amount_minor}
            for variant in item.variants
        ],
    }


def _required_amount(record: dict[str, Any]) -> int:
    amount = _minor_amount(record, "priceMinor", "price")
    if amount is None:
        raise KeyError("priceMinor")
    return amount


def item_from_record(record: dict[str, Any], currency: str) -> OrderItem:
    return OrderItem(
        item_id=ItemId(str(record["id"])),
        name=record["name"],
        unit_price=Money(amount_minor=_required_amount(record), currency=currency),
        quantity=int(record["quantity"]),
        category=record.get("category"),
        selected_variant=record.get("selectedVariant"),
        variants=tuple(
            ItemVariant(
                size=variant["size"],
                price=Money(amount_minor=_required_amount(variant), currency=currency),
            )
            for variant in record.get("variants") or ()
        ),
    )


def _customer_to_record(customer: Customer | None) -> dict[str, Any] | None:
    if customer is None:
        return None
    return {
        "name": customer.name,
        "phone": customer.phone,
        "email": customer.email,
        "address": customer.address,
        "specialInstructions": customer.special_instructions,
    }


def _customer_from_record(record: dict[str, Any] | None) -> Customer | None:
    if not record:
        return None
    return Customer(
        name=record.get("name", ""),
        phone=record.get("phone", ""),
        email=record.get("email"),
        address=record.get("address"),
        special_instructions=record.get("specialInstructions"),
    )


def order_to_record(order: Order) -> dict[str, Any]:
    return {
        "id": str(order.order_id),
        "date": _iso(order.created_at),
        "updatedAt": _iso(order.updated_at),
        "completedAt": _iso(order.completed_at),
        "paymentDate": _iso(order.paid_at),
        "items": [item_to_record(item) for item in order.items],
        "status": order.status.value,
        "paymentStatus": order.payment_status.value,
        "paymentMethod": order.payment_method,
        "orderType": order.order_type.value,
        "table": str(order.table_id) if order.table_id is not None else None,
        "customerInfo": _customer_to_record(order.customer),
        # Written for readers of the raw document; never trusted on load.
        "totalMinor": order.total.amount_minor,
        "currency": order.currency,
    }


def order_from_record(record: dict[str, Any]) -> Order:
    currency = record.get("currency") or DEFAULT_CURRENCY
    created_at = _parse_datetime(record.get("date") or record.get("createdAt"))
    if created_at is None:
        raise ValueError(f"order {record.get('id')} has no date")
    stored_total = _minor_amount(record, "totalMinor", "total")
    table_id = record.get("table")
    return Order(
        order_id=OrderId(str(record["id"])),
        items=tuple(item_from_record(item, currency) for item in record["items"]),
        status=OrderStatus.parse(record["status"]),
        payment_status=PaymentStatus(record.get("paymentStatus") or PaymentStatus.PENDING.value),
        order_type=OrderType(record.get("orderType") or OrderType.DINE_IN.value),
        created_at=created_at,
        updated_at=_parse_datetime(record.get("updatedAt")),
        payment_method=record.get("paymentMethod"),
        table_id=TableId(str(table_id)) if table_id is not None else None,
        customer=_customer_from_record(record.get("customerInfo")),
        stored_total=Money(amount_minor=int(stored_total), currency=currency)
        if stored_total is not None
        else None,
        completed_at=_parse_datetime(record.get("completedAt")),
        paid_at=_parse_datetime(record.get("paymentDate")),
        currency=currency,
    )

from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from rbo.domain.order.entities import Order
from rbo.domain.order.events import OrderStatusChanged, TableReconciled


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def _order_payload(order: Order) -> dict[str, Any]:
    return {
        "orderId": str(order.order_id),
        "tableId": str(order.table_id) if order.table_id is not None else None,
        "status": order.status.value,
        "paymentStatus": order.payment_status.value,
        "totalMoney": {
            "amountMinor": order.total.amount_minor,
            "currency": order.total.currency,
        },
        "createdAt": order.created_at.isoformat(),
        "items": [
            {
                "itemId": str(item.item_id),
                "name": item.display_name,
                "quantity": item.quantity,
                "lineTotal": {
                    "amountMinor": item.line_total.amount_minor,
                    "currency": item.line_total.currency,
                },
            }
            for item in order.items
        ],
    }


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=event_type,
        occurred_at=occurred_at,
        payload=_order_payload(order),
        trace_id=trace_id,
        request_id=request_id,
    )


def serialize_status_changed_event(
    *,
    event: OrderStatusChanged,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    payload = _order_payload(order)
    payload["fromStatus"] = event.from_status.value
    return _serialize_event(
        event_type="order.status_changed",
        occurred_at=event.occurred_at,
        payload=payload,
        trace_id=trace_id,
        request_id=request_id,
    )


def serialize_table_reconciled_event(
    *,
    event: TableReconciled,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="table.reconciled",
        occurred_at=event.occurred_at,
        payload={
            "tableId": str(event.table_id),
            "orderId": str(event.order_id),
            "fromStatus": event.from_status.value,
            "toStatus": event.to_status.value,
        },
        trace_id=trace_id,
        request_id=request_id,
    )

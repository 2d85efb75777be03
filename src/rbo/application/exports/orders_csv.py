from __future__ import annotations

import csv
import io
from collections.abc import Iterable

from rbo.domain.order.entities import Order

CSV_HEADER = ("Order ID", "Date", "Total", "Items", "Status", "Payment Method")


def _single_line(value: str) -> str:
    return " ".join(value.splitlines())


def _items_summary(order: Order) -> str:
    return "; ".join(f"{item.quantity} x {item.display_name}" for item in order.items)


def render_orders_csv(orders: Iterable[Order]) -> str:
    """One header line plus one line per order; every field quoted."""
    buffer = io.StringIO()
    # The header is written unquoted, data rows fully quoted.
    buffer.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for order in orders:
        fields = (
            str(order.order_id),
            order.created_at.strftime("%d/%m/%Y"),
            order.total.format(),
            _items_summary(order),
            order.status.value,
            order.payment_method or "",
        )
        # Free-text fields come from request bodies; one order must stay one line.
        writer.writerow(_single_line(field) for field in fields)
    return buffer.getvalue()

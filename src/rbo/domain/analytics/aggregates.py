"""Revenue and order statistics derived from order records.

Everything here is recomputed from the full order list on each call; nothing is
cached, so the figures always agree with the order store. Revenue is summed from
item lines, never from an order's stored total.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from rbo.domain.common.ids import ItemId
from rbo.domain.common.money import DEFAULT_CURRENCY
from rbo.domain.order.entities import Order, OrderStatus

TOP_ITEMS_LIMIT = 10
UNCATEGORIZED = "Uncategorized"

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)


@dataclass
class ItemTally:
    item_id: ItemId
    name: str
    category: str
    quantity: int = 0
    revenue: int = 0


@dataclass(frozen=True)
class CategoryRevenue:
    category: str
    revenue: int


@dataclass(frozen=True)
class OrderStats:
    total_orders: int
    total_revenue: int
    average_order_value: int
    cancel_rate: float
    top_selling_items: list[ItemTally]
    revenue_by_category: list[CategoryRevenue]
    currency: str = DEFAULT_CURRENCY


@dataclass
class RevenueBucket:
    total_revenue: int = 0
    order_count: int = 0


@dataclass(frozen=True)
class RevenueReport:
    daily: dict[str, RevenueBucket] = field(default_factory=dict)
    monthly: dict[str, RevenueBucket] = field(default_factory=dict)
    top_items: list[ItemTally] = field(default_factory=list)
    currency: str = DEFAULT_CURRENCY


def parse_month(month: int | str) -> int:
    """Return the month number (1-12) for a number or an English month name."""
    if isinstance(month, int):
        if 1 <= month <= 12:
            return month
        raise ValueError(f"month out of range: {month}")

    value = month.strip().lower()
    if value.isdigit():
        return parse_month(int(value))
    if value in MONTH_NAMES:
        return MONTH_NAMES.index(value) + 1
    raise ValueError(f"unknown month: {month}")


def _utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def orders_in_month(orders: Iterable[Order], month: int, year: int) -> list[Order]:
    scoped = []
    for order in orders:
        created_at = _utc(order.created_at)
        if created_at.month == month and created_at.year == year:
            scoped.append(order)
    return scoped


def completed_orders(orders: Iterable[Order]) -> list[Order]:
    return [order for order in orders if order.status == OrderStatus.COMPLETED]


def tally_items(orders: Iterable[Order]) -> list[ItemTally]:
    """Per-item quantity and revenue, highest revenue first."""
    tallies: dict[ItemId, ItemTally] = {}
    for order in orders:
        for item in order.items:
            tally = tallies.get(item.item_id)
            if tally is None:
                tally = ItemTally(
                    item_id=item.item_id,
                    name=item.name,
                    category=item.category or UNCATEGORIZED,
                )
                tallies[item.item_id] = tally
            tally.quantity += item.quantity
            tally.revenue += item.line_total.amount_minor
    return sorted(tallies.values(), key=lambda tally: tally.revenue, reverse=True)


def revenue_by_category(tallies: Iterable[ItemTally]) -> list[CategoryRevenue]:
    totals: dict[str, int] = {}
    for tally in tallies:
        totals[tally.category] = totals.get(tally.category, 0) + tally.revenue
    return sorted(
        (CategoryRevenue(category=category, revenue=revenue) for category, revenue in totals.items()),
        key=lambda entry: entry.revenue,
        reverse=True,
    )


def compute_order_stats(orders: list[Order], currency: str = DEFAULT_CURRENCY) -> OrderStats:
    completed = completed_orders(orders)
    total_orders = len(completed)
    total_revenue = sum(order.total.amount_minor for order in completed)
    average_order_value = round(total_revenue / total_orders) if total_orders else 0
    cancel_rate = (len(orders) - total_orders) / len(orders) * 100 if orders else 0.0

    tallies = tally_items(completed)
    return OrderStats(
        total_orders=total_orders,
        total_revenue=total_revenue,
        average_order_value=average_order_value,
        cancel_rate=cancel_rate,
        top_selling_items=tallies[:TOP_ITEMS_LIMIT],
        revenue_by_category=revenue_by_category(tallies),
        currency=currency,
    )


def compute_revenue_report(orders: list[Order], currency: str = DEFAULT_CURRENCY) -> RevenueReport:
    completed = completed_orders(orders)
    daily: dict[str, RevenueBucket] = {}
    monthly: dict[str, RevenueBucket] = {}

    for order in completed:
        created_at = _utc(order.created_at)
        day_key = created_at.strftime("%Y-%m-%d")
        month_key = created_at.strftime("%Y-%m")
        amount = order.total.amount_minor
        for buckets, key in ((daily, day_key), (monthly, month_key)):
            bucket = buckets.setdefault(key, RevenueBucket())
            bucket.total_revenue += amount
            bucket.order_count += 1

    return RevenueReport(
        daily=dict(sorted(daily.items())),
        monthly=dict(sorted(monthly.items())),
        top_items=tally_items(completed)[:TOP_ITEMS_LIMIT],
        currency=currency,
    )


def recent_completed_orders(orders: Iterable[Order], limit: int) -> list[Order]:
    completed = completed_orders(orders)
    completed.sort(key=lambda order: _utc(order.completed_at or order.created_at), reverse=True)
    return completed[:limit]

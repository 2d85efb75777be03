from __future__ import annotations

import argparse
import random
from datetime import datetime, timedelta, timezone
from typing import Sequence

from rbo.api.providers import order_repository, table_repository
from rbo.domain.common.ids import ItemId, OrderId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import (
    Order,
    OrderItem,
    OrderStatus,
    OrderType,
    PaymentStatus,
)
from rbo.domain.table.layout import seed_tables

GST_RATE_PERCENT = 18

# (id, name, category, base price in paise)
SAMPLE_MENU: tuple[tuple[str, str, str, int], ...] = (
    ("itm_001", "Rogan Josh", "Main Course", 32000),
    ("itm_002", "Dum Aloo", "Main Course", 22000),
    ("itm_003", "Yakhni", "Main Course", 28000),
    ("itm_004", "Kahwa", "Beverages", 6000),
    ("itm_005", "Noon Chai", "Beverages", 5000),
    ("itm_006", "Girda", "Bakery", 2000),
    ("itm_007", "Bakarkhani", "Bakery", 3000),
    ("itm_008", "Phirni", "Desserts", 9000),
)


def _with_gst(amount_minor: int) -> int:
    return amount_minor * (100 + GST_RATE_PERCENT) // 100


def generate_demo_orders(
    now: datetime,
    days: int = 60,
    rng: random.Random | None = None,
) -> list[Order]:
    """Between 3 and 10 orders a day for ``days`` days ending at ``now``; about 10% cancelled."""
    rng = rng or random.Random()
    orders: list[Order] = []
    for day in range(days):
        created_on = now - timedelta(days=day)
        for index in range(rng.randint(3, 10)):
            items = []
            for _ in range(rng.randint(1, 4)):
                item_id, name, category, price = rng.choice(SAMPLE_MENU)
                items.append(
                    OrderItem(
                        item_id=ItemId(item_id),
                        name=name,
                        unit_price=Money(amount_minor=_with_gst(price)),
                        quantity=rng.randint(1, 2),
                        category=category,
                    )
                )
            cancelled = rng.random() < 0.1
            orders.append(
                Order(
                    order_id=OrderId(f"ORD-{created_on:%Y%m%d}-{index}"),
                    items=tuple(items),
                    status=OrderStatus.CANCELLED if cancelled else OrderStatus.COMPLETED,
                    payment_status=PaymentStatus.PENDING if cancelled else PaymentStatus.COMPLETED,
                    order_type=OrderType.DINE_IN,
                    created_at=created_on,
                    updated_at=created_on,
                    payment_method="Cash" if rng.random() > 0.7 else "Online",
                    completed_at=None if cancelled else created_on,
                    paid_at=None if cancelled else created_on,
                )
            )
    return orders


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the floor plan and demo order history.")
    parser.add_argument("--days", type=int, default=60, help="Days of order history to generate.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data.")
    parser.add_argument(
        "--tables-only",
        action="store_true",
        help="Reset the floor plan without generating orders.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    table_repository().save_all(seed_tables())
    if args.tables_only:
        print("seed complete: tables")
        return

    orders = generate_demo_orders(
        datetime.now(timezone.utc),
        days=args.days,
        rng=random.Random(args.seed),
    )
    repository = order_repository()
    for order in sorted(orders, key=lambda order: order.created_at):
        repository.add(order)
    print(f"seed complete: {len(orders)} orders")


if __name__ == "__main__":
    main()

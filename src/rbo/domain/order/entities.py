from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from rbo.domain.common.ids import ItemId, OrderId, TableId
from rbo.domain.common.money import DEFAULT_CURRENCY, Money


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str) -> OrderStatus:
        normalized = value.strip().lower()
        if normalized == "approved":
            return cls.CONFIRMED
        try:
            return cls(normalized)
        except ValueError as exc:
            raise InvalidOrderStatusError(f"unknown order status: {value}") from exc

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class OrderType(str, Enum):
    DINE_IN = "dine_in"
    DELIVERY = "delivery"


@dataclass(frozen=True)
class ItemVariant:
    size: str
    price: Money


@dataclass(frozen=True)
class OrderItem:
    item_id: ItemId
    name: str
    unit_price: Money
    quantity: int
    category: str | None = None
    selected_variant: str | None = None
    variants: tuple[ItemVariant, ...] = ()

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def variant(self) -> ItemVariant | None:
        if self.selected_variant is None:
            return None
        for variant in self.variants:
            if variant.size == self.selected_variant:
                return variant
        return None

    @property
    def effective_price(self) -> Money:
        variant = self.variant
        return variant.price if variant is not None else self.unit_price

    @property
    def display_name(self) -> str:
        if self.variant is not None:
            return f"{self.name} ({self.selected_variant})"
        return self.name

    @property
    def line_total(self) -> Money:
        return self.effective_price.times(self.quantity)


@dataclass(frozen=True)
class Customer:
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    special_instructions: str | None = None


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    items: tuple[OrderItem, ...]
    status: OrderStatus
    payment_status: PaymentStatus
    order_type: OrderType
    created_at: datetime
    updated_at: datetime | None = None
    payment_method: str | None = None
    table_id: TableId | None = None
    customer: Customer | None = None
    stored_total: Money | None = None
    completed_at: datetime | None = None
    paid_at: datetime | None = None
    currency: str = field(default=DEFAULT_CURRENCY)

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("order must contain at least one item")
        for item in self.items:
            if item.effective_price.currency != self.currency:
                raise ValueError("item currency must match order currency")

    @property
    def total(self) -> Money:
        total = Money.zero(self.currency)
        for item in self.items:
            total = total + item.line_total
        return total

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED

    def total_drift(self) -> int:
        """Stored total minus derived total, in minor units (0 when nothing was stored)."""
        if self.stored_total is None:
            return 0
        return self.stored_total.amount_minor - self.total.amount_minor

    def transition_to(self, status: OrderStatus, now: datetime) -> Order:
        if status == self.status:
            return self
        if self.status.is_terminal:
            raise OrderTransitionError(
                f"cannot move order {self.order_id} from status={self.status.value} "
                f"to status={status.value}"
            )
        completed_at = now if status == OrderStatus.COMPLETED else self.completed_at
        return replace(self, status=status, updated_at=now, completed_at=completed_at)

    def with_payment(
        self,
        payment_status: PaymentStatus,
        payment_method: str | None,
        now: datetime,
    ) -> Order:
        return replace(
            self,
            payment_status=payment_status,
            payment_method=payment_method or self.payment_method,
            paid_at=now if payment_status == PaymentStatus.COMPLETED else None,
            updated_at=now,
        )


def create_pending_order(
    order_id: OrderId,
    items: list[OrderItem],
    order_type: OrderType,
    now: datetime,
    table_id: TableId | None = None,
    customer: Customer | None = None,
    payment_method: str | None = None,
) -> Order:
    if not items:
        raise ValueError("order must contain at least one item")

    return Order(
        order_id=order_id,
        items=tuple(items),
        status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        order_type=order_type,
        created_at=now,
        updated_at=now,
        payment_method=payment_method,
        table_id=table_id,
        customer=customer,
        currency=items[0].effective_price.currency,
    )


class OrderTransitionError(Exception):
    pass


class InvalidOrderStatusError(ValueError):
    pass

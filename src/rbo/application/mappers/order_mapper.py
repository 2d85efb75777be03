from __future__ import annotations

from rbo.application.dto.responses import (
    CustomerResponse,
    MoneyResponse,
    OrderItemResponse,
    OrderResponse,
)
from rbo.domain.common.money import Money
from rbo.domain.order.entities import Order


def to_money_response(money: Money) -> MoneyResponse:
    return MoneyResponse(
        amountMinor=money.amount_minor,
        currency=money.currency,
        formatted=money.format(),
    )


def to_order_response(order: Order) -> OrderResponse:
    customer = order.customer
    return OrderResponse(
        orderId=str(order.order_id),
        status=order.status.value,
        paymentStatus=order.payment_status.value,
        paymentMethod=order.payment_method,
        orderType=order.order_type.value,
        tableId=str(order.table_id) if order.table_id is not None else None,
        customer=CustomerResponse(
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
            address=customer.address,
            specialInstructions=customer.special_instructions,
        )
        if customer is not None
        else None,
        items=[
            OrderItemResponse(
                itemId=str(item.item_id),
                name=item.display_name,
                category=item.category,
                quantity=item.quantity,
                unitPrice=to_money_response(item.effective_price),
                lineTotal=to_money_response(item.line_total),
                selectedVariant=item.selected_variant,
            )
            for item in order.items
        ],
        total=to_money_response(order.total),
        createdAt=order.created_at,
        updatedAt=order.updated_at,
        completedAt=order.completed_at,
        paidAt=order.paid_at,
    )

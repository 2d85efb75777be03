from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class ItemVariantRequest(CamelBaseModel):
    size: str
    price_minor: int = Field(ge=0)


class OrderItemRequest(CamelBaseModel):
    item_id: str
    name: str
    price_minor: int = Field(ge=0)
    quantity: int
    category: str | None = None
    selected_variant: str | None = None
    variants: list[ItemVariantRequest] = Field(default_factory=list)


class CustomerRequest(CamelBaseModel):
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    special_instructions: str | None = None


class PlaceOrderRequest(CamelBaseModel):
    items: list[OrderItemRequest] = Field(min_length=1)
    order_type: str = "dine_in"
    table_id: str | None = None
    customer: CustomerRequest | None = None
    payment_method: str | None = None
    currency: str = "INR"


class UpdateOrderStatusRequest(CamelBaseModel):
    status: str


class UpdateOrderPaymentRequest(CamelBaseModel):
    payment_status: str
    payment_method: str | None = None


class UpdateTableStatusRequest(CamelBaseModel):
    status: str
    order_id: str | None = None


class AssignOrderRequest(CamelBaseModel):
    order_id: str


class UpdateTableCapacityRequest(CamelBaseModel):
    capacity: int = Field(ge=1)


class ReconcileTableRequest(CamelBaseModel):
    order_id: str
    order_status: str


class ReserveTableRequest(CamelBaseModel):
    name: str
    phone: str
    guests: int = Field(ge=1)
    reservation_date: date = Field(alias="date")
    preferred_time: str = "dinner"

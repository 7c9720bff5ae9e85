"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class OrderLineSchema(BaseModel):
    product_id: str
    name: str = ""
    image: str | None = None
    price: int = Field(ge=0)
    quantity: int = Field(ge=1, default=1)
    product_type: Literal["SINGLE", "BOX", "OTHER"] | None = None


class PlaceOrderRequest(BaseModel):
    email: str
    items: list[OrderLineSchema] = Field(default_factory=list)
    hold_minutes: int | None = Field(default=None, ge=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "collector@example.com",
                    "items": [
                        {
                            "product_id": "card-001",
                            "name": "Charizard ex SAR",
                            "price": 32000,
                            "quantity": 1,
                            "product_type": "SINGLE",
                        }
                    ],
                }
            ]
        }
    }


class CancelOrderRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=500)


class UpdateOrderStatusRequest(BaseModel):
    status: Literal["PROCESSING", "SHIPPED", "DELIVERED"]


class OrderNumberResponse(BaseModel):
    order_number: str


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    image: str | None = None
    price: int
    quantity: int
    product_type: str
    line_total: int


class OrderResponse(BaseModel):
    order_number: str
    email: str
    status: str
    payment_status: str
    items: list[OrderItemResponse]
    subtotal: int
    shipping: int
    customs_fee: int
    total: int
    currency: str
    reservation_expires_at: datetime | None = None
    notes: str | None = None


# ---------------------------------------------------------------------------
# Reservation Schemas
# ---------------------------------------------------------------------------
class HoldStockRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
    order_number: str | None = None
    hold_minutes: int | None = Field(default=None, ge=1)


class ReservationIdResponse(BaseModel):
    reservation_id: str


# ---------------------------------------------------------------------------
# Maintenance Schemas
# ---------------------------------------------------------------------------
class SweepResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str
    cancelled_orders: int
    released_reservations: int
    processed_at: datetime


class StatusResponse(BaseModel):
    status: str = "ok"

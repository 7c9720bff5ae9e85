"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer) — separate from the
internal cart aggregate.
"""

from typing import Literal

from pydantic import BaseModel, Field


class CartLineSchema(BaseModel):
    product_id: str
    name: str = ""
    image: str | None = None
    price: int = Field(ge=0)
    quantity: int = 1
    stock: int
    product_type: Literal["SINGLE", "BOX", "OTHER"] | None = None
    category: str | None = None
    rarity: str | None = None
    condition: str | None = None


class CartQuoteRequest(BaseModel):
    items: list[CartLineSchema] = Field(default_factory=list)


class ShippingInfoSchema(BaseModel):
    shipping: int
    is_free_shipping: bool
    single_box_total: int
    other_total: int


class QuotedLineSchema(BaseModel):
    product_id: str
    name: str
    price: int
    quantity: int
    stock: int
    product_type: str
    line_total: int


class CartQuoteResponse(BaseModel):
    items: list[QuotedLineSchema]
    total_items: int
    subtotal: int
    customs_fee: int
    shipping: ShippingInfoSchema
    total: int
    box_count: int
    is_box_order_valid: bool
    box_units_needed: int

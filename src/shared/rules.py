"""Fulfilment and pricing rules shared by the Storefront and Checkout contexts.

All monetary amounts are integer yen. The cart page and order placement both
price lines through these functions, so the shipping fee and the BOX lot
minimum shown to the shopper are the ones enforced at checkout.

Shipping:
    Singles and BOX products share one free-shipping threshold. OTHER
    merchandise is priced separately and never counts towards it. A cart with
    no single/BOX value at all ships free.

BOX lots:
    Sealed boxes are sold in lots of at least ``BOX_MINIMUM`` units per order.
"""

import math
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from enum import Enum


class ProductType(Enum):
    SINGLE = "SINGLE"
    BOX = "BOX"
    OTHER = "OTHER"


FREE_SHIPPING_THRESHOLD = 50000
FLAT_SHIPPING_FEE = 4500
BOX_MINIMUM = 5

# Import duties are absorbed by the shop for this deployment.
CUSTOMS_RATE_PERCENT = 0

RESERVATION_HOLD_MINUTES = 30


@dataclass(frozen=True)
class ShippingInfo:
    """Shipping charge and the partitioned subtotals it was derived from."""

    shipping: int
    is_free_shipping: bool
    single_box_total: int
    other_total: int

    def to_dict(self) -> dict:
        return asdict(self)


def effective_type(value) -> ProductType:
    """Resolve a stored product type, defaulting to SINGLE when absent or unknown."""
    if isinstance(value, ProductType):
        return value
    if not value:
        return ProductType.SINGLE
    try:
        return ProductType(str(value).upper())
    except ValueError:
        return ProductType.SINGLE


def coerce_int(value, default: int = 0) -> int:
    """Best-effort integer conversion; anything unusable becomes ``default``."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return int(number)


def coerce_text(value) -> str | None:
    """Display attributes are kept only when they are strings or plain numbers."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


def totals_by_type(lines: Iterable[tuple]) -> dict[ProductType, int]:
    """Sum ``price * quantity`` per product type.

    ``lines`` yields ``(product_type, price, quantity)`` tuples.
    """
    totals = {product_type: 0 for product_type in ProductType}
    for product_type, price, quantity in lines:
        totals[effective_type(product_type)] += price * quantity
    return totals


def shipping_for(single_total: int, box_total: int, other_total: int) -> ShippingInfo:
    single_box_total = single_total + box_total
    is_free = single_box_total >= FREE_SHIPPING_THRESHOLD or single_box_total == 0
    return ShippingInfo(
        shipping=0 if is_free else FLAT_SHIPPING_FEE,
        is_free_shipping=is_free,
        single_box_total=single_box_total,
        other_total=other_total,
    )


def is_box_order_valid(box_count: int) -> bool:
    return box_count == 0 or box_count >= BOX_MINIMUM


def box_units_needed(box_count: int) -> int:
    """Units still missing to reach the lot minimum (0 when the order is valid)."""
    if is_box_order_valid(box_count):
        return 0
    return BOX_MINIMUM - box_count


def customs_fee(subtotal: int) -> int:
    return subtotal * CUSTOMS_RATE_PERCENT // 100


def box_minimum_message(box_count: int) -> str:
    return f"Minimum {BOX_MINIMUM} BOX required per order ({box_units_needed(box_count)} more needed)"

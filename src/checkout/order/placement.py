"""Order placement — command and handler.

Placing an order prices the submitted lines with the shared fulfilment
rules, refuses carts that break the BOX lot minimum, and holds stock for
every line until payment arrives or the hold lapses.
"""

import json
from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import Order
from checkout.reservation.reservation import StockReservation
from shared import rules
from shared.rules import RESERVATION_HOLD_MINUTES, ProductType, coerce_int, effective_type

logger = structlog.get_logger(__name__)


@checkout.command(part_of="Order")
class PlaceOrder:
    email = String(required=True, max_length=254)
    items = Text(required=True)  # JSON: list of cart line dicts
    hold_minutes = Integer(default=RESERVATION_HOLD_MINUTES, min_value=1)


def _normalise_lines(raw_items):
    lines = []
    for raw in raw_items:
        if not isinstance(raw, dict) or not raw.get("product_id"):
            raise ValidationError({"items": ["Every line needs a product_id"]})

        quantity = coerce_int(raw.get("quantity"), default=1)
        if quantity < 1:
            raise ValidationError({"items": [f"Quantity for {raw['product_id']} must be at least 1"]})

        lines.append(
            {
                "product_id": str(raw["product_id"]),
                "name": raw.get("name") or "",
                "image": raw.get("image"),
                "price": max(coerce_int(raw.get("price")), 0),
                "quantity": quantity,
                "product_type": effective_type(raw.get("product_type")).value,
            }
        )
    return lines


@checkout.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        raw_items = json.loads(command.items) if isinstance(command.items, str) else command.items
        lines = _normalise_lines(raw_items or [])
        if not lines:
            raise ValidationError({"items": ["Cart is empty"]})

        box_count = sum(line["quantity"] for line in lines if line["product_type"] == ProductType.BOX.value)
        if not rules.is_box_order_valid(box_count):
            raise ValidationError({"items": [rules.box_minimum_message(box_count)]})

        totals = rules.totals_by_type((line["product_type"], line["price"], line["quantity"]) for line in lines)
        subtotal = sum(totals.values())
        shipping = rules.shipping_for(
            single_total=totals[ProductType.SINGLE],
            box_total=totals[ProductType.BOX],
            other_total=totals[ProductType.OTHER],
        )

        now = datetime.now(UTC)
        hold_minutes = command.hold_minutes or RESERVATION_HOLD_MINUTES
        expires_at = now + timedelta(minutes=hold_minutes)

        order = Order.place(
            email=command.email,
            lines=lines,
            subtotal=subtotal,
            shipping=shipping.shipping,
            customs_fee=rules.customs_fee(subtotal),
            reservation_expires_at=expires_at,
        )
        current_domain.repository_for(Order).add(order)

        reservation_repo = current_domain.repository_for(StockReservation)
        for line in lines:
            reservation_repo.add(
                StockReservation.hold(
                    product_id=line["product_id"],
                    quantity=line["quantity"],
                    order_number=order.order_number,
                    hold_minutes=hold_minutes,
                    now=now,
                )
            )

        logger.info(
            "Order placed",
            order_number=order.order_number,
            total=order.total,
            line_count=len(lines),
            reservation_expires_at=expires_at.isoformat(),
        )
        return order.order_number

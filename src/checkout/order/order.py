"""Order aggregate (CQRS) — a placed order awaiting payment, then fulfilment.

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING / PROCESSING → CANCELLED

Payment runs alongside: PENDING → COMPLETED on confirmation, or
PENDING → CANCELLED when the order is cancelled before payment.

An order is "awaiting payment" only while both its status and its payment
status are PENDING. That is the sole state the reservation sweep may
auto-cancel from; an order whose payment raced ahead of the sweep is left
alone.
"""

import json
import random
import string
import time
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from checkout.domain import checkout
from checkout.order.events import (
    OrderCancelled,
    OrderPaymentConfirmed,
    OrderPlaced,
    OrderStatusChanged,
)
from shared.rules import ProductType


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class CancellationActor(Enum):
    CUSTOMER = "Customer"
    SYSTEM = "System"
    ADMIN = "Admin"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

AUTO_CANCEL_NOTE = "Auto-cancelled: Payment not completed within 30 minutes"

_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(number):
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_order_number():
    """``CS-<base36 millisecond timestamp>-<4 random base36 chars>``."""
    suffix = "".join(random.choices(_BASE36, k=4))
    return f"CS-{_to_base36(int(time.time() * 1000))}-{suffix}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@checkout.entity(part_of="Order")
class OrderItem:
    """A line as it was priced at placement time."""

    product_id = Identifier(required=True)
    name = Text()
    image = Text()
    price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    product_type = String(choices=ProductType, default=ProductType.SINGLE.value)
    line_total = Integer(required=True, min_value=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@checkout.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    email = String(required=True, max_length=254)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    items = HasMany(OrderItem)
    subtotal = Integer(default=0, min_value=0)
    shipping = Integer(default=0, min_value=0)
    customs_fee = Integer(default=0, min_value=0)
    total = Integer(default=0, min_value=0)
    currency = String(max_length=3, default="JPY")
    reservation_expires_at = DateTime()
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, email, lines, subtotal, shipping, customs_fee, reservation_expires_at, order_number=None):
        """Create a PENDING order from priced lines.

        ``lines`` are dicts with product_id, name, image, price, quantity and
        product_type.
        """
        now = datetime.now(UTC)
        order = cls(
            order_number=order_number or generate_order_number(),
            email=email,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            subtotal=subtotal,
            shipping=shipping,
            customs_fee=customs_fee,
            total=subtotal + shipping + customs_fee,
            reservation_expires_at=reservation_expires_at,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    name=line.get("name") or "",
                    image=line.get("image"),
                    price=line["price"],
                    quantity=line["quantity"],
                    product_type=line["product_type"],
                    line_total=line["price"] * line["quantity"],
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                email=email,
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "name": item.name,
                            "price": item.price,
                            "quantity": item.quantity,
                            "product_type": item.product_type,
                        }
                        for item in order.items
                    ]
                ),
                total=order.total,
                currency=order.currency,
                reservation_expires_at=reservation_expires_at,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    @property
    def is_awaiting_payment(self):
        return self.status == OrderStatus.PENDING.value and self.payment_status == PaymentStatus.PENDING.value

    def _record_cancellation(self, reason, cancelled_by):
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.payment_status = PaymentStatus.CANCELLED.value
        self.reservation_expires_at = None
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def confirm_payment(self):
        if self.payment_status != PaymentStatus.PENDING.value:
            raise ValidationError({"payment_status": [f"Payment is already {self.payment_status}"]})
        self._assert_can_transition(OrderStatus.PROCESSING)

        now = datetime.now(UTC)
        self.status = OrderStatus.PROCESSING.value
        self.payment_status = PaymentStatus.COMPLETED.value
        self.reservation_expires_at = None
        self.updated_at = now

        self.raise_(
            OrderPaymentConfirmed(
                order_id=str(self.id),
                order_number=self.order_number,
                confirmed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, reason, cancelled_by=CancellationActor.CUSTOMER.value):
        """Cancel on request. Shipped, delivered or already cancelled orders are refused."""
        if self.status == OrderStatus.CANCELLED.value:
            raise ValidationError({"status": ["Order is already cancelled"]})
        if self.status in (OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value):
            raise ValidationError({"status": ["Shipped orders cannot be cancelled"]})
        self._assert_can_transition(OrderStatus.CANCELLED)

        self._record_cancellation(reason, cancelled_by)

    def expire(self):
        """Cancel an order whose stock hold lapsed before payment.

        Returns False, leaving the order untouched, unless it is still
        awaiting payment.
        """
        if not self.is_awaiting_payment:
            return False

        self.notes = AUTO_CANCEL_NOTE
        self._record_cancellation(AUTO_CANCEL_NOTE, CancellationActor.SYSTEM.value)
        return True

    # -------------------------------------------------------------------
    # Fulfilment
    # -------------------------------------------------------------------
    def update_status(self, new_status):
        target = OrderStatus(new_status)
        if target == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Use cancellation to cancel an order"]})
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from checkout.domain import checkout


@checkout.event(part_of="Order")
class OrderPlaced:
    """An order was placed and its stock is held until payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    email = String(required=True)
    items = Text(required=True)  # JSON snapshot of the order lines
    total = Integer(required=True)
    currency = String(required=True)
    reservation_expires_at = DateTime()
    placed_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderPaymentConfirmed:
    """Payment for the order was completed; its stock holds became permanent."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    confirmed_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled by the customer or by the reservation sweep."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    reason = String(required=True)
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order along its fulfilment path."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)

"""Order cancellation — command and handler."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import CancellationActor, Order
from checkout.reservation.reservation import StockReservation

logger = structlog.get_logger(__name__)


@checkout.command(part_of="Order")
class CancelOrder:
    order_number = String(required=True, max_length=50)
    reason = String(required=True, max_length=500)
    cancelled_by = String(max_length=50, default=CancellationActor.CUSTOMER.value)


@checkout.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_by_order_number(command.order_number)
        order.cancel(
            reason=command.reason,
            cancelled_by=command.cancelled_by or CancellationActor.CUSTOMER.value,
        )
        repo.add(order)

        # Release the stock still on hold for this order
        reservation_repo = current_domain.repository_for(StockReservation)
        released = 0
        for reservation in reservation_repo.for_order(order.order_number):
            if not reservation.confirmed:
                reservation_repo.remove(reservation)
                released += 1

        logger.info(
            "Order cancelled",
            order_number=order.order_number,
            reason=command.reason,
            released_reservations=released,
        )

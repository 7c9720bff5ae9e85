"""Payment confirmation — command and handler."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import Order
from checkout.reservation.reservation import StockReservation

logger = structlog.get_logger(__name__)


@checkout.command(part_of="Order")
class ConfirmPayment:
    order_number = String(required=True, max_length=50)


@checkout.command_handler(part_of=Order)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_by_order_number(command.order_number)
        order.confirm_payment()
        repo.add(order)

        reservation_repo = current_domain.repository_for(StockReservation)
        for reservation in reservation_repo.for_order(order.order_number):
            reservation.confirm()
            reservation_repo.add(reservation)

        logger.info("Payment confirmed", order_number=order.order_number)

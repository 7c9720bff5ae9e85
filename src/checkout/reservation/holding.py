"""Detached stock holds — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.reservation.reservation import StockReservation
from shared.rules import RESERVATION_HOLD_MINUTES


@checkout.command(part_of="StockReservation")
class HoldStock:
    """Hold stock before an order exists; the sweep releases it if never claimed."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    order_number = String(max_length=50)
    hold_minutes = Integer(default=RESERVATION_HOLD_MINUTES, min_value=1)


@checkout.command_handler(part_of=StockReservation)
class HoldStockHandler:
    @handle(HoldStock)
    def hold_stock(self, command):
        reservation = StockReservation.hold(
            product_id=command.product_id,
            quantity=command.quantity,
            order_number=command.order_number,
            hold_minutes=command.hold_minutes or RESERVATION_HOLD_MINUTES,
        )
        current_domain.repository_for(StockReservation).add(reservation)
        return str(reservation.id)

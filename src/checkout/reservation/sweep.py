"""Reservation expiry sweep — command and handler.

Designed to be triggered periodically by an external scheduler (Vercel
cron, K8s CronJob) or manually by an operator, via the maintenance API
endpoints. Finds unconfirmed reservations past their expiry, cancels the
orders they were held for when those orders are still awaiting payment,
and deletes the reservations.

Order updates and reservation deletes happen in the handler's unit of
work, so they commit together or not at all. Re-running the sweep is
harmless: everything it touches is re-selected by the same predicate.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import Order
from checkout.reservation.reservation import StockReservation

logger = structlog.get_logger(__name__)

NOTHING_TO_SWEEP = "No expired reservations found"
SWEEP_COMPLETED = "Cleanup completed"


@checkout.command(part_of="StockReservation")
class SweepExpiredReservations:
    """Release lapsed stock holds and cancel the unpaid orders behind them."""

    as_of = DateTime()  # Optional: defaults to now


def _summary(message, cancelled_orders, released_reservations, processed_at):
    return {
        "message": message,
        "cancelled_orders": cancelled_orders,
        "released_reservations": released_reservations,
        "processed_at": processed_at,
    }


@checkout.command_handler(part_of=StockReservation)
class SweepExpiredReservationsHandler:
    @handle(SweepExpiredReservations)
    def sweep_expired_reservations(self, command):
        as_of = command.as_of or datetime.now(UTC)

        logger.info("Checking for expired reservations", as_of=as_of.isoformat())

        reservation_repo = current_domain.repository_for(StockReservation)
        expired = reservation_repo.expired_unconfirmed(as_of)

        if not expired:
            logger.info(NOTHING_TO_SWEEP)
            return _summary(NOTHING_TO_SWEEP, 0, 0, as_of)

        # Distinct order numbers, first-seen order; orphan holds have none
        order_numbers = list(dict.fromkeys(r.order_number for r in expired if r.order_number))

        order_repo = current_domain.repository_for(Order)
        cancelled_orders = 0
        for order_number in order_numbers:
            order = order_repo.find_by_order_number(order_number)
            if order is None:
                logger.warning("Reservation refers to a missing order", order_number=order_number)
                continue

            if not order.expire():
                logger.info(
                    "Order no longer awaiting payment, leaving it untouched",
                    order_number=order_number,
                    status=order.status,
                    payment_status=order.payment_status,
                )
                continue

            order_repo.add(order)
            cancelled_orders += 1
            logger.info("Auto-cancelled unpaid order", order_number=order_number)

        released = reservation_repo.release_expired(as_of)
        if released != len(expired):
            logger.warning(
                "Some expired reservations changed before release",
                selected=len(expired),
                released=released,
            )

        logger.info(
            SWEEP_COMPLETED,
            cancelled_orders=cancelled_orders,
            released_reservations=released,
        )
        return _summary(SWEEP_COMPLETED, cancelled_orders, released, as_of)

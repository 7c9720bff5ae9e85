"""Stock Reservation aggregate — a time-boxed hold on inventory.

A reservation either belongs to an order (``order_number`` set) or is an
orphan hold taken before an order existed. Unconfirmed reservations lapse
at ``expires_at``; the sweep deletes them and cancels the orders they were
held for. Confirmed reservations never expire.
"""

from datetime import UTC, datetime, timedelta

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String
from protean.utils.query import Q

from checkout.domain import checkout
from shared.rules import RESERVATION_HOLD_MINUTES

_PAGE_SIZE = 100


def _naive_utc(value):
    """Normalise a datetime to naive UTC so stored and supplied values compare."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def _aware_utc(value):
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _lapsed_before(as_of):
    """Unconfirmed holds whose expiry is strictly before ``as_of``."""
    return Q(confirmed=False, expires_at__lt=_aware_utc(as_of))


@checkout.aggregate
class StockReservation:
    order_number = String(max_length=50)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    expires_at = DateTime(required=True)
    confirmed = Boolean(default=False)
    created_at = DateTime()

    @classmethod
    def hold(cls, product_id, quantity, order_number=None, hold_minutes=RESERVATION_HOLD_MINUTES, now=None):
        if hold_minutes is None or hold_minutes < 1:
            raise ValidationError({"hold_minutes": ["Hold must last at least one minute"]})

        now = _aware_utc(now or datetime.now(UTC))
        return cls(
            order_number=order_number,
            product_id=product_id,
            quantity=quantity,
            expires_at=now + timedelta(minutes=hold_minutes),
            confirmed=False,
            created_at=now,
        )

    def confirm(self):
        self.confirmed = True

    def is_expired(self, as_of):
        """True once an unconfirmed hold is strictly past its expiry."""
        if self.confirmed:
            return False
        return _naive_utc(self.expires_at) < _naive_utc(as_of)


@checkout.repository(part_of=StockReservation)
class StockReservationRepository:
    def _collect(self, *criteria, **filters):
        query = self._dao.query.filter(*criteria, **filters).order_by("id")
        found = []
        offset = 0
        while True:
            page = query.offset(offset).limit(_PAGE_SIZE).all()
            if not page.items:
                break
            found.extend(page.items)
            if not page.has_next:
                break
            offset += _PAGE_SIZE
        return found

    def expired_unconfirmed(self, as_of):
        """Every unconfirmed reservation whose expiry is strictly before ``as_of``."""
        return self._collect(_lapsed_before(as_of))

    def release_expired(self, as_of):
        """Delete every unconfirmed reservation lapsed at ``as_of`` and return how many went.

        The predicate is evaluated by the store inside the current unit of
        work, so holds confirmed or already released by a concurrent sweep
        are left alone.
        """
        return self._dao._delete_all(_lapsed_before(as_of))

    def for_order(self, order_number):
        return self._collect(order_number=order_number)

    def remove(self, reservation):
        self._dao.delete(reservation)

"""Checkout bounded context — Orders and Stock Reservations.

Order placement holds inventory through time-boxed stock reservations.
Payment confirms them; customer cancellation or the periodic expiry sweep
releases them and cancels orders that were never paid.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

checkout = Domain(name="checkout")

logger = structlog.get_logger(__name__)

"""Storefront bounded context — Shopping Cart and Wishlist.

Both collections live on the shopper's side: they are held in memory by a
session container and mirrored to client storage after every change. The
cart derives pricing, shipping eligibility and BOX lot validity on demand.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)

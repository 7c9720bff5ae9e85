"""Cart session — the write-through state container the UI layer owns.

A session loads the shopper's cart from client storage once, exposes the
cart operations as its only mutation surface, and writes the cart back
after every mutating call. Queries never touch storage.

Stored envelope (key ``cart-storage``)::

    {"state": {"items": [...]}, "version": 1}

Version 0 envelopes predate product types; their items are read as SINGLE.
"""

import structlog

from shared.rules import ProductType, ShippingInfo, coerce_int
from storefront.cart.cart import ShoppingCart
from storefront.storage import get_storage
from storefront.storage.port import ClientStorage

logger = structlog.get_logger(__name__)

CART_STORAGE_KEY = "cart-storage"
CART_STORAGE_VERSION = 1


def migrate_cart_state(state: dict, version: int) -> dict:
    """Upgrade a stored cart state to the current envelope version."""
    if version == 0:
        state = {
            **state,
            "items": [
                {**item, "product_type": item.get("product_type") or ProductType.SINGLE.value}
                for item in state.get("items") or []
                if isinstance(item, dict)
            ],
        }
    return state


class CartSession:
    def __init__(self, storage: ClientStorage | None = None) -> None:
        self.storage = storage or get_storage()
        self.cart = self._load()

    def _load(self) -> ShoppingCart:
        try:
            envelope = self.storage.load(CART_STORAGE_KEY)
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable cart state, starting empty", error=str(exc))
            return ShoppingCart.create()

        if not isinstance(envelope, dict):
            return ShoppingCart.create()

        state = envelope.get("state")
        if not isinstance(state, dict):
            state = {}
        state = migrate_cart_state(state, coerce_int(envelope.get("version"), default=0))
        return ShoppingCart.from_snapshot(state)

    def _persist(self) -> None:
        self.storage.save(
            CART_STORAGE_KEY,
            {"state": self.cart.to_snapshot(), "version": CART_STORAGE_VERSION},
        )

    # -------------------------------------------------------------------
    # Mutations (write-through)
    # -------------------------------------------------------------------
    def add_item(self, product_id, name, price, stock, quantity=1, **attributes) -> None:
        self.cart.add_item(product_id, name, price, stock, quantity=quantity, **attributes)
        self._persist()

    def remove_item(self, product_id) -> None:
        self.cart.remove_item(product_id)
        self._persist()

    def update_quantity(self, product_id, quantity) -> None:
        self.cart.update_quantity(product_id, quantity)
        self._persist()

    def clear(self) -> None:
        self.cart.clear()
        self._persist()

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def items(self):
        return list(self.cart.items)

    def total_items(self) -> int:
        return self.cart.total_items

    def total_price(self) -> int:
        return self.cart.total_price

    def customs_fee(self) -> int:
        return self.cart.customs_fee

    def box_count(self) -> int:
        return self.cart.box_count

    def total_price_by_type(self, product_type) -> int:
        return self.cart.total_price_by_type(product_type)

    def shipping_info(self) -> ShippingInfo:
        return self.cart.shipping_info

    def has_box_items(self) -> bool:
        return self.cart.has_box_items

    def is_box_order_valid(self) -> bool:
        return self.cart.is_box_order_valid

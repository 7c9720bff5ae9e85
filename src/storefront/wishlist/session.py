"""Wishlist session — write-through container for the shopper's wishlist.

Stored under ``wishlist-storage`` as ``{"state": {"items": [...]}, "version": 0}``.
"""

import structlog

from storefront.storage import get_storage
from storefront.storage.port import ClientStorage
from storefront.wishlist.wishlist import Wishlist

logger = structlog.get_logger(__name__)

WISHLIST_STORAGE_KEY = "wishlist-storage"
WISHLIST_STORAGE_VERSION = 0


class WishlistSession:
    def __init__(self, storage: ClientStorage | None = None) -> None:
        self.storage = storage or get_storage()
        self.wishlist = self._load()

    def _load(self) -> Wishlist:
        try:
            envelope = self.storage.load(WISHLIST_STORAGE_KEY)
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable wishlist state, starting empty", error=str(exc))
            return Wishlist.create()

        if not isinstance(envelope, dict):
            return Wishlist.create()
        state = envelope.get("state")
        return Wishlist.from_snapshot(state if isinstance(state, dict) else None)

    def _persist(self) -> None:
        self.storage.save(
            WISHLIST_STORAGE_KEY,
            {"state": self.wishlist.to_snapshot(), "version": WISHLIST_STORAGE_VERSION},
        )

    def add_item(self, product_id, **attributes) -> None:
        self.wishlist.add_item(product_id, **attributes)
        self._persist()

    def remove_item(self, product_id) -> None:
        self.wishlist.remove_item(product_id)
        self._persist()

    def clear_wishlist(self) -> None:
        self.wishlist.clear()
        self._persist()

    @property
    def items(self):
        return list(self.wishlist.items)

    def is_in_wishlist(self, product_id) -> bool:
        return self.wishlist.is_in_wishlist(product_id)

    def total_items(self) -> int:
        return self.wishlist.total_items

"""Wishlist aggregate — a set of saved products, keyed by product id.

Same item shape as the cart minus quantity. Adding a product that is
already saved is a no-op.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from shared.rules import ProductType, coerce_int, coerce_text, effective_type
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.entity(part_of="Wishlist")
class WishlistItem:
    product_id = Identifier(required=True)
    name = Text()
    image = Text()
    price = Integer(required=True, min_value=0)
    stock = Integer(default=0, min_value=0)
    product_type = String(choices=ProductType, default=ProductType.SINGLE.value)
    category = Text()
    rarity = Text()
    condition = Text()


@storefront.aggregate
class Wishlist:
    items = HasMany(WishlistItem)
    updated_at = DateTime()

    @classmethod
    def create(cls):
        return cls(updated_at=datetime.now(UTC))

    @classmethod
    def from_snapshot(cls, state):
        wishlist = cls.create()
        for raw in (state or {}).get("items") or []:
            if not isinstance(raw, dict) or not raw.get("product_id"):
                continue
            try:
                wishlist.add_item(**{key: raw.get(key) for key in _SNAPSHOT_FIELDS})
            except ValidationError as exc:
                logger.warning(
                    "Dropping unreadable wishlist item", product_id=str(raw["product_id"]), error=exc.messages
                )
        return wishlist

    def to_snapshot(self):
        return {"items": [{key: getattr(item, key) for key in _SNAPSHOT_FIELDS} for item in self.items]}

    def _find(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def add_item(
        self,
        product_id,
        name=None,
        price=0,
        stock=0,
        image=None,
        product_type=None,
        category=None,
        rarity=None,
        condition=None,
    ):
        if self._find(product_id) is not None:
            return

        self.add_items(
            WishlistItem(
                product_id=str(product_id),
                name=coerce_text(name) or "",
                image=coerce_text(image),
                price=max(coerce_int(price), 0),
                stock=max(coerce_int(stock), 0),
                product_type=effective_type(product_type).value,
                category=coerce_text(category),
                rarity=coerce_text(rarity),
                condition=coerce_text(condition),
            )
        )
        self.updated_at = datetime.now(UTC)

    def remove_item(self, product_id):
        item = self._find(product_id)
        if item is None:
            return
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

    def is_in_wishlist(self, product_id):
        return self._find(product_id) is not None

    def clear(self):
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

    @property
    def total_items(self):
        return len(self.items)


_SNAPSHOT_FIELDS = (
    "product_id",
    "name",
    "image",
    "price",
    "stock",
    "product_type",
    "category",
    "rarity",
    "condition",
)

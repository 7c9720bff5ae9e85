"""Shopping Cart aggregate — the shopper's selected items and the facts derived from them.

The cart is held client-side (see ``storefront.cart.session``) and never
written to a database repository. Every mutation normalises its input
instead of rejecting it, so the UI can call any operation without guard
checks and the cart can never hold a negative or over-stock quantity:

    1 <= quantity <= stock   for every item, at all times
    at most one item per product_id

Prices are snapshots taken when the item is first added; later catalogue
price changes do not reach items already in the cart.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from shared import rules
from shared.rules import ProductType, ShippingInfo, clamp, coerce_int, coerce_text, effective_type
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    name = Text()
    image = Text()
    price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    stock = Integer(required=True, min_value=1)
    product_type = String(choices=ProductType, default=ProductType.SINGLE.value)
    category = Text()
    rarity = Text()
    condition = Text()

    @property
    def line_total(self):
        return self.price * self.quantity


@storefront.aggregate
class ShoppingCart:
    items = HasMany(CartItem)
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls):
        return cls(updated_at=datetime.now(UTC))

    @classmethod
    def from_snapshot(cls, state):
        """Rebuild a cart from its stored snapshot.

        Items are replayed through ``add_item`` so a tampered or stale
        snapshot is clamped back into a valid cart. Items that still cannot
        be rebuilt are dropped.
        """
        cart = cls.create()
        for raw in (state or {}).get("items") or []:
            if not isinstance(raw, dict) or not raw.get("product_id"):
                continue
            try:
                cart.add_item(
                    product_id=raw["product_id"],
                    name=raw.get("name"),
                    price=raw.get("price"),
                    stock=raw.get("stock"),
                    quantity=raw.get("quantity", 1),
                    image=raw.get("image"),
                    product_type=raw.get("product_type"),
                    category=raw.get("category"),
                    rarity=raw.get("rarity"),
                    condition=raw.get("condition"),
                )
            except ValidationError as exc:
                logger.warning("Dropping unreadable cart item", product_id=str(raw["product_id"]), error=exc.messages)
        return cart

    def to_snapshot(self):
        return {
            "items": [
                {
                    "product_id": str(item.product_id),
                    "name": item.name,
                    "image": item.image,
                    "price": item.price,
                    "quantity": item.quantity,
                    "stock": item.stock,
                    "product_type": item.product_type,
                    "category": item.category,
                    "rarity": item.rarity,
                    "condition": item.condition,
                }
                for item in self.items
            ]
        }

    def _find(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(
        self,
        product_id,
        name,
        price,
        stock,
        quantity=1,
        image=None,
        product_type=None,
        category=None,
        rarity=None,
        condition=None,
    ):
        """Add a product, or top up the quantity of one already in the cart.

        The requested quantity is clamped to ``[1, stock]``. When the product
        is already present, the stock ceiling stored on the existing item
        wins over the one passed in.
        """
        offered_stock = coerce_int(stock)
        existing = self._find(product_id)

        if existing is None and offered_stock < 1:
            logger.debug("Ignoring out-of-stock product", product_id=str(product_id), stock=offered_stock)
            return

        ceiling = existing.stock if existing else offered_stock
        qty = clamp(coerce_int(quantity, default=1), 1, ceiling)

        if existing:
            existing.quantity = min(existing.quantity + qty, existing.stock)
        else:
            self.add_items(
                CartItem(
                    product_id=str(product_id),
                    name=coerce_text(name) or "",
                    image=coerce_text(image),
                    price=max(coerce_int(price), 0),
                    quantity=qty,
                    stock=offered_stock,
                    product_type=effective_type(product_type).value,
                    category=coerce_text(category),
                    rarity=coerce_text(rarity),
                    condition=coerce_text(condition),
                )
            )

        self._touch()

    def remove_item(self, product_id):
        item = self._find(product_id)
        if item is None:
            return
        self.remove_items(item)
        self._touch()

    def update_quantity(self, product_id, quantity):
        """Set an item's quantity, clamped to ``[0, stock]``. Zero removes the item."""
        item = self._find(product_id)
        if item is None:
            return

        qty = clamp(coerce_int(quantity), 0, item.stock)
        if qty == 0:
            self.remove_items(item)
        else:
            item.quantity = qty
        self._touch()

    def clear(self):
        for item in list(self.items):
            self.remove_items(item)
        self._touch()

    # -------------------------------------------------------------------
    # Derived facts
    # -------------------------------------------------------------------
    def _totals(self):
        return rules.totals_by_type((item.product_type, item.price, item.quantity) for item in self.items)

    @property
    def total_items(self):
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self):
        return sum(item.line_total for item in self.items)

    @property
    def customs_fee(self):
        return rules.customs_fee(self.total_price)

    @property
    def box_count(self):
        return sum(item.quantity for item in self.items if effective_type(item.product_type) == ProductType.BOX)

    def total_price_by_type(self, product_type):
        return self._totals()[effective_type(product_type)]

    @property
    def shipping_info(self) -> ShippingInfo:
        totals = self._totals()
        return rules.shipping_for(
            single_total=totals[ProductType.SINGLE],
            box_total=totals[ProductType.BOX],
            other_total=totals[ProductType.OTHER],
        )

    @property
    def has_box_items(self):
        return any(effective_type(item.product_type) == ProductType.BOX for item in self.items)

    @property
    def is_box_order_valid(self):
        return rules.is_box_order_valid(self.box_count)

    @property
    def box_units_needed(self):
        return rules.box_units_needed(self.box_count)

    @property
    def grand_total(self):
        return self.total_price + self.customs_fee + self.shipping_info.shipping

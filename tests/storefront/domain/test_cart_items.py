"""Tests for cart item management: insert, merge, clamping and removal."""

from storefront.cart.cart import ShoppingCart


def _add(cart, product_id="card-001", price=1000, stock=5, quantity=1, **attributes):
    cart.add_item(product_id, f"Card {product_id}", price, stock, quantity=quantity, **attributes)


def _item(cart, product_id="card-001"):
    return next(i for i in cart.items if str(i.product_id) == product_id)


class TestAddItem:
    def test_add_new_item(self):
        cart = ShoppingCart.create()
        _add(cart, quantity=2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2
        assert cart.items[0].name == "Card card-001"

    def test_quantity_defaults_to_one(self):
        cart = ShoppingCart.create()
        cart.add_item("card-001", "Pikachu", 500, 3)
        assert cart.items[0].quantity == 1

    def test_new_item_quantity_clamped_to_stock(self):
        cart = ShoppingCart.create()
        _add(cart, stock=3, quantity=10)
        assert cart.items[0].quantity == 3

    def test_zero_quantity_raised_to_one(self):
        cart = ShoppingCart.create()
        _add(cart, quantity=0)
        assert cart.items[0].quantity == 1

    def test_negative_quantity_raised_to_one(self):
        cart = ShoppingCart.create()
        _add(cart, quantity=-4)
        assert cart.items[0].quantity == 1

    def test_non_numeric_quantity_treated_as_one(self):
        cart = ShoppingCart.create()
        _add(cart, quantity="lots")
        assert cart.items[0].quantity == 1

    def test_fractional_quantity_truncated(self):
        cart = ShoppingCart.create()
        _add(cart, quantity=2.7)
        assert cart.items[0].quantity == 2

    def test_out_of_stock_product_is_ignored(self):
        cart = ShoppingCart.create()
        _add(cart, stock=0)
        assert cart.items == []

    def test_product_type_defaults_to_single(self):
        cart = ShoppingCart.create()
        _add(cart)
        assert cart.items[0].product_type == "SINGLE"

    def test_unknown_product_type_read_as_single(self):
        cart = ShoppingCart.create()
        _add(cart, product_type="PLUSHIE")
        assert cart.items[0].product_type == "SINGLE"

    def test_optional_attributes_are_kept(self):
        cart = ShoppingCart.create()
        _add(cart, image="/img/pika.png", category="Pokemon", rarity="SAR", condition="NM")
        item = cart.items[0]
        assert item.image == "/img/pika.png"
        assert item.category == "Pokemon"
        assert item.rarity == "SAR"
        assert item.condition == "NM"

    def test_non_text_attributes_are_dropped(self):
        cart = ShoppingCart.create()
        _add(cart, image={"url": "/img/pika.png"}, category=["Pokemon"], rarity=True, condition=object())
        item = cart.items[0]
        assert item.image is None
        assert item.category is None
        assert item.rarity is None
        assert item.condition is None

    def test_numeric_name_is_kept_as_text(self):
        cart = ShoppingCart.create()
        cart.add_item("card-151", 151, 500, 3)
        assert cart.items[0].name == "151"

    def test_unusable_name_becomes_empty(self):
        cart = ShoppingCart.create()
        cart.add_item("card-001", {"ja": "ピカチュウ"}, 500, 3)
        assert cart.items[0].name == ""


class TestMergeExistingItem:
    def test_merge_adds_quantities(self):
        cart = ShoppingCart.create()
        _add(cart, stock=5, quantity=2)
        _add(cart, stock=5, quantity=2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 4

    def test_merge_capped_at_stock(self):
        cart = ShoppingCart.create()
        _add(cart, stock=5, quantity=4)
        _add(cart, stock=5, quantity=3)
        assert cart.items[0].quantity == 5

    def test_existing_stock_is_authoritative(self):
        cart = ShoppingCart.create()
        _add(cart, stock=3, quantity=2)
        _add(cart, stock=10, quantity=5)
        item = cart.items[0]
        assert item.stock == 3
        assert item.quantity == 3

    def test_price_snapshot_survives_merge(self):
        cart = ShoppingCart.create()
        _add(cart, price=1000, stock=5)
        _add(cart, price=1500, stock=5)
        assert cart.items[0].price == 1000
        assert cart.total_price == 2000

    def test_merge_when_new_offer_is_out_of_stock(self):
        cart = ShoppingCart.create()
        _add(cart, stock=4, quantity=1)
        _add(cart, stock=0, quantity=1)
        assert cart.items[0].quantity == 2

    def test_distinct_products_are_separate_lines(self):
        cart = ShoppingCart.create()
        _add(cart, product_id="card-001")
        _add(cart, product_id="card-002")
        assert len(cart.items) == 2


class TestRemoveItem:
    def test_remove_item(self):
        cart = ShoppingCart.create()
        _add(cart, product_id="card-001")
        _add(cart, product_id="card-002")
        cart.remove_item("card-001")
        assert [str(i.product_id) for i in cart.items] == ["card-002"]

    def test_remove_unknown_item_is_noop(self):
        cart = ShoppingCart.create()
        _add(cart)
        cart.remove_item("card-999")
        assert len(cart.items) == 1


class TestUpdateQuantity:
    def test_update_quantity(self):
        cart = ShoppingCart.create()
        _add(cart, stock=5)
        cart.update_quantity("card-001", 4)
        assert _item(cart).quantity == 4

    def test_update_clamped_to_stock(self):
        cart = ShoppingCart.create()
        _add(cart, stock=5)
        cart.update_quantity("card-001", 50)
        assert _item(cart).quantity == 5

    def test_update_to_zero_removes_item(self):
        cart = ShoppingCart.create()
        _add(cart)
        cart.update_quantity("card-001", 0)
        assert cart.items == []

    def test_negative_update_removes_item(self):
        cart = ShoppingCart.create()
        _add(cart)
        cart.update_quantity("card-001", -3)
        assert cart.items == []

    def test_update_unknown_item_is_noop(self):
        cart = ShoppingCart.create()
        _add(cart)
        cart.update_quantity("card-999", 3)
        assert _item(cart).quantity == 1


class TestClear:
    def test_clear_empties_cart(self):
        cart = ShoppingCart.create()
        _add(cart, product_id="card-001")
        _add(cart, product_id="card-002")
        cart.clear()
        assert cart.items == []
        assert cart.total_items == 0


class TestSnapshot:
    def test_round_trip_keeps_lines(self):
        cart = ShoppingCart.create()
        _add(cart, product_id="card-001", quantity=2, product_type="SINGLE")
        _add(cart, product_id="box-001", price=6000, stock=10, quantity=5, product_type="BOX")

        restored = ShoppingCart.from_snapshot(cart.to_snapshot())

        assert restored.to_snapshot() == cart.to_snapshot()

    def test_tampered_snapshot_is_clamped(self):
        state = {"items": [{"product_id": "card-001", "name": "X", "price": 100, "stock": 2, "quantity": 9}]}
        cart = ShoppingCart.from_snapshot(state)
        assert cart.items[0].quantity == 2

    def test_malformed_entries_are_skipped(self):
        state = {"items": ["junk", {"name": "no id"}, {"product_id": "card-001", "price": 100, "stock": 1}]}
        cart = ShoppingCart.from_snapshot(state)
        assert len(cart.items) == 1

    def test_empty_snapshot(self):
        assert ShoppingCart.from_snapshot(None).items == []

    def test_snapshot_with_non_text_attributes_still_loads(self):
        state = {"items": [{"product_id": "card-001", "price": 100, "stock": 2, "image": ["a.png"], "name": None}]}
        cart = ShoppingCart.from_snapshot(state)
        assert cart.items[0].image is None
        assert cart.items[0].name == ""

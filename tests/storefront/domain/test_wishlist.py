"""Tests for the Wishlist aggregate."""

from storefront.wishlist.wishlist import Wishlist


class TestWishlist:
    def test_add_item(self):
        wishlist = Wishlist.create()
        wishlist.add_item("card-001", name="Mew", price=4000, stock=2)
        assert wishlist.total_items == 1
        assert wishlist.is_in_wishlist("card-001")

    def test_adding_twice_is_noop(self):
        wishlist = Wishlist.create()
        wishlist.add_item("card-001", name="Mew", price=4000)
        wishlist.add_item("card-001", name="Mew (reprint)", price=100)
        assert wishlist.total_items == 1
        assert wishlist.items[0].price == 4000

    def test_out_of_stock_products_can_be_saved(self):
        wishlist = Wishlist.create()
        wishlist.add_item("card-001", name="Mew", price=4000, stock=0)
        assert wishlist.is_in_wishlist("card-001")

    def test_remove_item(self):
        wishlist = Wishlist.create()
        wishlist.add_item("card-001", price=100)
        wishlist.remove_item("card-001")
        assert wishlist.is_in_wishlist("card-001") is False

    def test_remove_unknown_is_noop(self):
        wishlist = Wishlist.create()
        wishlist.add_item("card-001", price=100)
        wishlist.remove_item("card-404")
        assert wishlist.total_items == 1

    def test_clear(self):
        wishlist = Wishlist.create()
        wishlist.add_item("card-001", price=100)
        wishlist.add_item("card-002", price=100)
        wishlist.clear()
        assert wishlist.total_items == 0

    def test_snapshot_round_trip(self):
        wishlist = Wishlist.create()
        wishlist.add_item("card-001", name="Mew", price=4000, product_type="SINGLE", rarity="PR")
        restored = Wishlist.from_snapshot(wishlist.to_snapshot())
        assert restored.is_in_wishlist("card-001")
        assert restored.items[0].rarity == "PR"

    def test_non_text_attributes_are_dropped(self):
        wishlist = Wishlist.create()
        wishlist.add_item("card-001", name=["Mew"], price=4000, image={"url": "/img/mew.png"}, rarity=3)
        item = wishlist.items[0]
        assert item.name == ""
        assert item.image is None
        assert item.rarity == "3"

    def test_snapshot_with_non_text_attributes_still_loads(self):
        state = {"items": [{"product_id": "card-001", "price": 100, "image": ["a.png"], "category": {"tcg": 1}}]}
        wishlist = Wishlist.from_snapshot(state)
        assert wishlist.is_in_wishlist("card-001")
        assert wishlist.items[0].category is None

"""BDD tests for cart fulfilment rules."""

from pytest_bdd import given, parsers, scenarios, then, when
from storefront.cart.cart import ShoppingCart

scenarios("features/cart_rules.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def _():
    return ShoppingCart.create()


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the shopper adds {quantity:d} of "{product_id}" priced {price:d} with {stock:d} in stock'))
def _(cart, quantity, product_id, price, stock):
    cart.add_item(product_id, product_id, price, stock, quantity=quantity, product_type="SINGLE")


@when(parsers.cfparse('the shopper adds {quantity:d} BOX of "{product_id}" priced {price:d} with {stock:d} in stock'))
def _(cart, quantity, product_id, price, stock):
    cart.add_item(product_id, product_id, price, stock, quantity=quantity, product_type="BOX")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cart holds {quantity:d} of "{product_id}"'))
def _(cart, quantity, product_id):
    item = next(i for i in cart.items if str(i.product_id) == product_id)
    assert item.quantity == quantity


@then(parsers.cfparse("shipping costs {amount:d}"))
def _(cart, amount):
    assert cart.shipping_info.shipping == amount


@then("shipping is free")
def _(cart):
    assert cart.shipping_info.is_free_shipping is True


@then("shipping is not free")
def _(cart):
    assert cart.shipping_info.is_free_shipping is False


@then(parsers.cfparse("the box order is invalid with {needed:d} more needed"))
def _(cart, needed):
    assert cart.is_box_order_valid is False
    assert cart.box_units_needed == needed


@then("the box order is valid")
def _(cart):
    assert cart.is_box_order_valid is True

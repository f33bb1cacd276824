"""BDD tests for cart pricing and checkout."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.cart.cart import Cart
from storefront.cart.checkout import CheckoutCart
from storefront.cart.items import AddToCart
from storefront.cart.management import CreateCart, SetShippingAddress

scenarios("features/cart_checkout.feature")


def _cart(cart_id) -> Cart:
    return current_domain.repository_for(Cart).get(cart_id)


@given("an empty cart", target_fixture="cart_id")
def empty_cart():
    return current_domain.process(CreateCart(session_id="sess-bdd-001"), asynchronous=False)


@when(parsers.cfparse('{quantity:d} of "{name}" are added to the cart'))
def add_to_cart(products, cart_id, quantity, name):
    current_domain.process(AddToCart(cart_id=cart_id, product_id=products[name], quantity=quantity), asynchronous=False)


@when("the cart is checked out")
def check_out(cart_id, outcome, shipping_address):
    current_domain.process(SetShippingAddress(cart_id=cart_id, **shipping_address), asynchronous=False)
    outcome["order_id"] = current_domain.process(
        CheckoutCart(cart_id=cart_id, customer_id="cust-bdd-001"),
        asynchronous=False,
    )


@then(
    parsers.cfparse(
        "the cart totals are {items:f} items, {shipping:f} shipping, {tax:f} tax and {total:f} total"
    )
)
def cart_totals(cart_id, items, shipping, tax, total):
    pricing = _cart(cart_id).pricing
    assert pricing.items_price == pytest.approx(items)
    assert pricing.shipping_price == pytest.approx(shipping)
    assert pricing.tax_price == pytest.approx(tax)
    assert pricing.total_price == pytest.approx(total)


@then(parsers.cfparse('the cart holds {quantity:d} of "{name}"'))
def cart_holds(products, cart_id, quantity, name):
    line = next(i for i in _cart(cart_id).items if str(i.product_id) == products[name])
    assert line.quantity == quantity


@then("the cart is empty")
def cart_is_empty(cart_id):
    cart = _cart(cart_id)
    assert cart.items == []
    assert cart.pricing.total_price == 0.0

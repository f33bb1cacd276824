"""Shared BDD fixtures and step definitions for the storefront."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.errors import StorefrontError
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.product.management import CreateProduct
from storefront.product.product import Product


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def outcome():
    """What the last When step produced: an order id or a refusal."""
    return {"order_id": None, "exc": None}


@pytest.fixture()
def policy():
    return {"shortfall": None}


@pytest.fixture()
def place_lines(outcome, policy, shipping_address):
    """Place an order for the given lines, capturing a refusal instead of raising."""

    def _place(lines):
        command = PlaceOrder(
            customer_id="cust-bdd-001",
            items=json.dumps(lines),
            shipping_address=json.dumps(shipping_address),
            payment_method="PayPal",
            shortfall_policy=policy["shortfall"],
        )
        try:
            outcome["order_id"] = current_domain.process(command, asynchronous=False)
        except (ValidationError, StorefrontError) as exc:
            outcome["exc"] = exc

    return _place


@pytest.fixture()
def order_of(outcome):
    def _load() -> Order:
        return current_domain.repository_for(Order).get(outcome["order_id"])

    return _load


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_catalogue(products, name, price, stock):
    products[name] = current_domain.process(
        CreateProduct(
            name=name,
            image=f"/images/{name.lower().replace(' ', '-')}.jpg",
            description=f"{name} for testing",
            brand="Acme",
            category="Other",
            price=price,
            count_in_stock=stock,
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('the shortfall policy is "{value}"'))
def shortfall_policy_is(policy, value):
    policy["shortfall"] = value


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order is placed")
def order_is_placed(outcome):
    assert outcome["exc"] is None
    assert outcome["order_id"] is not None


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock_is(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).count_in_stock == stock


@then(parsers.cfparse("the order total is {total:f}"))
def order_total_is(order_of, total):
    assert order_of().pricing.total_price == pytest.approx(total)


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_of, status):
    assert order_of().status == status

import json

import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    bed = DomainFixture(storefront)
    bed.setup()
    setup_db(storefront)
    yield bed
    drop_db(storefront)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def shipping_address():
    return {
        "address": "12 Market Street",
        "city": "Springfield",
        "postal_code": "12345",
        "country": "US",
    }


@pytest.fixture()
def make_product():
    """Create a product through the admin command and return its id."""
    from storefront.product.management import CreateProduct

    def _make(**overrides):
        values = {
            "name": "Wireless Headphones",
            "image": "/images/headphones.jpg",
            "description": "Over-ear, noise cancelling",
            "brand": "Sonic",
            "category": "Electronics",
            "price": 25.0,
            "count_in_stock": 10,
        }
        values.update(overrides)
        return current_domain.process(CreateProduct(**values), asynchronous=False)

    return _make


@pytest.fixture()
def place(shipping_address):
    """Place an order through the PlaceOrder command and return its id."""
    from storefront.order.placement import PlaceOrder

    def _place(lines, customer_id="cust-001", **overrides):
        values = {
            "customer_id": customer_id,
            "items": json.dumps(lines),
            "shipping_address": json.dumps(shipping_address),
            "payment_method": "PayPal",
        }
        values.update(overrides)
        return current_domain.process(PlaceOrder(**values), asynchronous=False)

    return _place

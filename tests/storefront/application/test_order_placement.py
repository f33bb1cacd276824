"""Application tests for order placement via domain.process()."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.errors import InsufficientStock, ProductNotFound
from storefront.order.order import Order, OrderStatus
from storefront.order.placement import PlaceOrder, ShortfallPolicy, shortfall_policy
from storefront.product.management import UpdateProduct
from storefront.product.product import Product
from storefront.reading import fetch_all


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).count_in_stock


class TestPlaceOrder:
    def test_placement_returns_order_id(self, make_product, place):
        product_id = make_product()
        order_id = place([{"product_id": product_id, "quantity": 1}])

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert order.customer_id == "cust-001"

    def test_stock_is_withdrawn(self, make_product, place):
        product_id = make_product(count_in_stock=10)
        place([{"product_id": product_id, "quantity": 3}])

        assert _stock(product_id) == 7

    def test_catalogue_price_wins_over_client_price(self, make_product, place):
        product_id = make_product(price=25.0)
        order_id = place([{"product_id": product_id, "quantity": 3}], items_price=1.0, total_price=1.0)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].unit_price == 25.0
        assert order.items[0].name == "Wireless Headphones"
        assert order.pricing.items_price == 75.0
        assert order.pricing.total_price == 92.49

    def test_later_price_change_does_not_touch_order(self, make_product, place):
        product_id = make_product(price=25.0)
        order_id = place([{"product_id": product_id, "quantity": 1}])

        current_domain.process(UpdateProduct(product_id=product_id, price=99.0), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].unit_price == 25.0

    def test_empty_items_is_rejected_and_creates_nothing(self, place):
        with pytest.raises(ValidationError):
            place([])

        assert fetch_all(Order) == []

    def test_zero_quantity_is_rejected(self, make_product, place):
        product_id = make_product()

        with pytest.raises(ValidationError):
            place([{"product_id": product_id, "quantity": 0}])

    def test_missing_address_field_is_rejected(self, make_product):
        product_id = make_product()
        command = PlaceOrder(
            customer_id="cust-001",
            items=json.dumps([{"product_id": product_id, "quantity": 1}]),
            shipping_address=json.dumps({"address": "1 Main St", "city": "Town", "postal_code": "", "country": "US"}),
            payment_method="PayPal",
        )

        with pytest.raises(ValidationError):
            current_domain.process(command, asynchronous=False)

    @pytest.mark.parametrize("items", [json.dumps(["prod-001"]), json.dumps({"product_id": "prod-001"}), "not json"])
    def test_malformed_items_are_rejected(self, items):
        command = PlaceOrder(
            customer_id="cust-001",
            items=items,
            shipping_address=json.dumps({"address": "1 Main St", "city": "Town", "postal_code": "1", "country": "US"}),
            payment_method="PayPal",
        )

        with pytest.raises(ValidationError):
            current_domain.process(command, asynchronous=False)

    def test_address_that_is_not_an_object_is_rejected(self, make_product, place):
        product_id = make_product()

        with pytest.raises(ValidationError) as exc:
            place([{"product_id": product_id, "quantity": 1}], shipping_address=json.dumps("1 Main St, Town"))

        assert "shipping_address" in exc.value.messages

    def test_unknown_product_is_not_found(self, place):
        with pytest.raises(ProductNotFound):
            place([{"product_id": "prod-404", "quantity": 1}])

    def test_over_stock_fails_and_withdraws_nothing(self, make_product, place):
        plenty = make_product(name="Cable", count_in_stock=10)
        scarce = make_product(name="Dock", count_in_stock=2)

        with pytest.raises(InsufficientStock) as exc:
            place([{"product_id": plenty, "quantity": 1}, {"product_id": scarce, "quantity": 3}])

        assert exc.value.requested == 3
        assert exc.value.available == 2
        assert _stock(plenty) == 10
        assert _stock(scarce) == 2
        assert fetch_all(Order) == []


class TestShortfalls:
    def test_repeated_lines_flag_the_shortfall(self, make_product, place):
        product_id = make_product(count_in_stock=5)
        order_id = place([{"product_id": product_id, "quantity": 3}, {"product_id": product_id, "quantity": 3}])

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert order.shortfalls == [{"product_id": product_id, "requested": 3, "available": 2}]
        assert _stock(product_id) == 2

    def test_cancel_policy_cancels_and_restocks(self, make_product, place):
        product_id = make_product(count_in_stock=5)
        order_id = place(
            [{"product_id": product_id, "quantity": 3}, {"product_id": product_id, "quantity": 3}],
            shortfall_policy="cancel",
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert len(order.shortfalls) == 1
        assert _stock(product_id) == 5

    def test_policy_from_environment(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_SHORTFALL_POLICY", "cancel")

        assert shortfall_policy() == ShortfallPolicy.CANCEL
        assert shortfall_policy("flag") == ShortfallPolicy.FLAG

    def test_default_policy_is_flag(self, monkeypatch):
        monkeypatch.delenv("STOREFRONT_SHORTFALL_POLICY", raising=False)

        assert shortfall_policy() == ShortfallPolicy.FLAG

    def test_unknown_policy_is_rejected(self, make_product, place):
        product_id = make_product()

        with pytest.raises(ValidationError):
            place([{"product_id": product_id, "quantity": 1}], shortfall_policy="ignore")

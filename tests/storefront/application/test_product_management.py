"""Application tests for admin product commands."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.errors import ProductNotFound
from storefront.order.order import Order
from storefront.product.management import DeleteProduct, UpdateProduct, load_product
from storefront.product.product import Product


class TestCreateProduct:
    def test_product_is_persisted(self, make_product):
        product_id = make_product(name="Kettle", price=30.0, count_in_stock=4)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Kettle"
        assert product.price == 30.0
        assert product.count_in_stock == 4

    def test_negative_stock_is_rejected(self, make_product):
        with pytest.raises(ValidationError):
            make_product(count_in_stock=-1)

    def test_text_with_ampersands_is_kept_verbatim(self, make_product):
        product_id = make_product(
            name="Salt & Pepper Mill",
            brand="Cook & Co",
            description="Grinds salt & pepper <coarse or fine>",
            category="Home & Garden",
        )

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Salt & Pepper Mill"
        assert product.brand == "Cook & Co"
        assert product.description == "Grinds salt & pepper <coarse or fine>"
        assert product.category == "Home & Garden"

    def test_order_snapshot_keeps_the_product_name(self, make_product, place):
        product_id = make_product(name="Salt & Pepper Mill", category="Home & Garden")

        order_id = place([{"product_id": product_id, "quantity": 1}])

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].name == "Salt & Pepper Mill"


class TestUpdateProduct:
    def test_partial_update(self, make_product):
        product_id = make_product(price=30.0, count_in_stock=4)

        current_domain.process(UpdateProduct(product_id=product_id, count_in_stock=12), asynchronous=False)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.count_in_stock == 12
        assert product.price == 30.0

    def test_unknown_product_is_not_found(self):
        with pytest.raises(ProductNotFound):
            current_domain.process(UpdateProduct(product_id="prod-404", price=1.0), asynchronous=False)


class TestDeleteProduct:
    def test_product_is_removed(self, make_product):
        product_id = make_product()

        result = current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)

        assert result == product_id
        with pytest.raises(ProductNotFound):
            load_product(product_id)

    def test_unknown_product_is_not_found(self):
        with pytest.raises(ProductNotFound):
            current_domain.process(DeleteProduct(product_id="prod-404"), asynchronous=False)

    def test_placed_orders_keep_their_snapshot(self, make_product, place):
        product_id = make_product(name="Kettle", price=30.0)
        order_id = place([{"product_id": product_id, "quantity": 2}])

        current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].name == "Kettle"
        assert order.items[0].unit_price == 30.0
        assert order.items[0].quantity == 2

"""Application tests for admin reporting."""

from datetime import UTC, datetime

import pytest
from protean import current_domain
from storefront.order.lifecycle import ConfirmDelivery, ConfirmPayment
from storefront.order.order import Order
from storefront.reporting.order_stats import list_orders, order_stats, orders_for_customer


@pytest.fixture()
def orders(make_product, place):
    product_id = make_product(price=25.0, count_in_stock=50)
    ids = [
        place([{"product_id": product_id, "quantity": 1}], customer_id="cust-001"),
        place([{"product_id": product_id, "quantity": 2}], customer_id="cust-001"),
        place([{"product_id": product_id, "quantity": 4}], customer_id="cust-002"),
    ]
    return ids


def _pay(order_id):
    current_domain.process(ConfirmPayment(order_id=order_id, payment_id=f"PAY-{order_id}"), asynchronous=False)


def _backdate(order_id, year, month):
    repository = current_domain.repository_for(Order)
    order = repository.get(order_id)
    order.created_at = datetime(year, month, 15, 12, 0, tzinfo=UTC)
    repository.add(order)


class TestOrderStats:
    def test_empty_store(self):
        stats = order_stats()

        assert stats["total_orders"] == 0
        assert stats["total_revenue"] == 0.0
        assert stats["revenue_by_month"] == []

    def test_revenue_counts_paid_orders_only(self, orders):
        _pay(orders[0])
        _pay(orders[2])

        stats = order_stats()

        # 25.00 + 9.99 + 2.50 and 100.00 + 9.99 + 10.00
        assert stats["total_orders"] == 3
        assert stats["total_revenue"] == 157.48
        assert stats["pending_orders"] == 1

    def test_delivered_orders_follow_the_flag(self, orders):
        current_domain.process(ConfirmDelivery(order_id=orders[1]), asynchronous=False)

        assert order_stats()["delivered_orders"] == 1

    def test_month_rollup(self, orders):
        _pay(orders[0])
        _pay(orders[1])

        now = datetime.now(UTC)
        rollup = order_stats()["revenue_by_month"]

        assert len(rollup) == 1
        assert rollup[0]["year"] == now.year
        assert rollup[0]["month"] == now.month
        assert rollup[0]["orders"] == 2
        assert rollup[0]["revenue"] == 102.48

    def test_rollup_keeps_the_six_newest_months(self, make_product, place):
        product_id = make_product(price=25.0, count_in_stock=50)
        months = [(2024, 8), (2024, 9), (2024, 10), (2024, 11), (2024, 12), (2025, 1), (2025, 2), (2025, 3)]
        for year, month in months:
            order_id = place([{"product_id": product_id, "quantity": 1}])
            _pay(order_id)
            _backdate(order_id, year, month)
        unpaid_id = place([{"product_id": product_id, "quantity": 3}])
        _backdate(unpaid_id, 2025, 3)

        rollup = order_stats()["revenue_by_month"]

        assert [(row["year"], row["month"]) for row in rollup] == [
            (2025, 3),
            (2025, 2),
            (2025, 1),
            (2024, 12),
            (2024, 11),
            (2024, 10),
        ]
        # One paid order of 25.00 + 9.99 + 2.50 per month
        assert all(row["orders"] == 1 for row in rollup)
        assert all(row["revenue"] == 37.49 for row in rollup)


class TestOrderListings:
    def test_orders_for_customer_newest_first(self, orders):
        mine = orders_for_customer("cust-001")

        assert {str(o.id) for o in mine} == {orders[0], orders[1]}
        assert [o.created_at for o in mine] == sorted((o.created_at for o in mine), reverse=True)

    def test_list_orders_pages(self, orders):
        first = list_orders(page=1, page_size=2)
        second = list_orders(page=2, page_size=2)

        assert len(first["orders"]) == 2
        assert len(second["orders"]) == 1
        assert first["pages"] == 2
        assert first["total"] == 3

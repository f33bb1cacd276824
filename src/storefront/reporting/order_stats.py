"""Admin reporting over placed orders.

Computed on read from the order store. Revenue only ever counts paid
orders; an unpaid order contributes to the order counts and nothing else.
"""

from collections import defaultdict
from decimal import Decimal

from storefront.order.order import Order, OrderStatus
from storefront.pricing import round2
from storefront.reading import fetch_all, paginate

MONTHS_REPORTED = 6
DEFAULT_ORDERS_PAGE_SIZE = 20


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


def _total(order) -> Decimal:
    return Decimal(str(order.pricing.total_price)) if order.pricing else Decimal(0)


def order_stats() -> dict:
    """Dashboard figures.

    Returns a dict with ``total_orders``, ``total_revenue``,
    ``pending_orders``, ``delivered_orders`` and ``revenue_by_month``, the
    last being at most six ``{year, month, revenue, orders}`` rows, newest
    month first, over paid orders grouped by the month they were placed.
    """
    orders = fetch_all(Order)
    paid = [o for o in orders if o.is_paid]

    months = defaultdict(lambda: {"revenue": Decimal(0), "orders": 0})
    for order in paid:
        bucket = months[(order.created_at.year, order.created_at.month)]
        bucket["revenue"] += _total(order)
        bucket["orders"] += 1

    revenue_by_month = [
        {
            "year": year,
            "month": month,
            "revenue": float(round2(bucket["revenue"])),
            "orders": bucket["orders"],
        }
        for (year, month), bucket in sorted(months.items(), reverse=True)[:MONTHS_REPORTED]
    ]

    return {
        "total_orders": len(orders),
        "total_revenue": float(round2(sum((_total(o) for o in paid), Decimal(0)))),
        "pending_orders": sum(1 for o in orders if o.status == OrderStatus.PENDING.value),
        "delivered_orders": sum(1 for o in orders if o.is_delivered),
        "revenue_by_month": revenue_by_month,
    }


def orders_for_customer(customer_id) -> list:
    """A customer's orders, newest first."""
    return _newest_first(fetch_all(Order, customer_id=str(customer_id)))


def list_orders(page=1, page_size=DEFAULT_ORDERS_PAGE_SIZE) -> dict:
    """All orders, newest first, one page at a time."""
    orders, page, pages, total = paginate(_newest_first(fetch_all(Order)), page, page_size)
    return {"orders": orders, "page": page, "pages": pages, "total": total}

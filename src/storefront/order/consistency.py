"""Derived order status: optional hardening of the status/flag coupling.

The workflow ``status`` and the ``is_paid``/``is_delivered`` flags are set by
separate operations and can contradict each other (an admin may set Delivered
without confirming delivery). Nothing here changes that behaviour; these
helpers compute the status the flags imply, and report contradictions, so
callers that want a consistent view can opt in.

Derivation, with Cancelled as an explicit override:

    cancelled                 -> Cancelled
    is_delivered              -> Delivered
    is_paid and Shipped       -> Shipped
    is_paid                   -> Processing
    otherwise                 -> Pending
"""

from storefront.order.order import Order, OrderStatus


def derived_status(is_paid, is_delivered, cancelled=False, shipped=False) -> OrderStatus:
    if cancelled:
        return OrderStatus.CANCELLED
    if is_delivered:
        return OrderStatus.DELIVERED
    if is_paid and shipped:
        return OrderStatus.SHIPPED
    if is_paid:
        return OrderStatus.PROCESSING
    return OrderStatus.PENDING


def derived_status_of(order: Order) -> OrderStatus:
    return derived_status(
        is_paid=bool(order.is_paid),
        is_delivered=bool(order.is_delivered),
        cancelled=order.status == OrderStatus.CANCELLED.value,
        shipped=order.status == OrderStatus.SHIPPED.value,
    )


def status_conflicts(order: Order) -> list[str]:
    """Describe every way the stored status disagrees with the flags."""
    conflicts = []
    if order.is_delivered and order.status != OrderStatus.DELIVERED.value:
        conflicts.append(f"Order is delivered but status is {order.status}")
    if order.status == OrderStatus.DELIVERED.value and not order.is_delivered:
        conflicts.append("Status is Delivered but delivery was never confirmed")
    if order.is_paid and order.status == OrderStatus.PENDING.value:
        conflicts.append("Order is paid but status is still Pending")
    if not order.is_paid and order.status in (OrderStatus.PROCESSING.value, OrderStatus.SHIPPED.value):
        conflicts.append(f"Status is {order.status} but the order is unpaid")
    return conflicts


def is_consistent(order: Order) -> bool:
    return not status_conflicts(order)

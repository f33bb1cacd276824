"""Order lifecycle: payment, delivery and admin status commands and handler.

Confirming delivery and setting the status are admin capabilities; the
caller's role is established before these commands are issued.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import OrderNotFound
from storefront.order.order import Order


@storefront.command(part_of="Order")
class ConfirmPayment:
    """Payment gateway callback: the order has been paid."""

    order_id = Identifier(required=True)
    payment_id = String(max_length=255, sanitize=False)
    payment_status = String(max_length=50, sanitize=False)
    update_time = String(max_length=50, sanitize=False)
    email_address = String(max_length=255, sanitize=False)


@storefront.command(part_of="Order")
class ConfirmDelivery:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class SetOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50, sanitize=False)


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound(order_id) from None


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        order = load_order(command.order_id)
        order.confirm_payment(
            payment_id=command.payment_id,
            payment_status=command.payment_status,
            update_time=command.update_time,
            email_address=command.email_address,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    @handle(ConfirmDelivery)
    def confirm_delivery(self, command):
        order = load_order(command.order_id)
        order.confirm_delivery()
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    @handle(SetOrderStatus)
    def set_order_status(self, command):
        order = load_order(command.order_id)
        order.set_status(command.status)
        current_domain.repository_for(Order).add(order)
        return str(order.id)

"""CheckoutCart: turn a cart into an order.

The order is placed through the same orchestration as ``PlaceOrder``; the
cart's own pricing is passed along as the client-side totals, which are
only compared against the authoritative prices. On success the cart is
emptied.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.cart.management import load_cart
from storefront.domain import logger, storefront
from storefront.order.placement import place_order


@storefront.command(part_of="Cart")
class CheckoutCart:
    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    shortfall_policy = String(max_length=10, sanitize=False)


@storefront.command_handler(part_of=Cart)
class CheckoutCartHandler:
    @handle(CheckoutCart)
    def checkout_cart(self, command):
        cart = load_cart(command.cart_id)
        if not cart.items:
            raise ValidationError({"items": ["No order items provided"]})

        order = place_order(
            customer_id=command.customer_id,
            lines=cart.lines,
            shipping_address=cart.address,
            payment_method=cart.payment_method,
            client_pricing=cart.pricing.to_dict(),
            policy=command.shortfall_policy,
        )

        cart.mark_checked_out(order_id=order.id, customer_id=command.customer_id)
        current_domain.repository_for(Cart).add(cart)

        logger.info("Cart checked out", cart_id=str(cart.id), order_id=str(order.id))
        return str(order.id)

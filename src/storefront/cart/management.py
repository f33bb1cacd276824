"""Cart management: creation, checkout details and clearing."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.errors import CartNotFound


@storefront.command(part_of="Cart")
class CreateCart:
    """Create a cart for a browsing session, optionally tied to a customer."""

    session_id = String(required=True, max_length=255, sanitize=False)
    customer_id = Identifier()


@storefront.command(part_of="Cart")
class SetShippingAddress:
    cart_id = Identifier(required=True)
    address = String(required=True, max_length=255, sanitize=False)
    city = String(required=True, max_length=100, sanitize=False)
    postal_code = String(required=True, max_length=20, sanitize=False)
    country = String(required=True, max_length=100, sanitize=False)


@storefront.command(part_of="Cart")
class SetPaymentMethod:
    cart_id = Identifier(required=True)
    payment_method = String(required=True, max_length=50, sanitize=False)


@storefront.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


def load_cart(cart_id) -> Cart:
    try:
        return current_domain.repository_for(Cart).get(cart_id)
    except ObjectNotFoundError:
        raise CartNotFound(cart_id) from None


@storefront.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = Cart.create(session_id=command.session_id, customer_id=command.customer_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(SetShippingAddress)
    def set_shipping_address(self, command):
        cart = load_cart(command.cart_id)
        cart.save_shipping_address(
            address=command.address,
            city=command.city,
            postal_code=command.postal_code,
            country=command.country,
        )
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(SetPaymentMethod)
    def set_payment_method(self, command):
        cart = load_cart(command.cart_id)
        cart.save_payment_method(command.payment_method)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.cart_id)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

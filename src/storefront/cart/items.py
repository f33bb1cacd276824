"""Cart item management — commands and handler.

Adding a product snapshots its current name, image, price and stock from the
catalogue; the stock snapshot caps the line quantity.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.cart.management import load_cart
from storefront.domain import storefront
from storefront.product.management import load_product


@storefront.command(part_of="Cart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = load_cart(command.cart_id)
        product = load_product(command.product_id)
        cart.add_item(
            product_id=str(product.id),
            name=product.name,
            image=product.image,
            unit_price=product.price,
            stock_ceiling=product.count_in_stock,
            quantity=command.quantity,
        )
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = load_cart(command.cart_id)
        cart.update_item_quantity(product_id=command.product_id, new_quantity=command.quantity)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = load_cart(command.cart_id)
        cart.remove_item(product_id=command.product_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or its line quantity increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)
    total_price = Float(required=True)


@storefront.event(part_of="Cart")
class CartQuantityUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    total_price = Float(required=True)


@storefront.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    total_price = Float(required=True)


@storefront.event(part_of="Cart")
class ShippingAddressSaved:
    __version__ = 1

    cart_id = Identifier(required=True)
    city = String(sanitize=False)
    country = String(sanitize=False)


@storefront.event(part_of="Cart")
class PaymentMethodSaved:
    __version__ = 1

    cart_id = Identifier(required=True)
    payment_method = String(required=True, sanitize=False)


@storefront.event(part_of="Cart")
class CartCleared:
    """Items, address and payment method were reset."""

    __version__ = 1

    cart_id = Identifier(required=True)


@storefront.event(part_of="Cart")
class CartCheckedOut:
    """The cart's contents were placed as an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)

"""Pricing engine. Derives subtotal, shipping, tax and grand total.

All four values are always computed together from the same line items so that
``total_price == items_price + shipping_price + tax_price`` holds to the cent.
Arithmetic is done in Decimal and rounded half-up on the cent boundary; the
results are stored as floats on the value object, like every other money field
in the domain.
"""

from decimal import ROUND_HALF_UP, Decimal

from protean.fields import Float

from storefront.domain import storefront

FREE_SHIPPING_THRESHOLD = Decimal("100")
FLAT_SHIPPING = Decimal("9.99")
TAX_RATE = Decimal("0.10")

_CENT = Decimal("0.01")


@storefront.value_object
class Pricing:
    """Financial summary of a cart or order.

    Prices are locked at checkout on the Order and never change afterwards,
    even if catalogue prices change later.
    """

    items_price = Float(default=0.0, min_value=0.0)
    shipping_price = Float(default=0.0, min_value=0.0)
    tax_price = Float(default=0.0, min_value=0.0)
    total_price = Float(default=0.0, min_value=0.0)


def round2(value) -> Decimal:
    """Round a number to 2 decimal places, half-up."""
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def price_lines(lines) -> Pricing:
    """Price a sequence of ``(unit_price, quantity)`` pairs.

    Shipping is free only when the items total is strictly above the
    threshold: 100.00 pays the flat rate, 100.01 ships free.
    """
    items_price = round2(sum((Decimal(str(unit_price)) * int(quantity) for unit_price, quantity in lines), Decimal(0)))
    shipping_price = Decimal("0.00") if items_price > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
    tax_price = round2(items_price * TAX_RATE)
    total_price = round2(items_price + shipping_price + tax_price)

    return Pricing(
        items_price=float(items_price),
        shipping_price=float(shipping_price),
        tax_price=float(tax_price),
        total_price=float(total_price),
    )


def empty_pricing() -> Pricing:
    """Pricing of a cart with no lines (everything zero)."""
    return Pricing(items_price=0.0, shipping_price=0.0, tax_price=0.0, total_price=0.0)

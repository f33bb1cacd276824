"""Cart aggregate (CQRS) — a session's selection before checkout.

Each line snapshots the product's name, image, price and stock at the time
it was added; the stock snapshot is the ceiling for the line quantity. The
cart's pricing is recomputed from its lines after every mutation, with the
same engine that prices orders. An empty cart prices at zero.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    PaymentMethodSaved,
    ShippingAddressSaved,
)
from storefront.domain import storefront
from storefront.pricing import Pricing, empty_pricing, price_lines

DEFAULT_PAYMENT_METHOD = "PayPal"
ADDRESS_FIELDS = ("address", "city", "postal_code", "country")


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=100, sanitize=False)
    image = String(max_length=500, sanitize=False)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    stock_ceiling = Integer(required=True, min_value=0)
    added_at = DateTime()


@storefront.aggregate
class Cart:
    session_id = String(required=True, max_length=255, sanitize=False)
    customer_id = Identifier()
    items = HasMany(CartItem)
    shipping_address = Text(sanitize=False)  # JSON: {address, city, postal_code, country}
    payment_method = String(max_length=50, default=DEFAULT_PAYMENT_METHOD, sanitize=False)
    pricing = ValueObject(Pricing)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, session_id, customer_id=None):
        now = datetime.now(UTC)
        return cls(
            session_id=session_id,
            customer_id=customer_id,
            shipping_address=json.dumps({}),
            payment_method=DEFAULT_PAYMENT_METHOD,
            pricing=empty_pricing(),
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _line(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _reprice(self):
        if self.items:
            self.pricing = price_lines((i.unit_price, i.quantity) for i in self.items)
        else:
            self.pricing = empty_pricing()
        self.updated_at = datetime.now(UTC)

    @staticmethod
    def _check_quantity(quantity, ceiling):
        if ceiling < 1:
            raise ValidationError({"quantity": ["Product is out of stock"]})
        if not 1 <= quantity <= ceiling:
            raise ValidationError({"quantity": [f"Quantity must be between 1 and {ceiling}"]})

    @property
    def address(self) -> dict:
        return json.loads(self.shipping_address) if self.shipping_address else {}

    @property
    def lines(self) -> list[dict]:
        """Lines in the shape order placement expects."""
        return [{"product_id": str(i.product_id), "quantity": i.quantity} for i in self.items]

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, name, image, unit_price, stock_ceiling, quantity):
        """Add a product, or increase its line capped at the stock ceiling."""
        self._check_quantity(quantity, stock_ceiling)

        existing = self._line(product_id)
        if existing:
            existing.name = name
            existing.image = image
            existing.unit_price = unit_price
            existing.stock_ceiling = stock_ceiling
            existing.quantity = min(existing.quantity + quantity, stock_ceiling)
            line_quantity = existing.quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    name=name,
                    image=image,
                    unit_price=unit_price,
                    quantity=quantity,
                    stock_ceiling=stock_ceiling,
                    added_at=datetime.now(UTC),
                )
            )
            line_quantity = quantity

        self._reprice()
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=line_quantity,
                total_price=self.pricing.total_price,
            )
        )

    def update_item_quantity(self, product_id, new_quantity):
        item = self._line(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})
        self._check_quantity(new_quantity, item.stock_ceiling)

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self._reprice()
        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                total_price=self.pricing.total_price,
            )
        )

    def remove_item(self, product_id):
        item = self._line(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        self.remove_items(item)
        self._reprice()
        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
                total_price=self.pricing.total_price,
            )
        )

    # -------------------------------------------------------------------
    # Checkout details
    # -------------------------------------------------------------------
    def save_shipping_address(self, address, city, postal_code, country):
        values = {"address": address, "city": city, "postal_code": postal_code, "country": country}
        missing = [f for f in ADDRESS_FIELDS if not (values[f] or "").strip()]
        if missing:
            raise ValidationError({"shipping_address": [f"Missing {', '.join(missing)}"]})

        self.shipping_address = json.dumps(values)
        self.updated_at = datetime.now(UTC)
        self.raise_(ShippingAddressSaved(cart_id=str(self.id), city=city, country=country))

    def save_payment_method(self, payment_method):
        if not payment_method or not payment_method.strip():
            raise ValidationError({"payment_method": ["Payment method is required"]})

        self.payment_method = payment_method
        self.updated_at = datetime.now(UTC)
        self.raise_(PaymentMethodSaved(cart_id=str(self.id), payment_method=payment_method))

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def clear(self):
        for item in list(self.items):
            self.remove_items(item)
        self.shipping_address = json.dumps({})
        self.payment_method = DEFAULT_PAYMENT_METHOD
        self._reprice()
        self.raise_(CartCleared(cart_id=str(self.id)))

    def mark_checked_out(self, order_id, customer_id):
        """Empty the cart after its contents became order ``order_id``."""
        self.clear()
        self.raise_(
            CartCheckedOut(
                cart_id=str(self.id),
                order_id=str(order_id),
                customer_id=str(customer_id),
            )
        )

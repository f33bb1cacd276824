"""Order aggregate (CQRS) — the record produced by checkout.

An order carries two independent status axes, ``is_paid`` and
``is_delivered``, next to a coarse workflow ``status``. They are mutated by
distinct operations and are allowed to diverge: an admin can set the workflow
status to Delivered without confirming delivery, and vice versa.

Transitions:
    (initial)          → Pending, unpaid, undelivered
    confirm_payment    → is_paid, paid_at; Pending → Processing
    confirm_delivery   → is_delivered, delivered_at; status forced to Delivered
    set_status         → any of the five statuses; booleans untouched
    cancel             → Cancelled (dead end, no automatic way back)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.errors import InvalidStatus, StateError
from storefront.order.events import (
    DeliveryConfirmed,
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentConfirmed,
    StockShortfallRecorded,
)
from storefront.pricing import Pricing, round2


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships. Captured at checkout and never edited."""

    address = String(required=True, max_length=255, sanitize=False)
    city = String(required=True, max_length=100, sanitize=False)
    postal_code = String(required=True, max_length=20, sanitize=False)
    country = String(required=True, max_length=100, sanitize=False)


@storefront.value_object(part_of="Order")
class PaymentResult:
    """Opaque payload reported by the payment gateway."""

    payment_id = String(max_length=255, sanitize=False)
    status = String(max_length=50, sanitize=False)
    update_time = String(max_length=50, sanitize=False)
    email_address = String(max_length=255, sanitize=False)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Snapshot of a product line at placement time."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100, sanitize=False)
    image = String(max_length=500, sanitize=False)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(required=True, max_length=50, sanitize=False)
    pricing = ValueObject(Pricing)
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    payment_result = ValueObject(PaymentResult)
    is_delivered = Boolean(default=False)
    delivered_at = DateTime()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value, sanitize=False)
    stock_shortfalls = Text(sanitize=False)  # JSON: [{product_id, requested, available}]
    cancellation_reason = String(max_length=500, sanitize=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_sum_of_parts(self):
        if self.pricing is None:
            return
        parts = round2(self.pricing.items_price) + round2(self.pricing.shipping_price) + round2(self.pricing.tax_price)
        if parts != round2(self.pricing.total_price):
            raise ValidationError({"pricing": ["Total price must equal items + shipping + tax"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, items_data, shipping_address, payment_method, pricing):
        """Create a Pending, unpaid, undelivered order.

        Args:
            customer_id: The buyer.
            items_data: List of dicts with product_id, name, image,
                        unit_price, quantity (snapshots from the catalogue).
            shipping_address: Dict with address, city, postal_code, country.
            payment_method: Payment method label chosen at checkout.
            pricing: ``Pricing`` computed from ``items_data``.
        """
        if not items_data:
            raise ValidationError({"items": ["No order items provided"]})

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            items=[OrderItem(**item) for item in items_data],
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method,
            pricing=pricing,
            status=OrderStatus.PENDING.value,
            is_paid=False,
            is_delivered=False,
            stock_shortfalls=json.dumps([]),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                items=json.dumps(items_data),
                payment_method=payment_method,
                items_price=pricing.items_price,
                shipping_price=pricing.shipping_price,
                tax_price=pricing.tax_price,
                total_price=pricing.total_price,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def confirm_payment(self, payment_id=None, payment_status=None, update_time=None, email_address=None):
        """Record a completed payment.

        Not idempotent: a second call re-stamps ``paid_at`` and replaces the
        payment result. Only a Pending order advances to Processing.
        """
        now = datetime.now(UTC)
        self.is_paid = True
        self.paid_at = now
        self.payment_result = PaymentResult(
            payment_id=payment_id,
            status=payment_status,
            update_time=update_time,
            email_address=email_address,
        )
        if self.status == OrderStatus.PENDING.value:
            self.status = OrderStatus.PROCESSING.value
        self.updated_at = now

        self.raise_(
            PaymentConfirmed(
                order_id=str(self.id),
                payment_id=payment_id,
                payment_status=payment_status,
                amount=self.pricing.total_price if self.pricing else 0.0,
                status=self.status,
                paid_at=now,
            )
        )

    def confirm_delivery(self):
        """Mark delivered and force the workflow status, whatever the payment state."""
        now = datetime.now(UTC)
        self.is_delivered = True
        self.delivered_at = now
        self.status = OrderStatus.DELIVERED.value
        self.updated_at = now

        self.raise_(
            DeliveryConfirmed(
                order_id=str(self.id),
                delivered_at=now,
            )
        )

    def set_status(self, status):
        """Set the workflow status directly. ``is_paid``/``is_delivered`` are left alone."""
        value = status.value if isinstance(status, OrderStatus) else status
        if value not in {s.value for s in OrderStatus}:
            raise InvalidStatus(status)

        previous = self.status
        now = datetime.now(UTC)
        self.status = value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=value,
                changed_at=now,
            )
        )

    def cancel(self, reason):
        if self.status in (OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value):
            raise StateError(f"Cannot cancel order in {self.status} state")

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                reason=reason,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Stock shortfalls
    # -------------------------------------------------------------------
    @property
    def shortfalls(self):
        return json.loads(self.stock_shortfalls) if self.stock_shortfalls else []

    def record_stock_shortfall(self, product_id, requested, available):
        """Attach a warning: stock for a line ran out after the order was created."""
        shortfalls = self.shortfalls
        shortfalls.append(
            {
                "product_id": str(product_id),
                "requested": requested,
                "available": available,
            }
        )
        now = datetime.now(UTC)
        self.stock_shortfalls = json.dumps(shortfalls)
        self.updated_at = now

        self.raise_(
            StockShortfallRecorded(
                order_id=str(self.id),
                product_id=str(product_id),
                requested=requested,
                available=available,
                recorded_at=now,
            )
        )

"""Domain events for the Order aggregate.

Events are versioned, immutable facts raised on every lifecycle change and
stored alongside the aggregate by the unit of work.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A checkout produced a new order in Pending state."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True, sanitize=False)  # JSON: list of item snapshots
    payment_method = String(required=True, sanitize=False)
    items_price = Float(required=True)
    shipping_price = Float(required=True)
    tax_price = Float(required=True)
    total_price = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentConfirmed:
    """The payment gateway reported a completed payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_id = String(sanitize=False)
    payment_status = String(sanitize=False)
    amount = Float(required=True)
    status = String(required=True, sanitize=False)
    paid_at = DateTime(required=True)


@storefront.event(part_of="Order")
class DeliveryConfirmed:
    """An admin marked the order as delivered."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An admin set the workflow status directly."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, sanitize=False)
    new_status = String(required=True, sanitize=False)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class StockShortfallRecorded:
    """Stock could not be withdrawn for a line after the order was created."""

    __version__ = 1

    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    requested = Integer(required=True)
    available = Integer(required=True)
    recorded_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled."""

    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500, sanitize=False)
    cancelled_at = DateTime(required=True)

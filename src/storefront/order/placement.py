"""Order placement: command, handler and the orchestration they share.

Placement validates every line against the stock ledger before anything is
written, reprices the order from authoritative catalogue prices, creates the
order and only then withdraws stock line by line. All writes of a placement
go through the same unit of work.

A withdrawal can still fail after the order exists (two lines for the same
product exhausting it, or a concurrent checkout). Such a shortfall is handled
by the shortfall policy:

    flag   - record the shortfall on the order and keep it Pending (default)
    cancel - record it, cancel the order and restock what was withdrawn

The policy is taken from the command, then the STOREFRONT_SHORTFALL_POLICY
environment variable.
"""

import json
import os
from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import InsufficientStock
from storefront.order.order import Order
from storefront.pricing import price_lines, round2
from storefront.product.stock import StockLedger

logger = structlog.get_logger(__name__)

_ADDRESS_FIELDS = ("address", "city", "postal_code", "country")
_CLIENT_PRICE_FIELDS = ("items_price", "shipping_price", "tax_price", "total_price")


class ShortfallPolicy(Enum):
    FLAG = "flag"
    CANCEL = "cancel"


def shortfall_policy(override=None) -> ShortfallPolicy:
    value = (override or os.getenv("STOREFRONT_SHORTFALL_POLICY") or ShortfallPolicy.FLAG.value).lower()
    try:
        return ShortfallPolicy(value)
    except ValueError:
        raise ValidationError({"shortfall_policy": [f"Unknown shortfall policy: {value}"]}) from None


def _validate_request(lines, shipping_address, payment_method):
    if not lines:
        raise ValidationError({"items": ["No order items provided"]})
    if not isinstance(lines, list):
        raise ValidationError({"items": ["Order items must be a list"]})
    for line in lines:
        if not isinstance(line, dict):
            raise ValidationError({"items": ["Every item must be an object with product_id and quantity"]})
        if not line.get("product_id"):
            raise ValidationError({"items": ["Every item must reference a product"]})
        quantity = line.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": [f"Invalid quantity for product {line['product_id']}"]})

    if shipping_address is not None and not isinstance(shipping_address, dict):
        raise ValidationError({"shipping_address": ["Shipping address must be an object"]})
    missing = [f for f in _ADDRESS_FIELDS if not str((shipping_address or {}).get(f) or "").strip()]
    if missing:
        raise ValidationError({"shipping_address": [f"Missing {', '.join(missing)}"]})

    if not payment_method or not payment_method.strip():
        raise ValidationError({"payment_method": ["Payment method is required"]})


def _warn_on_client_totals(client_pricing, pricing):
    if not client_pricing:
        return
    mismatched = {
        field: {"client": client_pricing[field], "server": getattr(pricing, field)}
        for field in _CLIENT_PRICE_FIELDS
        if client_pricing.get(field) is not None and round2(client_pricing[field]) != round2(getattr(pricing, field))
    }
    if mismatched:
        logger.warning("Client totals differ from server pricing", mismatched=mismatched)


def place_order(customer_id, lines, shipping_address, payment_method, client_pricing=None, policy=None) -> Order:
    """Validate, price, create and stock an order.

    Args:
        customer_id: The buyer placing the order.
        lines: List of dicts with product_id and quantity.
        shipping_address: Dict with address, city, postal_code, country.
        payment_method: Payment method label.
        client_pricing: Optional dict of client-computed totals, display only.
        policy: Optional shortfall policy override ("flag" or "cancel").

    Raises:
        ValidationError: malformed request, including an empty item list.
        ProductNotFound: a line references an unknown product.
        InsufficientStock: a line asks for more than is in stock.
    """
    _validate_request(lines, shipping_address, payment_method)
    policy = shortfall_policy(policy)

    ledger = StockLedger()
    for line in lines:
        ledger.product(line["product_id"])
    for line in lines:
        ledger.check_availability(line["product_id"], line["quantity"])

    items_data = []
    for line in lines:
        product = ledger.product(line["product_id"])
        items_data.append(
            {
                "product_id": str(product.id),
                "name": product.name,
                "image": product.image,
                "unit_price": product.price,
                "quantity": line["quantity"],
            }
        )

    pricing = price_lines((item["unit_price"], item["quantity"]) for item in items_data)
    _warn_on_client_totals(client_pricing, pricing)

    order = Order.place(
        customer_id=customer_id,
        items_data=items_data,
        shipping_address={f: shipping_address[f] for f in _ADDRESS_FIELDS},
        payment_method=payment_method,
        pricing=pricing,
    )

    for line in lines:
        try:
            ledger.withdraw(line["product_id"], line["quantity"])
        except InsufficientStock as exc:
            order.record_stock_shortfall(exc.product_id, exc.requested, exc.available)
            logger.warning(
                "Stock shortfall after order creation",
                order_id=str(order.id),
                product_id=exc.product_id,
                requested=exc.requested,
                available=exc.available,
                policy=policy.value,
            )

    if order.shortfalls and policy == ShortfallPolicy.CANCEL:
        ledger.restore_withdrawals()
        order.cancel("Insufficient stock at placement")

    current_domain.repository_for(Order).add(order)
    ledger.save()

    logger.info(
        "Order placed",
        order_id=str(order.id),
        customer_id=str(customer_id),
        total_price=order.pricing.total_price,
        status=order.status,
        shortfalls=len(order.shortfalls),
    )
    return order


def _decode(field, value):
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        raise ValidationError({field: ["Must be valid JSON"]}) from None


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True, sanitize=False)  # JSON: [{product_id, quantity}]
    shipping_address = Text(required=True, sanitize=False)  # JSON: {address, city, postal_code, country}
    payment_method = String(required=True, max_length=50, sanitize=False)
    items_price = Float()  # Client-computed totals, advisory only
    shipping_price = Float()
    tax_price = Float()
    total_price = Float()
    shortfall_policy = String(max_length=10, sanitize=False)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = _decode("items", command.items)
        shipping_address = _decode("shipping_address", command.shipping_address)
        client_pricing = {field: getattr(command, field) for field in _CLIENT_PRICE_FIELDS}

        order = place_order(
            customer_id=command.customer_id,
            lines=lines,
            shipping_address=shipping_address,
            payment_method=command.payment_method,
            client_pricing=client_pricing,
            policy=command.shortfall_policy,
        )
        return str(order.id)

"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and aggregates.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    address: str
    city: str
    postal_code: str
    country: str


class PricingSchema(BaseModel):
    items_price: float = 0.0
    shipping_price: float = 0.0
    tax_price: float = 0.0
    total_price: float = 0.0

    @classmethod
    def from_pricing(cls, pricing):
        if pricing is None:
            return cls()
        return cls(
            items_price=pricing.items_price,
            shipping_price=pricing.shipping_price,
            tax_price=pricing.tax_price,
            total_price=pricing.total_price,
        )


class StatusResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str
    retryable: bool = False


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str
    image: str
    description: str
    brand: str
    category: str
    price: float = Field(ge=0)
    count_in_stock: int = Field(ge=0)
    is_featured: bool = False
    user_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Wireless Headphones",
                    "image": "/images/headphones.jpg",
                    "description": "Over-ear, noise cancelling, 30 hour battery.",
                    "brand": "Sonic",
                    "category": "Electronics",
                    "price": 89.99,
                    "count_in_stock": 10,
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = None
    image: str | None = None
    description: str | None = None
    brand: str | None = None
    category: str | None = None
    price: float | None = Field(default=None, ge=0)
    count_in_stock: int | None = Field(default=None, ge=0)
    is_featured: bool | None = None


class SubmitReviewRequest(BaseModel):
    user_id: str
    name: str
    rating: int
    comment: str


class ProductIdResponse(BaseModel):
    product_id: str


class ReviewResponse(BaseModel):
    review_id: str
    user_id: str
    name: str
    rating: int
    comment: str
    created_at: datetime | None = None


class ProductResponse(BaseModel):
    product_id: str
    name: str
    image: str
    description: str
    brand: str
    category: str
    price: float
    count_in_stock: int
    rating: float
    num_reviews: int
    is_featured: bool
    reviews: list[ReviewResponse] = []
    created_at: datetime | None = None

    @classmethod
    def from_product(cls, product, with_reviews=True):
        return cls(
            product_id=str(product.id),
            name=product.name,
            image=product.image,
            description=product.description,
            brand=product.brand,
            category=product.category,
            price=product.price,
            count_in_stock=product.count_in_stock,
            rating=round(product.rating or 0.0, 2),
            num_reviews=product.num_reviews or 0,
            is_featured=bool(product.is_featured),
            reviews=[
                ReviewResponse(
                    review_id=str(r.id),
                    user_id=str(r.user_id),
                    name=r.name,
                    rating=r.rating,
                    comment=r.comment,
                    created_at=r.created_at,
                )
                for r in product.reviews
            ]
            if with_reviews
            else [],
            created_at=product.created_at,
        )


class ProductPageResponse(BaseModel):
    products: list[ProductResponse]
    page: int
    pages: int
    total: int


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    session_id: str
    customer_id: str | None = None


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


class PaymentMethodRequest(BaseModel):
    payment_method: str


class CheckoutRequest(BaseModel):
    customer_id: str
    shortfall_policy: str | None = None


class CartIdResponse(BaseModel):
    cart_id: str


class CartItemResponse(BaseModel):
    product_id: str
    name: str
    image: str | None = None
    unit_price: float
    quantity: int
    stock_ceiling: int


class CartResponse(BaseModel):
    cart_id: str
    session_id: str
    customer_id: str | None = None
    items: list[CartItemResponse]
    shipping_address: dict
    payment_method: str
    pricing: PricingSchema

    @classmethod
    def from_cart(cls, cart):
        return cls(
            cart_id=str(cart.id),
            session_id=cart.session_id,
            customer_id=str(cart.customer_id) if cart.customer_id else None,
            items=[
                CartItemResponse(
                    product_id=str(i.product_id),
                    name=i.name,
                    image=i.image,
                    unit_price=i.unit_price,
                    quantity=i.quantity,
                    stock_ceiling=i.stock_ceiling,
                )
                for i in cart.items
            ],
            shipping_address=cart.address,
            payment_method=cart.payment_method,
            pricing=PricingSchema.from_pricing(cart.pricing),
        )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineSchema(BaseModel):
    product_id: str
    quantity: int


class PlaceOrderRequest(BaseModel):
    customer_id: str
    items: list[OrderLineSchema]
    shipping_address: AddressSchema
    payment_method: str
    items_price: float | None = None
    shipping_price: float | None = None
    tax_price: float | None = None
    total_price: float | None = None
    shortfall_policy: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "shipping_address": {
                        "address": "12 Market Street",
                        "city": "Springfield",
                        "postal_code": "12345",
                        "country": "US",
                    },
                    "payment_method": "PayPal",
                }
            ]
        }
    }


class ConfirmPaymentRequest(BaseModel):
    payment_id: str | None = None
    status: str | None = None
    update_time: str | None = None
    email_address: str | None = None


class SetStatusRequest(BaseModel):
    status: str


class OrderIdResponse(BaseModel):
    order_id: str


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    image: str | None = None
    unit_price: float
    quantity: int


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    items: list[OrderItemResponse]
    shipping_address: AddressSchema | None = None
    payment_method: str
    pricing: PricingSchema
    status: str
    is_paid: bool
    paid_at: datetime | None = None
    payment_result: dict | None = None
    is_delivered: bool
    delivered_at: datetime | None = None
    stock_shortfalls: list[dict] = []
    created_at: datetime | None = None

    @classmethod
    def from_order(cls, order):
        address = order.shipping_address
        result = order.payment_result
        return cls(
            order_id=str(order.id),
            customer_id=str(order.customer_id),
            items=[
                OrderItemResponse(
                    product_id=str(i.product_id),
                    name=i.name,
                    image=i.image,
                    unit_price=i.unit_price,
                    quantity=i.quantity,
                )
                for i in order.items
            ],
            shipping_address=AddressSchema(
                address=address.address,
                city=address.city,
                postal_code=address.postal_code,
                country=address.country,
            )
            if address
            else None,
            payment_method=order.payment_method,
            pricing=PricingSchema.from_pricing(order.pricing),
            status=order.status,
            is_paid=bool(order.is_paid),
            paid_at=order.paid_at,
            payment_result=result.to_dict() if result else None,
            is_delivered=bool(order.is_delivered),
            delivered_at=order.delivered_at,
            stock_shortfalls=order.shortfalls,
            created_at=order.created_at,
        )


class OrderPageResponse(BaseModel):
    orders: list[OrderResponse]
    page: int
    pages: int
    total: int


class MonthlyRevenueSchema(BaseModel):
    year: int
    month: int
    revenue: float
    orders: int


class OrderStatsResponse(BaseModel):
    total_orders: int
    total_revenue: float
    pending_orders: int
    delivered_orders: int
    revenue_by_month: list[MonthlyRevenueSchema]

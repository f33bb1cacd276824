"""FastAPI routes for the Storefront: products, carts and orders.

Writes go through Protean commands; reads go through the catalogue queries
and the reporting module.
"""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddressSchema,
    AddToCartRequest,
    CartIdResponse,
    CartResponse,
    CheckoutRequest,
    ConfirmPaymentRequest,
    CreateCartRequest,
    CreateProductRequest,
    ErrorResponse,
    OrderIdResponse,
    OrderPageResponse,
    OrderResponse,
    OrderStatsResponse,
    PaymentMethodRequest,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductPageResponse,
    ProductResponse,
    SetStatusRequest,
    StatusResponse,
    SubmitReviewRequest,
    UpdateCartQuantityRequest,
    UpdateProductRequest,
)
from storefront.cart.checkout import CheckoutCart
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.management import ClearCart, CreateCart, SetPaymentMethod, SetShippingAddress, load_cart
from storefront.order.lifecycle import ConfirmDelivery, ConfirmPayment, SetOrderStatus, load_order
from storefront.order.placement import PlaceOrder
from storefront.product.management import CreateProduct, DeleteProduct, UpdateProduct, load_product
from storefront.product.queries import categories, featured_products, search_products
from storefront.product.reviews import SubmitReview
from storefront.reporting.order_stats import list_orders, order_stats, orders_for_customer

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}

# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"], responses=ERROR_RESPONSES)


@product_router.get("", response_model=ProductPageResponse)
async def list_products(
    keyword: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    in_stock: bool = False,
    sort: str | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=12, ge=1, le=100),
) -> ProductPageResponse:
    result = search_products(
        keyword=keyword,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        sort=sort,
        page=page,
        page_size=page_size,
    )
    return ProductPageResponse(
        products=[ProductResponse.from_product(p, with_reviews=False) for p in result["products"]],
        page=result["page"],
        pages=result["pages"],
        total=result["total"],
    )


@product_router.get("/featured", response_model=list[ProductResponse])
async def get_featured_products(limit: int = Query(default=8, ge=1, le=50)) -> list[ProductResponse]:
    return [ProductResponse.from_product(p, with_reviews=False) for p in featured_products(limit)]


@product_router.get("/categories", response_model=list[str])
async def get_categories() -> list[str]:
    return categories()


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product_detail(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(load_product(product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        image=body.image,
        description=body.description,
        brand=body.brand,
        category=body.category,
        price=body.price,
        count_in_stock=body.count_in_stock,
        is_featured=body.is_featured,
        user_id=body.user_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=ProductIdResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductIdResponse:
    command = UpdateProduct(product_id=product_id, **body.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/reviews", status_code=201, response_model=ProductIdResponse)
async def submit_review(product_id: str, body: SubmitReviewRequest) -> ProductIdResponse:
    command = SubmitReview(
        product_id=product_id,
        user_id=body.user_id,
        name=body.name,
        rating=body.rating,
        comment=body.comment,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"], responses=ERROR_RESPONSES)


def _cart_response(cart_id) -> CartResponse:
    return CartResponse.from_cart(load_cart(cart_id))


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(session_id=body.session_id, customer_id=body.customer_id)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    return _cart_response(cart_id)


@cart_router.post("/{cart_id}/items", response_model=CartResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> CartResponse:
    command = AddToCart(cart_id=cart_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(cart_id)


@cart_router.put("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item(cart_id: str, product_id: str, body: UpdateCartQuantityRequest) -> CartResponse:
    command = UpdateCartQuantity(cart_id=cart_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(cart_id)


@cart_router.delete("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(cart_id: str, product_id: str) -> CartResponse:
    command = RemoveFromCart(cart_id=cart_id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return _cart_response(cart_id)


@cart_router.put("/{cart_id}/shipping-address", response_model=CartResponse)
async def set_shipping_address(cart_id: str, body: AddressSchema) -> CartResponse:
    command = SetShippingAddress(
        cart_id=cart_id,
        address=body.address,
        city=body.city,
        postal_code=body.postal_code,
        country=body.country,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(cart_id)


@cart_router.put("/{cart_id}/payment-method", response_model=CartResponse)
async def set_payment_method(cart_id: str, body: PaymentMethodRequest) -> CartResponse:
    command = SetPaymentMethod(cart_id=cart_id, payment_method=body.payment_method)
    current_domain.process(command, asynchronous=False)
    return _cart_response(cart_id)


@cart_router.post("/{cart_id}/clear", response_model=CartResponse)
async def clear_cart(cart_id: str) -> CartResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return _cart_response(cart_id)


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=OrderIdResponse)
async def checkout_cart(cart_id: str, body: CheckoutRequest) -> OrderIdResponse:
    command = CheckoutCart(
        cart_id=cart_id,
        customer_id=body.customer_id,
        shortfall_policy=body.shortfall_policy,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"], responses=ERROR_RESPONSES)


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        customer_id=body.customer_id,
        items=json.dumps([line.model_dump() for line in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_method=body.payment_method,
        items_price=body.items_price,
        shipping_price=body.shipping_price,
        tax_price=body.tax_price,
        total_price=body.total_price,
        shortfall_policy=body.shortfall_policy,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("", response_model=OrderPageResponse)
async def get_all_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> OrderPageResponse:
    result = list_orders(page=page, page_size=limit)
    return OrderPageResponse(
        orders=[OrderResponse.from_order(o) for o in result["orders"]],
        page=result["page"],
        pages=result["pages"],
        total=result["total"],
    )


@order_router.get("/stats", response_model=OrderStatsResponse)
async def get_order_stats() -> OrderStatsResponse:
    return OrderStatsResponse(**order_stats())


@order_router.get("/mine/{customer_id}", response_model=list[OrderResponse])
async def get_my_orders(customer_id: str) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in orders_for_customer(customer_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(load_order(order_id))


@order_router.put("/{order_id}/pay", response_model=OrderResponse)
async def confirm_payment(order_id: str, body: ConfirmPaymentRequest) -> OrderResponse:
    command = ConfirmPayment(
        order_id=order_id,
        payment_id=body.payment_id,
        payment_status=body.status,
        update_time=body.update_time,
        email_address=body.email_address,
    )
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(load_order(order_id))


@order_router.put("/{order_id}/deliver", response_model=OrderResponse)
async def confirm_delivery(order_id: str) -> OrderResponse:
    current_domain.process(ConfirmDelivery(order_id=order_id), asynchronous=False)
    return OrderResponse.from_order(load_order(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def set_order_status(order_id: str, body: SetStatusRequest) -> OrderResponse:
    current_domain.process(SetOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return OrderResponse.from_order(load_order(order_id))

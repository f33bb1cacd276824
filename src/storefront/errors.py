"""Error taxonomy for storefront operations.

Malformed input is reported with Protean's ``ValidationError`` (a dict of
field -> messages). Everything else that an operation can refuse derives from
``StorefrontError`` and falls into one of three families: the referenced
entity does not exist, the request conflicts with current state, or the
requested state transition is not allowed.
"""


class StorefrontError(Exception):
    """Base class for storefront operation failures."""

    retryable = False

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError):
    pass


class ProductNotFound(NotFoundError):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = str(product_id)


class OrderNotFound(NotFoundError):
    def __init__(self, order_id):
        super().__init__(f"Order {order_id} not found")
        self.order_id = str(order_id)


class CartNotFound(NotFoundError):
    def __init__(self, cart_id):
        super().__init__(f"Cart {cart_id} not found")
        self.cart_id = str(cart_id)


class ConflictError(StorefrontError):
    pass


class InsufficientStock(ConflictError):
    def __init__(self, product_id, product_name, requested, available):
        super().__init__(f"Insufficient stock for {product_name}: requested {requested}, available {available}")
        self.product_id = str(product_id)
        self.product_name = product_name
        self.requested = requested
        self.available = available


class DuplicateReview(ConflictError):
    def __init__(self, product_id, user_id):
        super().__init__("You have already reviewed this product")
        self.product_id = str(product_id)
        self.user_id = str(user_id)


class ConcurrentUpdate(ConflictError):
    """Another request changed the same record first; the caller may retry."""

    retryable = True

    def __init__(self, entity="Record", entity_id=None):
        subject = f"{entity} {entity_id}" if entity_id else entity
        super().__init__(f"{subject} was changed by another request, please retry")
        self.entity = entity
        self.entity_id = str(entity_id) if entity_id else None


class StateError(StorefrontError):
    pass


class InvalidStatus(StateError):
    def __init__(self, status):
        super().__init__(f"Invalid order status: {status}")
        self.status = status

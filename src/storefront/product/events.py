"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue by an admin."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    category = String(required=True, sanitize=False)
    price = Float(required=True)
    count_in_stock = Integer(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    """Catalogue details, price or stock count were edited by an admin."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    price = Float(required=True)
    count_in_stock = Integer(required=True)
    updated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Units were taken out of stock for a placed order."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_count = Integer(required=True)
    new_count = Integer(required=True)
    withdrawn_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockRestored:
    """Previously withdrawn units were put back into stock."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_count = Integer(required=True)
    restored_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ReviewAdded:
    """A customer review was appended and the product rating recomputed."""

    __version__ = 1

    product_id = Identifier(required=True)
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    new_average_rating = Float(required=True)
    num_reviews = Integer(required=True)
    reviewed_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDeleted:
    """An admin removed the product from the catalogue.

    Orders already placed keep their own snapshot of the product.
    """

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, sanitize=False)
    deleted_at = DateTime(required=True)

"""Product aggregate (CQRS) — catalogue entry, stock counter and reviews.

The Product owns three kinds of state that change for different reasons:

- catalogue details (name, image, price, ...) edited by admins,
- ``count_in_stock``, the stock ledger counter withdrawn by order placement,
- the review collection, from which ``rating`` and ``num_reviews`` are derived.

Orders never hold a live reference to a Product; they copy a snapshot of
name, image and price at placement time.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
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
)

from storefront.domain import storefront
from storefront.errors import DuplicateReview, InsufficientStock
from storefront.product.events import (
    ProductCreated,
    ProductDeleted,
    ProductUpdated,
    ReviewAdded,
    StockRestored,
    StockWithdrawn,
)


class ProductCategory(Enum):
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    HOME_AND_GARDEN = "Home & Garden"
    SPORTS = "Sports"
    TOYS = "Toys"
    BEAUTY = "Beauty"
    AUTOMOTIVE = "Automotive"
    OTHER = "Other"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Product")
class Review:
    """A customer's rating and comment on a product. Immutable once added."""

    user_id = Identifier(required=True)
    name = String(required=True, max_length=100, sanitize=False)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text(required=True, sanitize=False)
    created_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Product:
    name = String(required=True, max_length=100, sanitize=False)
    image = String(required=True, max_length=500, sanitize=False)
    description = String(required=True, max_length=2000, sanitize=False)
    brand = String(required=True, max_length=100, sanitize=False)
    category = String(choices=ProductCategory, default=ProductCategory.OTHER.value, sanitize=False)
    price = Float(required=True, min_value=0.0, default=0.0)
    count_in_stock = Integer(required=True, min_value=0, default=0)
    reviews = HasMany(Review)
    rating = Float(default=0.0)
    num_reviews = Integer(default=0)
    is_featured = Boolean(default=False)
    user_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def rating_must_match_reviews(self):
        if not self.reviews:
            if self.num_reviews or self.rating:
                raise ValidationError({"rating": ["Rating must be zero when there are no reviews"]})
            return

        if self.num_reviews != len(self.reviews):
            raise ValidationError({"num_reviews": ["Review count does not match the reviews collection"]})
        expected = sum(r.rating for r in self.reviews) / len(self.reviews)
        if abs((self.rating or 0.0) - expected) > 1e-9:
            raise ValidationError({"rating": ["Rating must be the average of review ratings"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        image,
        description,
        brand,
        category,
        price,
        count_in_stock,
        is_featured=False,
        user_id=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            image=image,
            description=description,
            brand=brand,
            category=category,
            price=price,
            count_in_stock=count_in_stock,
            is_featured=bool(is_featured),
            user_id=user_id,
            rating=0.0,
            num_reviews=0,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                name=name,
                category=product.category,
                price=product.price,
                count_in_stock=product.count_in_stock,
                created_at=now,
            )
        )
        return product

    def update_details(
        self,
        name=None,
        image=None,
        description=None,
        brand=None,
        category=None,
        price=None,
        count_in_stock=None,
        is_featured=None,
    ):
        """Apply an admin edit. Only the fields that are provided change."""
        now = datetime.now(UTC)
        with atomic_change(self):
            if name is not None:
                self.name = name
            if image is not None:
                self.image = image
            if description is not None:
                self.description = description
            if brand is not None:
                self.brand = brand
            if category is not None:
                self.category = category
            if price is not None:
                self.price = price
            if count_in_stock is not None:
                self.count_in_stock = count_in_stock
            if is_featured is not None:
                self.is_featured = is_featured
            self.updated_at = now

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                count_in_stock=self.count_in_stock,
                updated_at=now,
            )
        )

    def mark_deleted(self):
        """Record the removal; the caller deletes the persisted record."""
        self.raise_(
            ProductDeleted(
                product_id=str(self.id),
                name=self.name,
                deleted_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Stock ledger
    # -------------------------------------------------------------------
    def has_stock_for(self, quantity):
        return (self.count_in_stock or 0) >= quantity

    def withdraw_stock(self, quantity):
        """Take ``quantity`` units out of stock, only if that many are available.

        The check and the decrement happen in one aggregate mutation; when the
        count is insufficient nothing changes and ``InsufficientStock`` is raised.
        """
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.has_stock_for(quantity):
            raise InsufficientStock(self.id, self.name, quantity, self.count_in_stock)

        previous = self.count_in_stock
        now = datetime.now(UTC)
        self.count_in_stock = previous - quantity
        self.updated_at = now

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                quantity=quantity,
                previous_count=previous,
                new_count=self.count_in_stock,
                withdrawn_at=now,
            )
        )

    def restore_stock(self, quantity):
        """Put back units withdrawn by an order that was cancelled at placement."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        self.count_in_stock = self.count_in_stock + quantity
        self.updated_at = now

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                new_count=self.count_in_stock,
                restored_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def has_review_by(self, user_id):
        return any(str(r.user_id) == str(user_id) for r in self.reviews)

    def add_review(self, user_id, name, rating, comment):
        """Append a review and recompute rating and count over all reviews."""
        if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
            raise ValidationError({"rating": ["Rating must be a whole number between 1 and 5"]})
        if not comment or not comment.strip():
            raise ValidationError({"comment": ["Please provide a comment"]})
        if self.has_review_by(user_id):
            raise DuplicateReview(self.id, user_id)

        now = datetime.now(UTC)
        review = Review(
            user_id=user_id,
            name=name,
            rating=rating,
            comment=comment,
            created_at=now,
        )

        with atomic_change(self):
            self.add_reviews(review)
            self.num_reviews = len(self.reviews)
            self.rating = sum(r.rating for r in self.reviews) / self.num_reviews
            self.updated_at = now

        self.raise_(
            ReviewAdded(
                product_id=str(self.id),
                review_id=str(review.id),
                user_id=str(user_id),
                rating=review.rating,
                new_average_rating=self.rating,
                num_reviews=self.num_reviews,
                reviewed_at=now,
            )
        )
        return review

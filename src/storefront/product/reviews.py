"""SubmitReview: append a customer review to a product.

Enforces one review per customer per product against the product's own
review collection, then recomputes rating and count over all reviews.
"""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.product.product import Product
from storefront.product.management import load_product


@storefront.command(part_of="Product")
class SubmitReview:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    name = String(required=True, max_length=100, sanitize=False)
    rating = Integer(required=True)
    comment = Text(required=True, sanitize=False)


@storefront.command_handler(part_of=Product)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        product = load_product(command.product_id)
        review = product.add_review(
            user_id=command.user_id,
            name=command.name,
            rating=command.rating,
            comment=command.comment,
        )
        current_domain.repository_for(Product).add(product)

        logger.info(
            "Review added",
            product_id=str(product.id),
            review_id=str(review.id),
            rating=review.rating,
            new_average_rating=product.rating,
        )
        return str(product.id)

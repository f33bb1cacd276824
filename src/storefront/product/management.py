"""Product management: admin create, update and delete commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import ProductNotFound
from storefront.product.product import Product


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=100, sanitize=False)
    image = String(required=True, max_length=500, sanitize=False)
    description = String(required=True, max_length=2000, sanitize=False)
    brand = String(required=True, max_length=100, sanitize=False)
    category = String(required=True, max_length=50, sanitize=False)
    price = Float(required=True, min_value=0.0)
    count_in_stock = Integer(required=True, min_value=0)
    is_featured = Boolean(default=False)
    user_id = Identifier()


@storefront.command(part_of="Product")
class UpdateProduct:
    """Partial update: fields left unset keep their current value."""

    product_id = Identifier(required=True)
    name = String(max_length=100, sanitize=False)
    image = String(max_length=500, sanitize=False)
    description = String(max_length=2000, sanitize=False)
    brand = String(max_length=100, sanitize=False)
    category = String(max_length=50, sanitize=False)
    price = Float(min_value=0.0)
    count_in_stock = Integer(min_value=0)
    is_featured = Boolean()


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


def load_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ProductNotFound(product_id) from None


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            image=command.image,
            description=command.description,
            brand=command.brand,
            category=command.category,
            price=command.price,
            count_in_stock=command.count_in_stock,
            is_featured=command.is_featured,
            user_id=command.user_id,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        product = load_product(command.product_id)
        product.update_details(
            name=command.name,
            image=command.image,
            description=command.description,
            brand=command.brand,
            category=command.category,
            price=command.price,
            count_in_stock=command.count_in_stock,
            is_featured=command.is_featured,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load_product(command.product_id)
        product.mark_deleted()

        repository = current_domain.repository_for(Product)
        repository.add(product)
        repository._dao.delete(product)

        logger.info("Product deleted", product_id=str(product.id))
        return str(product.id)

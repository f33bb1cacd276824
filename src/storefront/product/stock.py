"""Stock ledger: availability checks and withdrawals against product stock.

The ledger resolves each product once and keeps it for the rest of the
operation, so several lines referencing the same product see each other's
withdrawals before anything is persisted. Changed products are written back
with ``save()`` inside the caller's unit of work.
"""

from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import ConcurrentUpdate, InsufficientStock, ProductNotFound
from storefront.product.product import Product


class StockLedger:
    def __init__(self, repository=None):
        self._repository = repository or current_domain.repository_for(Product)
        self._products = {}
        self._changed = set()
        self._withdrawals = []

    def product(self, product_id) -> Product:
        """Resolve a product, raising ``ProductNotFound`` for unknown ids."""
        key = str(product_id)
        if key not in self._products:
            try:
                self._products[key] = self._repository.get(key)
            except ObjectNotFoundError:
                raise ProductNotFound(key) from None
        return self._products[key]

    def check_availability(self, product_id, quantity) -> Product:
        """Return the product if ``quantity`` units are currently available."""
        product = self.product(product_id)
        if not product.has_stock_for(quantity):
            raise InsufficientStock(product.id, product.name, quantity, product.count_in_stock)
        return product

    def withdraw(self, product_id, quantity):
        """Conditionally decrement stock; the count never goes negative."""
        product = self.product(product_id)
        product.withdraw_stock(quantity)
        self._changed.add(str(product_id))
        self._withdrawals.append((str(product_id), quantity))

    def restore_withdrawals(self):
        """Undo every withdrawal made through this ledger."""
        for product_id, quantity in reversed(self._withdrawals):
            self._products[product_id].restore_stock(quantity)
        self._withdrawals.clear()

    @property
    def withdrawals(self):
        return list(self._withdrawals)

    def save(self):
        """Write back changed products.

        A product changed elsewhere since it was read fails with
        ``ConcurrentUpdate``; the enclosing unit of work then rolls back.
        """
        for product_id in self._changed:
            try:
                self._repository.add(self._products[product_id])
            except ExpectedVersionError:
                raise ConcurrentUpdate("Product", product_id) from None

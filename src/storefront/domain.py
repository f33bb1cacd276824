"""Storefront bounded context: Catalogue, Cart, Orders and Reporting.

Handles the product catalogue (with reviews and the stock ledger), the
session-keyed shopping cart, order placement and the order lifecycle, and
read-side reporting over placed orders.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)

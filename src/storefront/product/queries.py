"""Catalogue queries: search, featured products and category listing."""

from enum import Enum

from protean.exceptions import ValidationError

from storefront.product.product import Product
from storefront.reading import fetch_all, paginate

DEFAULT_PAGE_SIZE = 12
DEFAULT_FEATURED_LIMIT = 8


class ProductSort(Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING = "rating"
    NEWEST = "newest"


def _sort_key(sort):
    try:
        sort = ProductSort(sort or ProductSort.NEWEST.value)
    except ValueError:
        raise ValidationError({"sort": [f"Unknown sort order: {sort}"]}) from None

    if sort == ProductSort.PRICE_ASC:
        return lambda p: p.price, False
    if sort == ProductSort.PRICE_DESC:
        return lambda p: p.price, True
    if sort == ProductSort.RATING:
        return lambda p: p.rating or 0.0, True
    return lambda p: p.created_at, True


def _matches_keyword(product, keyword):
    needle = keyword.lower()
    return any(needle in (value or "").lower() for value in (product.name, product.description, product.brand))


def search_products(
    keyword=None,
    category=None,
    min_price=None,
    max_price=None,
    in_stock=False,
    sort=None,
    page=1,
    page_size=DEFAULT_PAGE_SIZE,
):
    """Filter, sort and page the catalogue.

    ``keyword`` matches name, description or brand, case-insensitively.
    A ``category`` of ``"all"`` is the same as no category.

    Returns a dict with ``products``, ``page``, ``pages`` and ``total``.
    """
    key, reverse = _sort_key(sort)

    products = fetch_all(Product)
    if keyword and keyword.strip():
        products = [p for p in products if _matches_keyword(p, keyword.strip())]
    if category and category.lower() != "all":
        products = [p for p in products if p.category == category]
    if min_price is not None:
        products = [p for p in products if p.price >= min_price]
    if max_price is not None:
        products = [p for p in products if p.price <= max_price]
    if in_stock:
        products = [p for p in products if (p.count_in_stock or 0) > 0]

    products.sort(key=key, reverse=reverse)
    items, page, pages, total = paginate(products, page, page_size)
    return {"products": items, "page": page, "pages": pages, "total": total}


def featured_products(limit=DEFAULT_FEATURED_LIMIT):
    """Featured products, best rated first."""
    products = fetch_all(Product, is_featured=True)
    products.sort(key=lambda p: p.rating or 0.0, reverse=True)
    return products[:limit]


def categories():
    """Distinct categories in use, sorted by name."""
    return sorted({p.category for p in fetch_all(Product) if p.category})

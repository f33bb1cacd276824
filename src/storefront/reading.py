"""Read helpers shared by catalogue queries and reporting.

Repository queries are capped at a page of records, so full scans walk the
store page by page.
"""

from protean.utils.globals import current_domain

PAGE_SIZE = 100


def fetch_all(aggregate_cls, **filters) -> list:
    """Every record of ``aggregate_cls`` matching ``filters``."""
    dao = current_domain.repository_for(aggregate_cls)._dao
    records = []
    offset = 0
    while True:
        query = dao.query.filter(**filters) if filters else dao.query
        page = query.offset(offset).limit(PAGE_SIZE).all().items
        records.extend(page)
        if len(page) < PAGE_SIZE:
            return records
        offset += PAGE_SIZE


def paginate(records, page, page_size):
    """Slice ``records`` into 1-based pages.

    Returns ``(items, page, pages, total)``. Pages below 1 are clamped to 1;
    pages past the last one yield an empty slice.
    """
    page = max(int(page or 1), 1)
    page_size = max(int(page_size), 1)
    total = len(records)
    pages = -(-total // page_size)
    start = (page - 1) * page_size
    return records[start : start + page_size], page, pages, total

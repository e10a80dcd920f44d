"""Summary, search and sort over sale item lists."""

from collections.abc import Iterable

from storegate.models.item import SaleItem, SalesFilter, SalesSummary, SortField, SortOrder


def summarize(items: Iterable[SaleItem]) -> SalesSummary:
    """Compute totals over ``items``."""
    items = list(items)
    return SalesSummary(
        total_items=len(items),
        total_quantity=sum(item.quantity for item in items),
        total_value=round(sum(item.total_value for item in items), 2),
        categories=len({item.category for item in items}),
    )


def _matches(item: SaleItem, criteria: SalesFilter) -> bool:
    if criteria.category and item.category != criteria.category:
        return False

    # ISO dates compare correctly as strings
    if criteria.start_date or criteria.end_date:
        if not item.date:
            return False
        day = item.date[:10]
        if criteria.start_date and day < criteria.start_date[:10]:
            return False
        if criteria.end_date and day > criteria.end_date[:10]:
            return False

    if criteria.search_query:
        query = criteria.search_query.lower()
        haystacks = (item.name or "", item.description or "", item.category or "")
        if not any(query in text.lower() for text in haystacks):
            return False

    return True


def filter_items(items: Iterable[SaleItem], criteria: SalesFilter) -> list[SaleItem]:
    """Return the items matching every criterion that is set."""
    return [item for item in items if _matches(item, criteria)]


def sort_items(
    items: Iterable[SaleItem],
    field: SortField = SortField.DATE,
    order: SortOrder = SortOrder.DESC,
) -> list[SaleItem]:
    """Sort items by one field. Text fields sort case-insensitively."""
    if field is SortField.QUANTITY:
        key = lambda item: item.quantity
    elif field is SortField.UNIT_PRICE:
        key = lambda item: item.unit_price
    elif field is SortField.DATE:
        key = lambda item: item.date or ""
    elif field is SortField.CATEGORY:
        key = lambda item: (item.category or "").lower()
    else:
        key = lambda item: (item.name or "").lower()

    return sorted(items, key=key, reverse=order is SortOrder.DESC)

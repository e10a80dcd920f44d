"""Tests for sales summary, filtering and sorting."""

import pytest

from storegate.models.item import SaleItem, SalesFilter, SalesSummary, SortField, SortOrder
from storegate.services.sales import filter_items, sort_items, summarize


@pytest.fixture
def items() -> list[SaleItem]:
    return [
        SaleItem(id="a", name="Bread", description="Sourdough", quantity=10, unitPrice=2.5,
                 category="Bakery", date="2024-05-03"),
        SaleItem(id="b", name="apples", description="Granny Smith", quantity=4, unitPrice=0.75,
                 category="Produce", date="2024-05-01T08:30:00Z"),
        SaleItem(id="c", name="Croissant", description="Butter", quantity=6, unitPrice=1.8,
                 category="Bakery", date="2024-05-07"),
    ]


class TestSummarize:
    def test_totals(self, items):
        summary = summarize(items)

        assert summary.total_items == 3
        assert summary.total_quantity == 20
        assert summary.total_value == pytest.approx(25 + 3 + 10.8)
        assert summary.categories == 2

    def test_empty_list(self):
        assert summarize([]) == SalesSummary()

    def test_missing_numbers_count_as_zero(self):
        summary = summarize([SaleItem(id=1, name="Gift card")])

        assert summary.total_quantity == 0
        assert summary.total_value == 0

    def test_null_fields_count_as_zero(self):
        items = [
            SaleItem.model_validate(
                {"id": "n", "name": None, "description": None, "quantity": None,
                 "unitPrice": None, "category": None}
            ),
            SaleItem.model_validate({"id": "m", "quantity": 2, "unitPrice": 1.5, "category": "Misc"}),
        ]

        summary = summarize(items)

        assert items[0].name == ""
        assert summary.total_quantity == 2
        assert summary.total_value == 3.0
        assert summary.categories == 2

    def test_serializes_camel_case(self, items):
        assert set(summarize(items).model_dump(by_alias=True)) == {
            "totalItems",
            "totalQuantity",
            "totalValue",
            "categories",
        }


class TestFilter:
    def test_search_is_case_insensitive_across_fields(self, items):
        assert [i.id for i in filter_items(items, SalesFilter(search_query="BUTTER"))] == ["c"]
        assert [i.id for i in filter_items(items, SalesFilter(search_query="bak"))] == ["a", "c"]

    def test_category(self, items):
        assert [i.id for i in filter_items(items, SalesFilter(category="Produce"))] == ["b"]

    def test_date_bounds_are_inclusive(self, items):
        criteria = SalesFilter(start_date="2024-05-01", end_date="2024-05-03")

        assert [i.id for i in filter_items(items, criteria)] == ["a", "b"]

    def test_items_without_date_excluded_by_date_filter(self):
        undated = [SaleItem(id="x", name="Mystery")]

        assert filter_items(undated, SalesFilter(start_date="2024-01-01")) == []

    def test_no_criteria_keeps_everything(self, items):
        assert filter_items(items, SalesFilter()) == items


class TestSort:
    def test_name_ignores_case(self, items):
        result = sort_items(items, SortField.NAME, SortOrder.ASC)

        assert [i.name for i in result] == ["apples", "Bread", "Croissant"]

    def test_default_is_newest_first(self, items):
        assert [i.id for i in sort_items(items)] == ["c", "a", "b"]

    def test_unit_price_descending(self, items):
        result = sort_items(items, SortField.UNIT_PRICE, SortOrder.DESC)

        assert [i.unit_price for i in result] == [2.5, 1.8, 0.75]

from __future__ import annotations

from decimal import Decimal

import pytest

from expense_analysis.aggregation import (
    group_by_category,
    group_by_vendor,
    top_expense_categories,
    vendor_trends,
)
from expense_analysis.models import Category, RankedCategories, RankedVendors
from expense_analysis.vendors import resolve_vendor_name
from tests.helpers.records import expense


def _mixed():
    return [
        expense("25.50", "Lunch at McDonald's", Category.FOOD, "2024-01-03"),
        expense("12.00", "Gas from Shell", Category.TRANSPORTATION, "2024-01-05"),
        expense("30.25", "irrelevant", Category.FOOD, "2024-02-10", vendor="McDonald's"),
        expense("100", "", Category.SHOPPING, "2024-02-11", vendor="Amazon"),
        expense("40", "Shell - fuel", Category.TRANSPORTATION, "2024-03-01"),
        expense("15", "Movie night at Regal", Category.ENTERTAINMENT, "2024-03-02"),
        expense("8.75", "Snack from Shell", Category.FOOD, "2024-03-20"),
    ]


def test_end_to_end_vendor_grouping():
    records = [
        expense("25.50", "Lunch at McDonald's"),
        expense("30.25", "irrelevant", vendor="McDonald's"),
        expense("100", vendor="Amazon"),
    ]
    vendors = group_by_vendor(records)

    assert isinstance(vendors, RankedVendors)
    assert [v.name for v in vendors] == ["Amazon", "McDonald's"]
    amazon, mcd = vendors
    assert (amazon.total_spent, amazon.transaction_count) == (Decimal("100"), 1)
    assert (mcd.total_spent, mcd.transaction_count) == (Decimal("55.75"), 2)


def test_vendor_sum_count_and_average_invariant():
    records = _mixed()
    for v in group_by_vendor(records):
        own = [r for r in records if resolve_vendor_name(r) == v.name]
        assert v.total_spent == sum((r.amount for r in own), Decimal(0))
        assert v.transaction_count == len(own)
        assert v.average_transaction == v.total_spent / v.transaction_count


def test_vendor_dates_and_categories():
    shell = next(v for v in group_by_vendor(_mixed()) if v.name == "Shell")
    assert shell.first_transaction.isoformat() == "2024-01-05"
    assert shell.last_transaction.isoformat() == "2024-03-20"
    # first-seen order, no duplicates
    assert shell.categories == (Category.TRANSPORTATION, Category.FOOD)


def test_vendors_sorted_descending_by_spend():
    totals = [v.total_spent for v in group_by_vendor(_mixed())]
    assert totals == sorted(totals, reverse=True)


def test_equal_spend_keeps_first_encounter_order():
    records = [
        expense("10", vendor="Beta"),
        expense("10", vendor="Alpha"),
        expense("20", vendor="Gamma"),
    ]
    assert [v.name for v in group_by_vendor(records)] == ["Gamma", "Beta", "Alpha"]


def test_grouping_is_deterministic():
    records = _mixed()
    assert group_by_vendor(records) == group_by_vendor(records)
    assert group_by_category(records) == group_by_category(records)


def test_group_by_vendor_accepts_a_generator():
    vendors = group_by_vendor(r for r in _mixed())
    assert sum(v.transaction_count for v in vendors) == len(_mixed())


def test_empty_input():
    assert len(group_by_vendor([])) == 0
    assert len(group_by_category([])) == 0


def test_category_percentages_sum_to_100():
    categories = group_by_category(_mixed())
    assert isinstance(categories, RankedCategories)
    assert sum(c.percentage for c in categories) == pytest.approx(100.0)
    food = next(c for c in categories if c.category is Category.FOOD)
    assert food.total_amount == Decimal("64.50")
    assert food.expense_count == 3
    assert food.average_expense_amount == Decimal("21.50")


def test_category_percentage_is_zero_when_nothing_spent():
    categories = group_by_category([expense("0", category=Category.BILLS)])
    assert [c.percentage for c in categories] == [0.0]
    assert categories[0].average_expense_amount == Decimal(0)


def test_top_expense_categories_limits_without_renormalizing():
    records = [expense(str(10 * (i + 1)), category=c) for i, c in enumerate(Category)]
    top = top_expense_categories(records, limit=2)
    assert [c.category for c in top] == [Category.OTHER, Category.BILLS]
    # 60 + 50 out of 210
    assert sum(c.percentage for c in top) == pytest.approx(110 / 210 * 100)


def test_vendor_trends_by_month():
    trend = vendor_trends(_mixed(), "Shell")
    assert [(m.month, m.amount) for m in trend.monthly] == [
        ("2024-01", Decimal("12.00")),
        ("2024-03", Decimal("48.75")),
    ]
    assert trend.total == Decimal("60.75")


def test_vendor_trends_unknown_vendor_is_empty():
    trend = vendor_trends(_mixed(), "Nobody")
    assert trend.monthly == ()
    assert trend.total == Decimal(0)

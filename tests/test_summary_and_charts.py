from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from expense_analysis.aggregation import group_by_category, group_by_vendor
from expense_analysis.charts import PALETTE, category_chart_data, color_for, to_chart_data
from expense_analysis.models import Category, MonthKey, RankedVendors
from expense_analysis.summary import (
    available_months,
    calculate_expense_summary,
    calculate_monthly_spent,
    summarize_categories,
    summarize_vendors,
)
from tests.helpers.records import expense


def _fifteen_vendors() -> RankedVendors:
    amounts = [100, 68] + [64] * 13
    assert sum(amounts) == 1000
    return group_by_vendor(expense(str(a), vendor=f"Vendor {i:02d}") for i, a in enumerate(amounts))


def test_summarize_vendors():
    vendors = _fifteen_vendors()
    summary = summarize_vendors(vendors)
    assert summary.total_vendors == 15
    assert summary.total_spent == Decimal(1000)
    assert summary.average_spent_per_vendor == Decimal(1000) / 15
    assert summary.top_vendors == tuple(vendors[:10])


def test_summarize_vendors_empty_has_zero_average():
    summary = summarize_vendors(RankedVendors())
    assert summary.total_vendors == 0
    assert summary.total_spent == Decimal(0)
    assert summary.average_spent_per_vendor == Decimal(0)
    assert summary.top_vendors == ()


def test_chart_truncates_but_uses_full_population_percentage():
    slices = to_chart_data(_fifteen_vendors(), limit=10)
    assert len(slices) == 10
    assert slices[0].name == "Vendor 00"
    assert slices[0].percentage == pytest.approx(10.0)
    assert sum(s.percentage for s in slices) < 100


def test_chart_colors_cycle_through_palette():
    assert len(set(PALETTE)) >= 10
    slices = to_chart_data(_fifteen_vendors(), limit=15)
    assert [s.color for s in slices] == [PALETTE[i % len(PALETTE)] for i in range(15)]
    assert color_for(len(PALETTE)) == PALETTE[0]


def test_chart_of_zero_spend_is_zero_percent():
    vendors = group_by_vendor([expense("0", vendor="Free")])
    assert [s.percentage for s in to_chart_data(vendors)] == [0.0]


def test_ranked_types_reject_unsorted_input():
    vendors = _fifteen_vendors()
    with pytest.raises(ValueError):
        RankedVendors(reversed(list(vendors)))


def test_category_chart_and_breakdown():
    records = [
        expense("30", category=Category.FOOD),
        expense("50", category=Category.BILLS),
        expense("20", category=Category.FOOD),
        expense("0", category=Category.OTHER),
    ]
    categories = group_by_category(records)
    slices = category_chart_data(categories)
    assert [(s.name, s.percentage) for s in slices] == [("Food", 50.0), ("Bills", 50.0), ("Other", 0.0)]
    assert [s.color for s in slices] == list(PALETTE[:3])

    breakdown = summarize_categories(categories, limit=1)
    assert breakdown.total_spent == Decimal(100)
    assert breakdown.total_count == 4
    assert [c.category for c in breakdown.categories] == [Category.FOOD]


def test_calculate_monthly_spent():
    records = [
        expense("10", on="2024-03-01"),
        expense("15", on="2024-03-31"),
        expense("99", on="2024-04-01"),
        expense("7", on="2023-03-15"),
    ]
    assert calculate_monthly_spent(records, 3, 2024) == Decimal(25)
    assert calculate_monthly_spent(records, 5, 2024) == Decimal(0)


def test_calculate_expense_summary():
    records = [
        expense("40", category=Category.SHOPPING, on="2024-05-02"),
        expense("25", category=Category.FOOD, on="2024-05-20"),
        expense("30", category=Category.FOOD, on="2024-04-11"),
    ]
    summary = calculate_expense_summary(records, now=date(2024, 5, 25))
    assert summary.total_spent == Decimal(95)
    assert summary.monthly_spent == Decimal(65)
    assert summary.top_category is not None
    assert summary.top_category.category is Category.FOOD
    assert len(summary.category_breakdown) == 2


def test_calculate_expense_summary_empty():
    summary = calculate_expense_summary([], now=date(2024, 5, 25))
    assert summary.total_spent == Decimal(0)
    assert summary.top_category is None


def test_available_months_newest_first():
    records = [expense("1", on=d) for d in ("2024-01-03", "2023-12-30", "2024-01-20", "2024-03-01")]
    months = available_months(records)
    assert months == [MonthKey(2024, 3), MonthKey(2024, 1), MonthKey(2023, 12)]
    assert months[0].label == "2024-03"
    assert months[-1].month_name == "December"

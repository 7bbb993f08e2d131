"""Top-level statistics over aggregated vendors, categories and records.

The vendor and category reducers accept only ranked sequences and never
re-sort: "top N" is simply the first N entries.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from .aggregation import average_of, group_by_category
from .models import (
    CategoryBreakdown,
    ExpenseRecord,
    ExpenseSummary,
    MonthKey,
    RankedCategories,
    RankedVendors,
    VendorSummary,
)

TOP_VENDORS = 10


def summarize_vendors(vendors: RankedVendors, *, top: int = TOP_VENDORS) -> VendorSummary:
    total = vendors.total()
    return VendorSummary(
        total_vendors=len(vendors),
        total_spent=total,
        average_spent_per_vendor=average_of(total, len(vendors)),
        top_vendors=tuple(vendors[:top]),
    )


def summarize_categories(
    categories: RankedCategories, limit: int | None = None
) -> CategoryBreakdown:
    """Totals across categories plus the ranked list (truncated to ``limit``)."""

    shown = categories[:limit] if limit is not None else categories[:]
    return CategoryBreakdown(
        total_spent=categories.total(),
        total_count=sum(c.expense_count for c in categories),
        categories=tuple(shown),
    )


def calculate_monthly_spent(records: Iterable[ExpenseRecord], month: int, year: int) -> Decimal:
    """Total spent in calendar ``month`` (1-12) of ``year``."""

    return sum(
        (r.amount for r in records if r.date.month == month and r.date.year == year),
        Decimal(0),
    )


def calculate_expense_summary(records: Iterable[ExpenseRecord], *, now: date) -> ExpenseSummary:
    """Dashboard summary: overall total, spend in ``now``'s month, top category."""

    items = list(records)
    breakdown = group_by_category(items)
    return ExpenseSummary(
        total_spent=breakdown.total(),
        monthly_spent=calculate_monthly_spent(items, now.month, now.year),
        top_category=breakdown[0] if breakdown else None,
        category_breakdown=tuple(breakdown),
    )


def available_months(records: Iterable[ExpenseRecord]) -> list[MonthKey]:
    """Distinct months that have at least one record, newest first."""

    months = {MonthKey(year=r.date.year, month=r.date.month) for r in records}
    return sorted(months, reverse=True)


__all__ = [
    "TOP_VENDORS",
    "available_months",
    "calculate_expense_summary",
    "calculate_monthly_spent",
    "summarize_categories",
    "summarize_vendors",
]

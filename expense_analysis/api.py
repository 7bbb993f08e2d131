"""Composed views over the aggregation core.

Each function here chains the pure building blocks in the order the
presentation layer needs them (filter -> aggregate -> rank -> summarize /
chart) and returns one immutable report object. Nothing is cached; every
call recomputes from the records it is given.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .aggregation import group_by_vendor
from .charts import DEFAULT_SLICES, category_chart_data, to_chart_data
from .filters import filter_vendors
from .models import (
    CategoryBreakdown,
    ChartSlice,
    ExpenseRecord,
    RankedVendors,
    VendorFilters,
    VendorSummary,
)
from .periods import Period, categories_for_period, period_bounds
from .summary import summarize_categories, summarize_vendors


@dataclass(frozen=True, slots=True)
class VendorReport:
    vendors: RankedVendors
    summary: VendorSummary
    chart: tuple[ChartSlice, ...]


@dataclass(frozen=True, slots=True)
class CategoryReport:
    period: Period
    start: date | None
    end: date | None
    breakdown: CategoryBreakdown
    chart: tuple[ChartSlice, ...]


def build_vendor_report(
    records: Iterable[ExpenseRecord],
    filters: VendorFilters | None = None,
    *,
    chart_limit: int = DEFAULT_SLICES,
) -> VendorReport:
    """Vendors matching ``filters`` with their summary and chart slices.

    The summary and chart are computed over the filtered vendors, so chart
    percentages are shares of the filtered population.
    """

    vendors = group_by_vendor(records)
    if filters is not None:
        vendors = filter_vendors(vendors, filters)
    return VendorReport(
        vendors=vendors,
        summary=summarize_vendors(vendors),
        chart=tuple(to_chart_data(vendors, chart_limit)),
    )


def build_category_report(
    records: Iterable[ExpenseRecord],
    period: Period = Period.ALL_TIME,
    *,
    now: date,
    start: date | None = None,
    end: date | None = None,
    limit: int | None = None,
) -> CategoryReport:
    """Category breakdown for ``period`` relative to ``now``."""

    lo, hi = period_bounds(period, now=now, start=start, end=end)
    ranked = categories_for_period(records, period, now=now, start=start, end=end)
    return CategoryReport(
        period=period,
        start=lo,
        end=hi,
        breakdown=summarize_categories(ranked, limit),
        chart=tuple(category_chart_data(ranked, limit)),
    )


__all__ = ["CategoryReport", "VendorReport", "build_category_report", "build_vendor_report"]

"""Public interface for the ``expense_analysis`` package.

This module re-exports the aggregation core (vendor resolution, grouping,
filtering, summaries, chart slices, period breakdowns) and the public models
as the stable import surface. There is no runtime logic here.
"""

from .aggregation import group_by_category, group_by_vendor, top_expense_categories, vendor_trends
from .api import CategoryReport, VendorReport, build_category_report, build_vendor_report
from .charts import PALETTE, category_chart_data, to_chart_data
from .filters import filter_by_date_range, filter_expenses, filter_vendors
from .models import (
    ALL_CATEGORIES,
    Category,
    CategoryBreakdown,
    CategorySummary,
    ChartSlice,
    ExpenseFilters,
    ExpenseRecord,
    ExpenseSummary,
    InvalidExpenseError,
    RankedCategories,
    RankedVendors,
    Vendor,
    VendorFilters,
    VendorSummary,
    new_expense,
    parse_expense,
)
from .periods import Period, categories_for_period, period_bounds
from .summary import (
    available_months,
    calculate_expense_summary,
    calculate_monthly_spent,
    summarize_categories,
    summarize_vendors,
)
from .vendors import extract_vendor_name, resolve_vendor_name

__all__ = [
    # Vendor resolution
    "extract_vendor_name",
    "resolve_vendor_name",
    # Aggregation
    "group_by_category",
    "group_by_vendor",
    "top_expense_categories",
    "vendor_trends",
    # Filters
    "filter_by_date_range",
    "filter_expenses",
    "filter_vendors",
    # Summaries / charts / periods
    "available_months",
    "calculate_expense_summary",
    "calculate_monthly_spent",
    "categories_for_period",
    "category_chart_data",
    "period_bounds",
    "summarize_categories",
    "summarize_vendors",
    "to_chart_data",
    "PALETTE",
    "Period",
    # Composed reports
    "CategoryReport",
    "VendorReport",
    "build_category_report",
    "build_vendor_report",
    # Models / types
    "ALL_CATEGORIES",
    "Category",
    "CategoryBreakdown",
    "CategorySummary",
    "ChartSlice",
    "ExpenseFilters",
    "ExpenseRecord",
    "ExpenseSummary",
    "InvalidExpenseError",
    "RankedCategories",
    "RankedVendors",
    "Vendor",
    "VendorFilters",
    "VendorSummary",
    "new_expense",
    "parse_expense",
]

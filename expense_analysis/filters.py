"""Declarative filtering of vendors and raw expense records.

Every filter returns an order-preserving subsequence of its input. Absent
fields in a filter object impose no constraint; present ones are ANDed.

Date constraints on *vendors* use overlap semantics: a vendor matches
``start_date`` when its last transaction is on or after it, and ``end_date``
when its first transaction is on or before it. A vendor whose history spans
beyond the window but touches it therefore still matches.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import overload

from .models import (
    ALL_CATEGORIES,
    CategoryFilter,
    ExpenseFilters,
    ExpenseRecord,
    RankedVendors,
    Vendor,
    VendorFilters,
)


def _category_constraint(value: CategoryFilter | None) -> CategoryFilter | None:
    if value is None or value == ALL_CATEGORIES:
        return None
    return value


def _search_constraint(query: str | None) -> str | None:
    return query.lower() if query else None


def vendor_matches(vendor: Vendor, filters: VendorFilters) -> bool:
    category = _category_constraint(filters.category)
    if category is not None and category not in vendor.categories:
        return False
    if filters.min_spent is not None and vendor.total_spent < filters.min_spent:
        return False
    if filters.max_spent is not None and vendor.total_spent > filters.max_spent:
        return False
    if filters.start_date is not None and vendor.last_transaction < filters.start_date:
        return False
    if filters.end_date is not None and vendor.first_transaction > filters.end_date:
        return False
    query = _search_constraint(filters.search_query)
    if query is not None and query not in vendor.name.lower():
        return False
    return True


@overload
def filter_vendors(vendors: RankedVendors, filters: VendorFilters) -> RankedVendors: ...


@overload
def filter_vendors(vendors: Iterable[Vendor], filters: VendorFilters) -> list[Vendor]: ...


def filter_vendors(vendors, filters):
    """Return the vendors matching every constraint in ``filters``.

    A :class:`RankedVendors` input yields a :class:`RankedVendors` result (a
    subsequence of a ranked sequence is still ranked); any other iterable
    yields a list.
    """

    matched = [v for v in vendors if vendor_matches(v, filters)]
    if isinstance(vendors, RankedVendors):
        return RankedVendors(matched)
    return matched


def expense_matches(record: ExpenseRecord, filters: ExpenseFilters) -> bool:
    category = _category_constraint(filters.category)
    if category is not None and record.category != category:
        return False
    if not in_date_range(record.date, filters.start_date, filters.end_date):
        return False
    query = _search_constraint(filters.search_query)
    if query is not None:
        haystacks = [record.description, record.category.value, record.vendor or ""]
        if not any(query in h.lower() for h in haystacks):
            return False
    return True


def filter_expenses(records: Iterable[ExpenseRecord], filters: ExpenseFilters) -> list[ExpenseRecord]:
    """Records matching category, date range and free-text search.

    The search is a case-insensitive substring match against the description,
    the category name and the explicit vendor.
    """

    return [r for r in records if expense_matches(r, filters)]


def in_date_range(d: date, start: date | None, end: date | None) -> bool:
    return (start is None or d >= start) and (end is None or d <= end)


def filter_by_date_range(
    records: Iterable[ExpenseRecord],
    start: date | None = None,
    end: date | None = None,
) -> list[ExpenseRecord]:
    """Records whose date lies in ``[start, end]``; a missing bound is open."""

    return [r for r in records if in_date_range(r.date, start, end)]


__all__ = [
    "expense_matches",
    "filter_by_date_range",
    "filter_expenses",
    "filter_vendors",
    "in_date_range",
    "vendor_matches",
]

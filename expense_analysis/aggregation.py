"""Group expense records by vendor or category and compute per-group stats.

All functions are pure: they read the input records once and return freshly
built, deterministically ordered results. Ordering is descending by spend;
groups with equal spend keep the order in which their first record appeared
in the input (Python's sort is stable).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from .logging_setup import get_logger
from .models import (
    Category,
    CategorySummary,
    ExpenseRecord,
    MonthlyAmount,
    RankedCategories,
    RankedVendors,
    Vendor,
    VendorTrend,
)
from .vendors import resolve_vendor_name

logger = get_logger(__name__)

_ZERO = Decimal(0)


def percentage_of(part: Decimal, whole: Decimal) -> float:
    """``part / whole * 100`` as a float; 0 when ``whole`` is 0."""

    if not whole:
        return 0.0
    return float(part / whole * 100)


def average_of(total: Decimal, count: int) -> Decimal:
    return total / count if count else _ZERO


@dataclass(slots=True)
class _VendorAccumulator:
    total: Decimal = _ZERO
    count: int = 0
    categories: dict[Category, None] = field(default_factory=dict)
    first: date | None = None
    last: date | None = None

    def add(self, record: ExpenseRecord) -> None:
        self.total += record.amount
        self.count += 1
        self.categories.setdefault(record.category, None)
        if self.first is None or record.date < self.first:
            self.first = record.date
        if self.last is None or record.date > self.last:
            self.last = record.date

    def to_vendor(self, name: str) -> Vendor:
        assert self.first is not None and self.last is not None  # count >= 1
        return Vendor(
            name=name,
            total_spent=self.total,
            transaction_count=self.count,
            categories=tuple(self.categories),
            average_transaction=average_of(self.total, self.count),
            first_transaction=self.first,
            last_transaction=self.last,
        )


def group_by_vendor(records: Iterable[ExpenseRecord]) -> RankedVendors:
    """Aggregate ``records`` into vendors keyed by :func:`resolve_vendor_name`.

    Records with different raw text but the same resolved name merge into one
    vendor, e.g. an explicit ``vendor="Acme"`` and a description
    ``"Parts from Acme"``.
    """

    groups: dict[str, _VendorAccumulator] = {}
    n_records = 0
    for record in records:
        n_records += 1
        name = resolve_vendor_name(record)
        acc = groups.get(name)
        if acc is None:
            acc = groups[name] = _VendorAccumulator()
        acc.add(record)

    vendors = RankedVendors.rank(acc.to_vendor(name) for name, acc in groups.items())
    logger.debug("Grouped %d records into %d vendors", n_records, len(vendors))
    return vendors


def group_by_category(records: Iterable[ExpenseRecord]) -> RankedCategories:
    """Aggregate ``records`` by category.

    ``percentage`` is computed against the total of the records passed in, so
    a period-filtered subset always sums to 100 (or is all zeros when nothing
    was spent).
    """

    totals: dict[Category, Decimal] = {}
    counts: dict[Category, int] = {}
    for record in records:
        totals[record.category] = totals.get(record.category, _ZERO) + record.amount
        counts[record.category] = counts.get(record.category, 0) + 1

    overall = sum(totals.values(), _ZERO)
    summaries = [
        CategorySummary(
            category=category,
            total_amount=total,
            expense_count=counts[category],
            percentage=percentage_of(total, overall),
            average_expense_amount=average_of(total, counts[category]),
        )
        for category, total in totals.items()
    ]
    ranked = RankedCategories.rank(summaries)
    logger.debug("Grouped %d records into %d categories", sum(counts.values()), len(ranked))
    return ranked


def top_expense_categories(records: Iterable[ExpenseRecord], limit: int = 6) -> RankedCategories:
    """The ``limit`` highest-spend categories.

    Percentages stay relative to all of ``records``, not just the returned
    subset.
    """

    return RankedCategories(group_by_category(records)[:limit])


def month_label(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def vendor_trends(records: Iterable[ExpenseRecord], vendor_name: str) -> VendorTrend:
    """Monthly spend for one resolved vendor, oldest month first."""

    monthly: dict[str, Decimal] = {}
    total = _ZERO
    for record in records:
        if resolve_vendor_name(record) != vendor_name:
            continue
        key = month_label(record.date)
        monthly[key] = monthly.get(key, _ZERO) + record.amount
        total += record.amount

    return VendorTrend(
        monthly=tuple(MonthlyAmount(month=m, amount=monthly[m]) for m in sorted(monthly)),
        total=total,
    )


__all__ = [
    "average_of",
    "group_by_category",
    "group_by_vendor",
    "month_label",
    "percentage_of",
    "top_expense_categories",
    "vendor_trends",
]

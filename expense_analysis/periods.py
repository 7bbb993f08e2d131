"""Period-scoped category breakdowns.

The reference "today" is always passed in by the caller; nothing here reads
the system clock, so results are reproducible in tests.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta
from enum import StrEnum

from .aggregation import group_by_category
from .filters import filter_by_date_range
from .models import ExpenseRecord, RankedCategories

LAST_N_DAYS = 30


class Period(StrEnum):
    ALL_TIME = "all"
    CURRENT_MONTH = "current-month"
    LAST_30_DAYS = "last-30-days"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Period.ALL_TIME: "All Time",
    Period.CURRENT_MONTH: "This Month",
    Period.LAST_30_DAYS: "Last 30 Days",
    Period.CUSTOM: "Custom Range",
}


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def period_bounds(
    period: Period,
    *,
    now: date,
    start: date | None = None,
    end: date | None = None,
) -> tuple[date | None, date | None]:
    """Return the inclusive ``(start, end)`` window for ``period``.

    - ``all``: unbounded on both sides.
    - ``current-month``: first to last calendar day of ``now``'s month.
    - ``last-30-days``: ``now - 30 days`` through ``now``.
    - ``custom``: the caller's ``start``/``end``, either of which may be open.
    """

    if period is Period.ALL_TIME:
        return None, None
    if period is Period.CURRENT_MONTH:
        return month_bounds(now.year, now.month)
    if period is Period.LAST_30_DAYS:
        return now - timedelta(days=LAST_N_DAYS), now
    if period is Period.CUSTOM:
        return start, end
    raise ValueError(f"unknown period: {period!r}")


def categories_for_period(
    records: Iterable[ExpenseRecord],
    period: Period,
    *,
    now: date,
    start: date | None = None,
    end: date | None = None,
    limit: int | None = None,
) -> RankedCategories:
    """Category breakdown of the records falling inside ``period``.

    Percentages are relative to the in-period total.
    """

    lo, hi = period_bounds(period, now=now, start=start, end=end)
    scoped = filter_by_date_range(records, lo, hi)
    ranked = group_by_category(scoped)
    if limit is None:
        return ranked
    return RankedCategories(ranked[:limit])


__all__ = ["LAST_N_DAYS", "Period", "categories_for_period", "month_bounds", "period_bounds"]

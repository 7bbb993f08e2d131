"""CSV and JSON renderings of expenses and vendor aggregates.

Formatting only: these helpers consume records and core outputs and never
aggregate on their own beyond calling into :mod:`expense_analysis.aggregation`.
CSV output quotes every cell and joins rows with ``\\n`` (no trailing
newline), matching the format users already have in existing exports.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from .aggregation import group_by_category
from .models import ExpenseRecord, Vendor, expense_to_dict

VENDOR_CSV_HEADERS = (
    "Vendor Name",
    "Total Spent",
    "Transaction Count",
    "Average Transaction",
    "Categories",
    "First Transaction",
    "Last Transaction",
)
EXPENSE_CSV_HEADERS = ("Date", "Description", "Category", "Amount")


def fmt_amount(d: Decimal) -> str:
    return f"{d.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):.2f}"


def fmt_display_date(d: date) -> str:
    """``Jan 5, 2024`` style date."""

    return f"{d.strftime('%b')} {d.day}, {d.year}"


def _write_rows(rows: Iterable[Sequence[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue().removesuffix("\n")


def vendors_to_csv(vendors: Iterable[Vendor]) -> str:
    rows: list[Sequence[str]] = [VENDOR_CSV_HEADERS]
    for v in vendors:
        rows.append(
            (
                v.name,
                fmt_amount(v.total_spent),
                str(v.transaction_count),
                fmt_amount(v.average_transaction),
                ", ".join(c.value for c in v.categories),
                v.first_transaction.isoformat(),
                v.last_transaction.isoformat(),
            )
        )
    return _write_rows(rows)


def expenses_to_csv(records: Iterable[ExpenseRecord]) -> str:
    rows: list[Sequence[str]] = [EXPENSE_CSV_HEADERS]
    for r in records:
        rows.append((fmt_display_date(r.date), r.description, r.category.value, str(r.amount)))
    return _write_rows(rows)


def expenses_to_json(
    records: Iterable[ExpenseRecord],
    *,
    exported_at: datetime,
    title: str = "Expense Tracker Export",
) -> str:
    """JSON document with export metadata, category breakdown and records.

    Records are listed newest first.
    """

    items = sorted(records, key=lambda r: r.date, reverse=True)
    breakdown = group_by_category(items)
    dates = [r.date for r in items]

    payload: dict[str, Any] = {
        "metadata": {
            "title": title,
            "exportDate": exported_at.isoformat(),
            "format": "json",
            "recordCount": len(items),
            "totalAmount": fmt_amount(breakdown.total()),
            "dateRange": {
                "earliest": min(dates).isoformat() if dates else None,
                "latest": max(dates).isoformat() if dates else None,
            },
        },
        "categoryBreakdown": [
            {
                "category": c.category.value,
                "amount": fmt_amount(c.total_amount),
                "count": c.expense_count,
                "percentage": round(c.percentage, 2),
            }
            for c in breakdown
        ],
        "expenses": [expense_to_dict(r) for r in items],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


__all__ = [
    "EXPENSE_CSV_HEADERS",
    "VENDOR_CSV_HEADERS",
    "expenses_to_csv",
    "expenses_to_json",
    "fmt_amount",
    "fmt_display_date",
    "vendors_to_csv",
]

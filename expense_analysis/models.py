"""Data models and boundary parsing for ``expense_analysis``.

Records are immutable ``dataclass`` values. Amounts are ``Decimal`` so sums
and averages stay exact; percentages are plain ``float`` because they only
feed presentation. Derived entities (:class:`Vendor`,
:class:`CategorySummary`, ...) are rebuilt on every aggregation call and are
never persisted.

The aggregation core assumes well-formed records. Validation happens once, at
the data-entry boundary, in :func:`parse_expense` and :func:`new_expense`.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import StrEnum
from typing import Any, Literal, overload

# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class Category(StrEnum):
    """Closed set of expense categories."""

    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    OTHER = "Other"


ALL_CATEGORIES = "All"
"""Filter sentinel meaning "no category constraint"."""

type CategoryFilter = Category | Literal["All"]


class InvalidExpenseError(ValueError):
    """Raised at the data-entry boundary for records the core must not see."""


# ---------------------------------------------------------------------------
# Input record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExpenseRecord:
    """A single recorded expense.

    Attributes
    ----------
    id:
        Opaque unique identifier.
    amount:
        Non-negative monetary value.
    description:
        Free text; may be empty.
    category:
        One of :class:`Category`.
    date:
        Calendar date of the expense, used for ordering and range filters.
    vendor:
        Optional explicit vendor. ``None``, ``""`` and whitespace-only values
        all mean "not provided".
    created_at, updated_at:
        Bookkeeping timestamps; not used by aggregation.
    """

    id: str
    amount: Decimal
    description: str
    category: Category
    date: date
    vendor: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Derived entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Vendor:
    """Per-vendor statistics derived from the records resolving to ``name``."""

    name: str
    total_spent: Decimal
    transaction_count: int
    categories: tuple[Category, ...]
    average_transaction: Decimal
    first_transaction: date
    last_transaction: date


@dataclass(frozen=True, slots=True)
class CategorySummary:
    """Per-category totals; ``percentage`` is relative to the input subset."""

    category: Category
    total_amount: Decimal
    expense_count: int
    percentage: float
    average_expense_amount: Decimal


@dataclass(frozen=True, slots=True)
class ChartSlice:
    name: str
    amount: Decimal
    percentage: float
    color: str


@dataclass(frozen=True, slots=True, order=True)
class MonthKey:
    """A calendar month, ordered chronologically."""

    year: int
    month: int

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def month_name(self) -> str:
        return date(self.year, self.month, 1).strftime("%B")


@dataclass(frozen=True, slots=True)
class MonthlyAmount:
    month: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class VendorTrend:
    monthly: tuple[MonthlyAmount, ...]
    total: Decimal


# ---------------------------------------------------------------------------
# Ranked sequences
# ---------------------------------------------------------------------------


class _Ranked[T](Sequence[T]):
    """Immutable sequence guaranteed to be non-increasing by spend.

    Construction validates the ordering and raises ``ValueError`` for unsorted
    input; :meth:`rank` sorts first. Consumers that take "the top N" accept
    only these types so they never silently truncate unsorted data.
    """

    __slots__ = ("_items",)

    @staticmethod
    def _spend(item: Any) -> Decimal:  # pragma: no cover - overridden
        raise NotImplementedError

    def __init__(self, items: Iterable[T] = ()) -> None:
        seq = tuple(items)
        for prev, cur in zip(seq, seq[1:], strict=False):
            if self._spend(cur) > self._spend(prev):
                raise ValueError(
                    f"{type(self).__name__} requires items sorted by spend (descending)"
                )
        self._items = seq

    @classmethod
    def rank(cls, items: Iterable[T]):
        """Sort ``items`` by spend, descending; equal spends keep input order."""

        return cls(sorted(items, key=cls._spend, reverse=True))

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[T, ...]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, _Ranked):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == tuple(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items)!r})"

    def total(self) -> Decimal:
        return sum((self._spend(i) for i in self._items), Decimal(0))


class RankedVendors(_Ranked[Vendor]):
    __slots__ = ()

    @staticmethod
    def _spend(item: Vendor) -> Decimal:
        return item.total_spent


class RankedCategories(_Ranked[CategorySummary]):
    __slots__ = ()

    @staticmethod
    def _spend(item: CategorySummary) -> Decimal:
        return item.total_amount


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VendorSummary:
    total_vendors: int
    total_spent: Decimal
    average_spent_per_vendor: Decimal
    top_vendors: tuple[Vendor, ...]


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    total_spent: Decimal
    total_count: int
    categories: tuple[CategorySummary, ...]


@dataclass(frozen=True, slots=True)
class ExpenseSummary:
    total_spent: Decimal
    monthly_spent: Decimal
    top_category: CategorySummary | None
    category_breakdown: tuple[CategorySummary, ...]


# ---------------------------------------------------------------------------
# Filter specifications
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VendorFilters:
    """Declarative vendor filter; every ``None`` field is unconstrained.

    Present constraints combine with logical AND.
    """

    category: CategoryFilter | None = None
    min_spent: Decimal | None = None
    max_spent: Decimal | None = None
    start_date: date | None = None
    end_date: date | None = None
    search_query: str | None = None


@dataclass(frozen=True, slots=True)
class ExpenseFilters:
    category: CategoryFilter | None = None
    start_date: date | None = None
    end_date: date | None = None
    search_query: str | None = None


# ---------------------------------------------------------------------------
# Boundary parsing
# ---------------------------------------------------------------------------

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
CENTS = Decimal("0.01")
# Numeric(18, 2) leaves 16 integer digits.
MAX_AMOUNT = Decimal(10) ** 16


def normalize_vendor(raw: str | None) -> str | None:
    """Collapse absent, empty and whitespace-only vendors to ``None``."""

    if raw is None:
        return None
    s = raw.strip()
    return s or None


def parse_category(raw: Any) -> Category:
    if isinstance(raw, Category):
        return raw
    try:
        return Category(str(raw).strip())
    except ValueError as exc:
        allowed = ", ".join(c.value for c in Category)
        raise InvalidExpenseError(f"unknown category {raw!r}; expected one of: {allowed}") from exc


def parse_amount(raw: Any) -> Decimal:
    """Non-negative amount rounded half-up to cents, the precision the store keeps."""

    if isinstance(raw, bool):
        raise InvalidExpenseError(f"invalid amount: {raw!r}")
    try:
        d = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidExpenseError(f"invalid amount: {raw!r}") from exc
    if not d.is_finite():
        raise InvalidExpenseError(f"invalid amount: {raw!r}")
    if d < 0:
        raise InvalidExpenseError(f"amount must be non-negative, got {raw!r}")
    if d >= MAX_AMOUNT:
        raise InvalidExpenseError(f"amount too large: {raw!r}")
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_date(raw: Any) -> date:
    """Accept a ``date`` or a zero-padded ``YYYY-MM-DD`` string."""

    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    s = str(raw).strip() if raw is not None else ""
    if not _ISO_DATE_RE.match(s):
        raise InvalidExpenseError(f"date must be YYYY-MM-DD, got {raw!r}")
    try:
        return date.fromisoformat(s)
    except ValueError as exc:
        raise InvalidExpenseError(f"invalid calendar date: {raw!r}") from exc


def to_utc_naive(ts: datetime) -> datetime:
    """Aware timestamps become naive UTC; naive ones are taken as UTC already.

    Stored timestamps carry no offset (SQLite drops it), so every timestamp is
    normalized here before it reaches a record.
    """

    if ts.tzinfo is None:
        return ts
    return ts.astimezone(UTC).replace(tzinfo=None)


def _parse_timestamp(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return to_utc_naive(raw)
    try:
        parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidExpenseError(f"invalid timestamp: {raw!r}") from exc
    return to_utc_naive(parsed)


def parse_expense(row: Mapping[str, Any]) -> ExpenseRecord:
    """Build a validated :class:`ExpenseRecord` from a raw mapping.

    Accepts both snake_case and the camelCase keys used by JSON exports
    (``createdAt``/``updatedAt``).
    """

    raw_id = row.get("id")
    if raw_id is None or not str(raw_id).strip():
        raise InvalidExpenseError("expense id is required")
    return ExpenseRecord(
        id=str(raw_id).strip(),
        amount=parse_amount(row.get("amount")),
        description=str(row.get("description") or ""),
        category=parse_category(row.get("category")),
        date=parse_date(row.get("date")),
        vendor=normalize_vendor(row.get("vendor")),
        created_at=_parse_timestamp(row.get("created_at", row.get("createdAt"))),
        updated_at=_parse_timestamp(row.get("updated_at", row.get("updatedAt"))),
    )


def new_expense(
    *,
    amount: Any,
    description: str,
    category: Any,
    date: Any,
    vendor: str | None = None,
    now: datetime,
) -> ExpenseRecord:
    """Create a fresh record with a generated id and matching timestamps."""

    return ExpenseRecord(
        id=uuid.uuid4().hex,
        amount=parse_amount(amount),
        description=description,
        category=parse_category(category),
        date=parse_date(date),
        vendor=normalize_vendor(vendor),
        created_at=to_utc_naive(now),
        updated_at=to_utc_naive(now),
    )


def expense_to_dict(record: ExpenseRecord) -> dict[str, Any]:
    """JSON-friendly mapping; inverse of :func:`parse_expense`."""

    return {
        "id": record.id,
        "amount": str(record.amount),
        "description": record.description,
        "category": record.category.value,
        "date": record.date.isoformat(),
        "vendor": record.vendor,
        "createdAt": record.created_at.isoformat() if record.created_at else None,
        "updatedAt": record.updated_at.isoformat() if record.updated_at else None,
    }


__all__ = [
    "ALL_CATEGORIES",
    "Category",
    "CategoryBreakdown",
    "CategoryFilter",
    "CategorySummary",
    "ChartSlice",
    "ExpenseFilters",
    "ExpenseRecord",
    "ExpenseSummary",
    "InvalidExpenseError",
    "MonthKey",
    "MonthlyAmount",
    "RankedCategories",
    "RankedVendors",
    "Vendor",
    "VendorFilters",
    "VendorSummary",
    "VendorTrend",
    "expense_to_dict",
    "new_expense",
    "normalize_vendor",
    "parse_amount",
    "parse_category",
    "parse_date",
    "parse_expense",
    "to_utc_naive",
]

"""Expense persistence behind a small, injectable interface.

The aggregation core never touches storage; callers load records through an
:class:`ExpenseStore`, pass them to the core, and write changes back. Two
implementations are provided:

- :class:`SqlExpenseStore`: SQLAlchemy ORM over the ``expenses`` table.
- :class:`InMemoryExpenseStore`: list-backed, for tests and embedding.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .db.client import session_scope
from .db.models import ExpenseRow
from .logging_setup import get_logger
from .models import Category, ExpenseRecord, normalize_vendor, to_utc_naive

logger = get_logger(__name__)


class DuplicateExpenseError(ValueError):
    """Raised when an added record reuses an id already in the store."""

    def __init__(self, ids: Iterable[str]) -> None:
        self.ids = tuple(ids)
        super().__init__("expense id(s) already stored: " + ", ".join(self.ids))


def _repeated_ids(records: Sequence[ExpenseRecord], existing: set[str]) -> list[str]:
    seen = set(existing)
    repeated: list[str] = []
    for r in records:
        if r.id in seen:
            repeated.append(r.id)
        seen.add(r.id)
    return repeated


@runtime_checkable
class ExpenseStore(Protocol):
    def load_expenses(self) -> list[ExpenseRecord]: ...

    def save_expenses(self, records: Iterable[ExpenseRecord]) -> None: ...

    def add_expense(self, record: ExpenseRecord) -> None: ...

    def add_expenses(self, records: Iterable[ExpenseRecord]) -> None: ...

    def update_expense(self, record: ExpenseRecord) -> bool: ...

    def delete_expense(self, expense_id: str) -> bool: ...

    def clear(self) -> None: ...


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class InMemoryExpenseStore:
    """List-backed store preserving insertion order."""

    def __init__(self, records: Iterable[ExpenseRecord] = ()) -> None:
        self._records: list[ExpenseRecord] = list(records)

    def load_expenses(self) -> list[ExpenseRecord]:
        return list(self._records)

    def save_expenses(self, records: Iterable[ExpenseRecord]) -> None:
        items = list(records)
        repeated = _repeated_ids(items, set())
        if repeated:
            raise DuplicateExpenseError(repeated)
        self._records = items

    def add_expense(self, record: ExpenseRecord) -> None:
        self.add_expenses([record])

    def add_expenses(self, records: Iterable[ExpenseRecord]) -> None:
        """Append ``records``; nothing is added when any id is already taken."""

        items = list(records)
        repeated = _repeated_ids(items, {r.id for r in self._records})
        if repeated:
            raise DuplicateExpenseError(repeated)
        self._records.extend(items)

    def update_expense(self, record: ExpenseRecord) -> bool:
        for i, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records[i] = record
                return True
        return False

    def delete_expense(self, expense_id: str) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != expense_id]
        return len(self._records) != before

    def clear(self) -> None:
        self._records = []


# ---------------------------------------------------------------------------
# SQLAlchemy
# ---------------------------------------------------------------------------


def _to_row(record: ExpenseRecord) -> ExpenseRow:
    return ExpenseRow(
        id=record.id,
        amount=record.amount,
        description=record.description,
        category=record.category.value,
        date=record.date,
        vendor=normalize_vendor(record.vendor),
        created_at=_stored_ts(record.created_at),
        updated_at=_stored_ts(record.updated_at),
    )


def _stored_ts(ts: datetime | None) -> datetime | None:
    return to_utc_naive(ts) if ts is not None else None


def _to_record(row: ExpenseRow) -> ExpenseRecord:
    return ExpenseRecord(
        id=row.id,
        amount=row.amount,
        description=row.description,
        category=Category(row.category),
        date=row.date,
        vendor=row.vendor,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlExpenseStore:
    """Store backed by the ``expenses`` table.

    Each public method runs in its own short transaction. Rows are returned
    ordered by ``(date, created_at, id)`` so repeated loads are stable.
    """

    def __init__(self, *, database_url: str | None = None) -> None:
        self.database_url = database_url

    def _scope(self):
        return session_scope(database_url=self.database_url)

    @staticmethod
    def _load(session: Session) -> list[ExpenseRecord]:
        stmt = select(ExpenseRow).order_by(
            ExpenseRow.date, ExpenseRow.created_at, ExpenseRow.id
        )
        return [_to_record(row) for row in session.scalars(stmt)]

    def load_expenses(self) -> list[ExpenseRecord]:
        with self._scope() as session:
            return self._load(session)

    def save_expenses(self, records: Iterable[ExpenseRecord]) -> None:
        """Replace the stored collection with ``records``."""

        items: Sequence[ExpenseRecord] = list(records)
        repeated = _repeated_ids(items, set())
        if repeated:
            raise DuplicateExpenseError(repeated)
        with self._scope() as session:
            session.execute(delete(ExpenseRow))
            session.add_all(_to_row(r) for r in items)
        logger.info("Saved %d expenses", len(items))

    def add_expense(self, record: ExpenseRecord) -> None:
        self.add_expenses([record])

    def add_expenses(self, records: Iterable[ExpenseRecord]) -> None:
        """Insert ``records`` in one transaction.

        Ids already stored (or repeated within ``records``) raise
        :class:`DuplicateExpenseError` and nothing is written.
        """

        items: Sequence[ExpenseRecord] = list(records)
        with self._scope() as session:
            ids = [r.id for r in items]
            taken = set(session.scalars(select(ExpenseRow.id).where(ExpenseRow.id.in_(ids))))
            repeated = _repeated_ids(items, taken)
            if repeated:
                raise DuplicateExpenseError(repeated)
            session.add_all(_to_row(r) for r in items)
        logger.info("Added %d expense(s)", len(items))

    def update_expense(self, record: ExpenseRecord) -> bool:
        """Overwrite the row with ``record.id``; ``False`` when it does not exist."""

        with self._scope() as session:
            if session.get(ExpenseRow, record.id) is None:
                return False
            session.merge(_to_row(record))
        logger.info("Updated expense %s", record.id)
        return True

    def delete_expense(self, expense_id: str) -> bool:
        with self._scope() as session:
            result = session.execute(delete(ExpenseRow).where(ExpenseRow.id == expense_id))
            deleted = bool(result.rowcount)
        if deleted:
            logger.info("Deleted expense %s", expense_id)
        return deleted

    def clear(self) -> None:
        with self._scope() as session:
            session.execute(delete(ExpenseRow))
        logger.info("Cleared all expenses")


__all__ = ["DuplicateExpenseError", "ExpenseStore", "InMemoryExpenseStore", "SqlExpenseStore"]

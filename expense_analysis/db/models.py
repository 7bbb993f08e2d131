"""ORM model for persisted expenses.

Only input records are stored. Vendors and category summaries are derived on
every read and have no table.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..models import Category

CATEGORY_VALUES = tuple(c.value for c in Category)


class Base(DeclarativeBase):
    pass


class ExpenseRow(Base):
    __tablename__ = "expenses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    # NULL when not provided; blank strings are normalized away before insert.
    vendor: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Naive UTC (see models.to_utc_naive).
    created_at: Mapped[datetime | None] = mapped_column(DateTime(), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(), nullable=True)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_expenses_amount_non_negative"),
        CheckConstraint(
            "category in (" + ", ".join(f"'{c}'" for c in CATEGORY_VALUES) + ")",
            name="ck_expenses_category",
        ),
        Index("ix_expenses_date", "date"),
    )


__all__ = ["Base", "CATEGORY_VALUES", "ExpenseRow"]

"""Expenses table.

Revision ID: 0001_expenses
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_expenses"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Mirrored from expense_analysis.models.Category at the time of this revision
CATEGORIES = ("Food", "Transportation", "Entertainment", "Shopping", "Bills", "Other")


def upgrade() -> None:
    op.create_table(
        "expenses",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("vendor", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("amount >= 0", name="ck_expenses_amount_non_negative"),
        sa.CheckConstraint(
            "category in (" + ", ".join(f"'{c}'" for c in CATEGORIES) + ")",
            name="ck_expenses_category",
        ),
    )
    op.create_index("ix_expenses_date", "expenses", ["date"])


def downgrade() -> None:
    op.drop_index("ix_expenses_date", table_name="expenses")
    op.drop_table("expenses")

"""Apply the Alembic migrations to a fresh SQLite file and use the result."""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from expense_analysis.db.client import dispose_engines, get_engine
from expense_analysis.store import SqlExpenseStore
from tests.helpers.records import expense

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_upgrade_creates_expenses_table(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    url = f"sqlite+pysqlite:///{tmp_path / 'migrated.sqlite3'}"
    monkeypatch.setenv("DATABASE_URL", url)

    # No ini file: keeps alembic from reconfiguring logging for the test process.
    cfg = Config()
    cfg.set_main_option("script_location", str(REPO_ROOT / "alembic"))
    command.upgrade(cfg, "head")

    try:
        columns = {c["name"] for c in inspect(get_engine(database_url=url)).get_columns("expenses")}
        assert {"id", "amount", "description", "category", "date", "vendor"} <= columns

        store = SqlExpenseStore(database_url=url)
        store.add_expense(expense("7.5", "Parking", id="p"))
        assert [r.id for r in store.load_expenses()] == ["p"]
    finally:
        dispose_engines()

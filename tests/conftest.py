"""Pytest configuration for test isolation.

The CLI loads ``.env`` from the working directory and configures the package
logger once per process. Both would leak state between tests, so every test
runs from its own temporary directory with a clean environment and a reset
logger.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from expense_analysis.db.client import dispose_engines
from expense_analysis.logging_setup import LOG_LEVEL_ENV, reset_logging


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from ``tmp_path`` without inherited DB URL or log level."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sqlite_url(tmp_path: Path):
    """File-backed SQLite database with the schema created."""

    from tests.helpers.db import bootstrap_sqlite_db

    url = bootstrap_sqlite_db(tmp_path / "db" / "expenses.sqlite3")
    yield url
    dispose_engines()

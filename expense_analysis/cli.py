"""Typer-based console interface for ``expense_analysis``.

Commands read and write expenses through an :class:`~expense_analysis.store.ExpenseStore`
and render the aggregation core's outputs as plain-text tables or exports.
Environment variables (notably ``DATABASE_URL``) are loaded from a local
``.env`` with ``python-dotenv`` in the root callback before any command runs.

The store is taken from ``ctx.obj`` when the caller provides one (tests pass
an in-memory store); otherwise a :class:`SqlExpenseStore` is built from
``--database-url`` or ``DATABASE_URL``.
"""

from __future__ import annotations

import json
from datetime import UTC, date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from .api import build_category_report, build_vendor_report
from .export import expenses_to_csv, expenses_to_json, fmt_amount, vendors_to_csv
from .filters import filter_expenses
from .logging_setup import configure_logging, get_logger
from .models import (
    ALL_CATEGORIES,
    Category,
    CategoryFilter,
    ExpenseFilters,
    InvalidExpenseError,
    VendorFilters,
    new_expense,
    parse_amount,
    parse_category,
    parse_date,
    parse_expense,
)
from .periods import Period
from .store import DuplicateExpenseError, ExpenseStore, SqlExpenseStore
from .summary import available_months, calculate_expense_summary

logger = get_logger(__name__)

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Track personal expenses and summarize spending by vendor, category and month.",
)


# ---- Small module-level helpers ---------------------------------------------


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _store(ctx: typer.Context) -> ExpenseStore:
    store = ctx.obj
    if store is None:  # pragma: no cover - set by the root callback
        raise _fail("no expense store configured")
    return store


def _load(ctx: typer.Context):
    try:
        return _store(ctx).load_expenses()
    except (RuntimeError, SQLAlchemyError) as e:
        raise _fail(f"failed to load expenses: {e}") from e


def _opt_date(raw: str | None, label: str) -> date | None:
    if raw is None:
        return None
    try:
        return parse_date(raw)
    except InvalidExpenseError as e:
        raise _fail(f"{label}: {e}") from e


def _opt_amount(raw: str | None, label: str) -> Decimal | None:
    if raw is None:
        return None
    try:
        return parse_amount(raw)
    except InvalidExpenseError as e:
        raise _fail(f"{label}: {e}") from e


def _opt_category(raw: str | None) -> CategoryFilter | None:
    if raw is None or raw.strip().lower() == ALL_CATEGORIES.lower():
        return None
    try:
        return parse_category(raw)
    except InvalidExpenseError as e:
        raise _fail(str(e)) from e


def _today(raw: str | None) -> date:
    return _opt_date(raw, "--today") or date.today()


def _money(d: Decimal) -> str:
    return f"${fmt_amount(d)}"


# ---- Commands ---------------------------------------------------------------


@app.command("init-db")
def init_db_cmd(ctx: typer.Context) -> None:
    """Create the ``expenses`` table if missing (SQLite/dev convenience; use Alembic in prod)."""

    from .db.client import get_engine
    from .db.models import Base

    store = _store(ctx)
    if not isinstance(store, SqlExpenseStore):
        typer.echo("Store is not database-backed; nothing to initialize.")
        return
    try:
        Base.metadata.create_all(bind=get_engine(database_url=store.database_url))
    except (RuntimeError, SQLAlchemyError) as e:
        raise _fail(f"failed to initialize database: {e}") from e
    typer.echo("Database initialized.")


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    amount: Annotated[str, typer.Option(help="Amount spent (non-negative).")],
    description: Annotated[str, typer.Option(help="What the expense was for.")] = "",
    category: Annotated[
        str | None,
        typer.Option(help="Category; prompted interactively when omitted on a TTY."),
    ] = None,
    on: Annotated[str | None, typer.Option("--date", help="YYYY-MM-DD (default today).")] = None,
    vendor: Annotated[str | None, typer.Option(help="Explicit vendor name.")] = None,
) -> None:
    """Record a new expense."""

    from .term_ui import is_interactive, prompt_category

    if category is None:
        chosen = prompt_category() if is_interactive() else Category.OTHER
    else:
        chosen = category

    try:
        record = new_expense(
            amount=amount,
            description=description,
            category=chosen,
            date=on or date.today().isoformat(),
            vendor=vendor,
            now=datetime.now(UTC),
        )
    except InvalidExpenseError as e:
        raise _fail(str(e)) from e

    try:
        _store(ctx).add_expense(record)
    except (DuplicateExpenseError, RuntimeError, SQLAlchemyError) as e:
        raise _fail(f"failed to save expense: {e}") from e
    typer.echo(record.id)


@app.command("delete")
def delete_cmd(ctx: typer.Context, expense_id: str) -> None:
    """Delete an expense by id."""

    try:
        deleted = _store(ctx).delete_expense(expense_id)
    except (RuntimeError, SQLAlchemyError) as e:
        raise _fail(f"failed to delete expense: {e}") from e
    if not deleted:
        raise _fail(f"no expense with id {expense_id!r}")
    typer.echo(f"Deleted {expense_id}")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    category: Annotated[str | None, typer.Option(help="Category or 'All'.")] = None,
    start: Annotated[str | None, typer.Option(help="Earliest date, YYYY-MM-DD.")] = None,
    end: Annotated[str | None, typer.Option(help="Latest date, YYYY-MM-DD.")] = None,
    search: Annotated[str | None, typer.Option(help="Case-insensitive text search.")] = None,
) -> None:
    """List expenses, optionally filtered."""

    filters = ExpenseFilters(
        category=_opt_category(category),
        start_date=_opt_date(start, "--start"),
        end_date=_opt_date(end, "--end"),
        search_query=search,
    )
    records = filter_expenses(_load(ctx), filters)
    for r in records:
        vendor = f" [{r.vendor}]" if r.vendor else ""
        typer.echo(
            f"{r.id}\t{r.date.isoformat()}\t{r.category.value}\t{_money(r.amount)}\t"
            f"{r.description}{vendor}"
        )
    typer.echo(f"{len(records)} expense(s)")


@app.command("vendors")
def vendors_cmd(
    ctx: typer.Context,
    category: Annotated[str | None, typer.Option(help="Category or 'All'.")] = None,
    min_spent: Annotated[str | None, typer.Option(help="Minimum total spent.")] = None,
    max_spent: Annotated[str | None, typer.Option(help="Maximum total spent.")] = None,
    start: Annotated[str | None, typer.Option(help="Active on or after, YYYY-MM-DD.")] = None,
    end: Annotated[str | None, typer.Option(help="Active on or before, YYYY-MM-DD.")] = None,
    search: Annotated[str | None, typer.Option(help="Vendor name contains.")] = None,
    limit: Annotated[int, typer.Option(min=1, help="Vendors to show.")] = 10,
) -> None:
    """Rank vendors by total spend."""

    filters = VendorFilters(
        category=_opt_category(category),
        min_spent=_opt_amount(min_spent, "--min-spent"),
        max_spent=_opt_amount(max_spent, "--max-spent"),
        start_date=_opt_date(start, "--start"),
        end_date=_opt_date(end, "--end"),
        search_query=search,
    )
    report = build_vendor_report(_load(ctx), filters, chart_limit=limit)
    for v, slice_ in zip(report.vendors, report.chart, strict=False):
        typer.echo(
            f"{v.name}\t{_money(v.total_spent)}\t{v.transaction_count} txn\t"
            f"avg {_money(v.average_transaction)}\t{slice_.percentage:.1f}%\t"
            f"{', '.join(c.value for c in v.categories)}"
        )
    s = report.summary
    typer.echo(
        f"{s.total_vendors} vendor(s), total {_money(s.total_spent)}, "
        f"avg/vendor {_money(s.average_spent_per_vendor)}"
    )


@app.command("categories")
def categories_cmd(
    ctx: typer.Context,
    period: Annotated[Period, typer.Option(help="Time window.")] = Period.ALL_TIME,
    start: Annotated[str | None, typer.Option(help="Custom start, YYYY-MM-DD.")] = None,
    end: Annotated[str | None, typer.Option(help="Custom end, YYYY-MM-DD.")] = None,
    limit: Annotated[int | None, typer.Option(min=1, help="Categories to show.")] = None,
    today: Annotated[str | None, typer.Option(hidden=True)] = None,
) -> None:
    """Spending by category for a period."""

    report = build_category_report(
        _load(ctx),
        period,
        now=_today(today),
        start=_opt_date(start, "--start"),
        end=_opt_date(end, "--end"),
        limit=limit,
    )
    typer.echo(f"{period.label}")
    for c in report.breakdown.categories:
        typer.echo(
            f"{c.category.value}\t{_money(c.total_amount)}\t{c.expense_count} expense(s)\t"
            f"{c.percentage:.1f}%\tavg {_money(c.average_expense_amount)}"
        )
    typer.echo(
        f"Total {_money(report.breakdown.total_spent)} "
        f"across {report.breakdown.total_count} expense(s)"
    )


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    today: Annotated[str | None, typer.Option(hidden=True)] = None,
) -> None:
    """Overall totals, this month's spend and the top category."""

    records = _load(ctx)
    summary = calculate_expense_summary(records, now=_today(today))
    typer.echo(f"Total spent: {_money(summary.total_spent)}")
    typer.echo(f"This month: {_money(summary.monthly_spent)}")
    if summary.top_category is None:
        typer.echo("Top category: -")
    else:
        top = summary.top_category
        typer.echo(f"Top category: {top.category.value} ({_money(top.total_amount)})")
    months = available_months(records)
    if months:
        typer.echo("Months: " + ", ".join(m.label for m in months))


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    fmt: Annotated[
        str, typer.Option("--format", help="One of: csv, json, vendors-csv.")
    ] = "csv",
    output: Annotated[
        Path | None, typer.Option(help="Write to this file instead of stdout.")
    ] = None,
) -> None:
    """Export expenses (CSV/JSON) or the vendor ranking (CSV)."""

    records = _load(ctx)
    if fmt == "csv":
        text = expenses_to_csv(records)
    elif fmt == "json":
        text = expenses_to_json(records, exported_at=datetime.now())
    elif fmt == "vendors-csv":
        text = vendors_to_csv(build_vendor_report(records).vendors)
    else:
        raise _fail(f"unsupported export format: {fmt!r}")

    if output is None:
        typer.echo(text)
        return
    try:
        output.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise _fail(f"failed to write {output}: {e}") from e
    typer.echo(f"Wrote {len(records)} expense(s) to {output}")


@app.command("import-json")
def import_json_cmd(
    ctx: typer.Context,
    path: Path,
    replace: Annotated[bool, typer.Option(help="Replace all stored expenses.")] = False,
) -> None:
    """Import expenses from a JSON array (or an export's ``expenses`` list)."""

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise _fail(f"File not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise _fail(f"failed to read {path}: {e}") from e

    rows = data.get("expenses", []) if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise _fail("expected a JSON array of expenses")
    try:
        records = [parse_expense(row) for row in rows]
    except (InvalidExpenseError, AttributeError) as e:
        raise _fail(f"invalid expense: {e}") from e

    store = _store(ctx)
    try:
        if replace:
            store.save_expenses(records)
        else:
            store.add_expenses(records)
    except (DuplicateExpenseError, RuntimeError, SQLAlchemyError) as e:
        raise _fail(f"failed to save expenses: {e}") from e
    typer.echo(f"Imported {len(records)} expense(s)")


@app.callback()
def _root(
    ctx: typer.Context,
    database_url: Annotated[
        str | None, typer.Option(help="Override DATABASE_URL (falls back to env var).")
    ] = None,
    log_level: Annotated[
        str | None, typer.Option(help="Log level (default from EXPENSE_ANALYSIS_LOG_LEVEL).")
    ] = None,
) -> None:
    """Root command: load ``.env``, configure logging, and pick the store."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise _fail(str(e)) from e

    if ctx.obj is None:
        ctx.obj = SqlExpenseStore(database_url=database_url)
    logger.debug("Using store %s", type(ctx.obj).__name__)


def main() -> None:  # pragma: no cover - console-script entry
    app()


if __name__ == "__main__":  # pragma: no cover
    main()

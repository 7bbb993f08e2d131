from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from expense_analysis.models import (
    Category,
    InvalidExpenseError,
    RankedCategories,
    expense_to_dict,
    new_expense,
    parse_amount,
    parse_date,
    parse_expense,
)


def test_parse_expense_accepts_json_export_shape():
    record = parse_expense(
        {
            "id": "abc",
            "amount": 12.5,
            "description": "Lunch at Cafe",
            "category": "Food",
            "date": "2024-01-05",
            "vendor": "  ",
            "createdAt": "2024-01-05T12:00:00Z",
        }
    )
    assert record.amount == Decimal("12.5")
    assert record.category is Category.FOOD
    assert record.date == date(2024, 1, 5)
    assert record.vendor is None
    assert record.created_at is not None and record.created_at.year == 2024
    assert record.updated_at is None


@pytest.mark.parametrize("bad", ["2024-1-5", "01/05/2024", "", None, "2024-02-30"])
def test_parse_date_rejects_non_iso_or_invalid(bad):
    with pytest.raises(InvalidExpenseError):
        parse_date(bad)


def test_parse_date_passes_dates_through():
    assert parse_date(date(2024, 3, 1)) == date(2024, 3, 1)
    assert parse_date(datetime(2024, 3, 1, 23, 59)) == date(2024, 3, 1)


@pytest.mark.parametrize("bad", ["-1", "abc", "NaN", "Infinity", True, None])
def test_parse_amount_rejects(bad):
    with pytest.raises(InvalidExpenseError):
        parse_amount(bad)


def test_parse_amount_accepts_zero_and_decimals():
    assert parse_amount("0") == Decimal(0)
    assert parse_amount(" 19.99 ") == Decimal("19.99")


def test_parse_expense_rejects_unknown_category_and_missing_id():
    base = {"id": "x", "amount": "1", "category": "Food", "date": "2024-01-01"}
    with pytest.raises(InvalidExpenseError, match="unknown category"):
        parse_expense({**base, "category": "Groceries"})
    with pytest.raises(InvalidExpenseError, match="id is required"):
        parse_expense({**base, "id": " "})


def test_new_expense_and_dict_round_trip():
    now = datetime(2024, 6, 1, 9, 30)
    record = new_expense(
        amount="42.10",
        description="Dinner",
        category="Food",
        date="2024-06-01",
        vendor="Luigi's",
        now=now,
    )
    assert len(record.id) == 32
    assert record.created_at == record.updated_at == now
    assert parse_expense(expense_to_dict(record)) == record


def test_ranked_categories_equality_with_sequences():
    assert RankedCategories() == []
    assert RankedCategories() == ()
    with pytest.raises(TypeError):
        hash(RankedCategories())


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("10.005", "10.01"), ("10.004", "10.00"), ("3", "3.00"), (Decimal("0.125"), "0.13")],
)
def test_parse_amount_rounds_half_up_to_cents(raw, expected):
    assert parse_amount(raw) == Decimal(expected)
    assert parse_amount(raw).as_tuple().exponent == -2


def test_parse_amount_rejects_values_beyond_column_range():
    with pytest.raises(InvalidExpenseError, match="too large"):
        parse_amount("1e16")


def test_timestamps_with_offset_become_naive_utc():
    record = parse_expense(
        {
            "id": "t",
            "amount": "1",
            "category": "Other",
            "date": "2024-01-05",
            "createdAt": "2024-01-05T12:00:00+02:00",
            "updatedAt": "2024-01-05T12:00:00Z",
        }
    )
    assert record.created_at == datetime(2024, 1, 5, 10, 0)
    assert record.created_at.tzinfo is None
    assert record.updated_at == datetime(2024, 1, 5, 12, 0)


def test_new_expense_normalizes_aware_now():
    record = new_expense(
        amount="1",
        description="",
        category="Other",
        date="2024-01-05",
        now=datetime(2024, 1, 5, 23, 30, tzinfo=timezone(timedelta(hours=-5))),
    )
    assert record.created_at == datetime(2024, 1, 6, 4, 30)

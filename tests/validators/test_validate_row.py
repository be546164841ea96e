from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from expense_import.data_model import FieldError, WorkingRow
from expense_import.validators import error_for, validate_row, validate_rows

# ---- Helpers -----------------------------------------------------------------


def _row(**overrides) -> WorkingRow:
    base = dict(
        id="r1",
        date=date(2025, 3, 1),
        amount="12.50",
        description="Coffee beans",
        category="Groceries",
        category_id=None,
    )
    base.update(overrides)
    return WorkingRow(**base)


# ---- validate_row ------------------------------------------------------------


def test_valid_row_has_no_errors():
    """Positive: a fully populated row validates clean."""
    assert validate_row(_row()) == []


def test_category_id_alone_satisfies_category():
    """Positive: a numeric category reference is enough without category text."""
    assert validate_row(_row(category=None, category_id=7)) == []


@pytest.mark.parametrize("description", [None, "", "  ", "ab", " ab  "])
def test_short_or_missing_description_is_reported(description):
    """Negative: description must be at least 3 characters after trimming."""
    errors = validate_row(_row(description=description))
    assert errors == [FieldError("description", "Description must be at least 3 characters")]


def test_non_string_description_is_invalid_not_an_exception():
    """Negative: a wrong-typed description is reported, never raised."""
    errors = validate_row(_row(description=12345))
    assert [e.field for e in errors] == ["description"]


def test_missing_amount_reports_field_required():
    """Negative: an absent amount is reported as required."""
    errors = validate_row(_row(amount=None))
    assert errors == [FieldError("amount", "Field is required")]


def test_badly_formatted_amount_reports_money_error():
    """Negative: more than two decimals is a money-format error."""
    errors = validate_row(_row(amount="1.234"))
    assert errors == [
        FieldError("amount", "Enter a valid amount with up to 2 decimal places")
    ]


def test_decimal_amount_is_accepted():
    assert validate_row(_row(amount=Decimal("99.99"))) == []


@pytest.mark.parametrize("category", [None, "", "   "])
def test_missing_category_and_id_reports_category_required(category):
    """Negative: neither category text nor id present."""
    errors = validate_row(_row(category=category, category_id=None))
    assert errors == [FieldError("category", "Category is required")]


def test_every_failing_field_is_reported_once():
    """Negative: one error per invalid field, in description/amount/category order."""
    errors = validate_row(_row(description="x", amount="abc", category=None))
    assert [e.field for e in errors] == ["description", "amount", "category"]


def test_validate_row_is_deterministic():
    row = _row(description="", amount="")
    assert validate_row(row) == validate_row(row)


# ---- validate_rows / error_for -----------------------------------------------


def test_validate_rows_only_lists_rows_with_problems():
    good = _row(id="good")
    bad = _row(id="bad", category=None)
    out = validate_rows([good, bad])
    assert list(out) == ["bad"]
    assert out["bad"] == (FieldError("category", "Category is required"),)


def test_error_for_returns_first_matching_message_or_empty():
    errors = [FieldError("amount", "first"), FieldError("amount", "second")]
    assert error_for("amount", errors) == "first"
    assert error_for("description", errors) == ""

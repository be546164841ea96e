from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pandas as pd
import pytest

from expense_import.utilities import amount_text, date_text, to_category_id, to_date

# ---- to_date -----------------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-01-02", date(2025, 1, 2)),
        ("01/02/2025", date(2025, 1, 2)),
        ("2025/01/02", date(2025, 1, 2)),
        ("31/12/2024", date(2024, 12, 31)),
        ("2024-12-31T23:59:59Z", date(2024, 12, 31)),
        (datetime(2025, 5, 6, 7, 8), date(2025, 5, 6)),
        (pd.Timestamp("2025-05-06"), date(2025, 5, 6)),
        (date(2025, 5, 6), date(2025, 5, 6)),
    ],
)
def test_to_date_supported_inputs(value, expected):
    assert to_date(value) == expected


def test_to_date_raises_or_returns_none_on_garbage():
    with pytest.raises(ValueError):
        to_date("not a date")
    assert to_date("not a date", False) is None
    assert to_date(None, False) is None


# ---- date_text ---------------------------------------------------------------


def test_date_text_normalises_parseable_dates_and_keeps_the_rest():
    assert date_text(date(2025, 1, 2)) == "2025-01-02"
    assert date_text("01/02/2025") == "2025-01-02"
    assert date_text("  sometime ") == "sometime"
    assert date_text(None) == ""


# ---- amount_text -------------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("", None),
        ("  ", None),
        (float("nan"), None),
        (True, None),
        (" 12.50 ", "12.50"),
        (12.5, "12.5"),
        (7, "7"),
        (Decimal("1E+2"), "100"),
        ("−10", "-10"),
    ],
)
def test_amount_text(value, expected):
    assert amount_text(value) == expected


# ---- to_category_id ----------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [(5, 5), (5.0, 5), ("12", 12), (" 3 ", 3), ("Food", None), (None, None), (2.5, None), (True, None)],
)
def test_to_category_id(value, expected):
    assert to_category_id(value) == expected

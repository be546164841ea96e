from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from expense_import.data_model import RawRow, Receipt, WorkingRow


def _raw(**overrides) -> RawRow:
    base = dict(date="2025-02-03", amount="4.50", description="Bus fare", category="Transport")
    base.update(overrides)
    return RawRow(**base)


def test_from_raw_assigns_fresh_unique_ids():
    """Positive: every ingested row gets its own opaque id."""
    a = WorkingRow.from_raw(_raw())
    b = WorkingRow.from_raw(_raw())
    assert a.id and b.id and a.id != b.id
    assert (a.date, a.amount, a.description, a.category) == (
        "2025-02-03",
        "4.50",
        "Bus fare",
        "Transport",
    )


def test_from_raw_honours_explicit_id():
    assert WorkingRow.from_raw(_raw(), row_id="fixed").id == "fixed"


def test_with_field_keeps_id_and_replaces_one_field():
    row = WorkingRow.from_raw(_raw(), row_id="r1")
    edited = row.with_field("description", "Train fare")
    assert edited.id == "r1"
    assert edited.description == "Train fare"
    assert row.description == "Bus fare"


@pytest.mark.parametrize("name", ["id", "nope", "receipt", "receipt_error"])
def test_with_field_rejects_id_receipts_and_unknown_fields(name):
    row = WorkingRow.from_raw(_raw(), row_id="r1")
    with pytest.raises(ValueError):
        row.with_field(name, "x")


def test_rows_are_immutable():
    row = WorkingRow.from_raw(_raw(), row_id="r1")
    with pytest.raises(FrozenInstanceError):
        setattr(row, "amount", "1.00")


def test_to_payload_drops_client_only_fields_and_normalises():
    """Positive: receipt data never goes in the JSON payload."""
    row = WorkingRow(
        id="r9",
        date=date(2025, 1, 31),
        amount="12.50",
        description="  Lunch  ",
        category=None,
        category_id=4,
        receipt=Receipt("r.png", "image/png", b"abc"),
        receipt_error=None,
    )
    payload = row.to_payload()
    assert payload == {
        "id": "r9",
        "date": "2025-01-31",
        "amount": 12.5,
        "description": "Lunch",
        "category": None,
        "categoryid": 4,
    }
    assert "receipt" not in payload and "receipt_error" not in payload


def test_receipt_size_and_extension():
    r = Receipt("Scan.Final.JPG", "image/jpeg", b"12345")
    assert r.size == 5
    assert r.extension == "jpg"
    assert Receipt("noext", "image/png").extension == ""

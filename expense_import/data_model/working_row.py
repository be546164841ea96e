from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, FrozenSet, Optional, Union

from expense_import.utilities import amount_text, date_text, new_row_id

from .raw_row import RawRow
from .receipt import Receipt


@dataclass(frozen=True)
class WorkingRow:
    """
    The editable, client-side form of one import record.

    ``id`` is assigned at ingestion and survives every edit; it is the only key
    used for ordering, deletion, error lookup and reconciliation. Edits produce a
    replaced copy with the same id (see ``with_field``).
    """

    id: str
    date: Union[date, str, None]
    amount: Union[str, Decimal, int, float, None]
    description: Optional[str]
    category: Optional[str] = None
    category_id: Optional[int] = None
    receipt: Optional[Receipt] = None
    receipt_error: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: RawRow, row_id: Optional[str] = None) -> "WorkingRow":
        return cls(
            id=row_id or new_row_id(),
            date=raw.date,
            amount=raw.amount,
            description=raw.description,
            category=raw.category,
            category_id=raw.category_id,
            receipt=raw.receipt,
        )

    def with_field(self, name: str, value: Any) -> "WorkingRow":
        """Return a copy with one editable field replaced."""
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Field is not editable: {name!r}")
        return replace(self, **{name: value})

    def to_payload(self) -> Dict[str, Any]:
        """
        Wire form sent to the batch endpoint.

        Client-only fields (receipt, receipt_error) are left out; the receipt
        travels as its own multipart part keyed by ``receipt_<id>``.
        """
        return {
            "id": self.id,
            "date": date_text(self.date),
            "amount": _amount_number(self.amount),
            "description": (self.description or "").strip(),
            "category": self.category,
            "categoryid": self.category_id,
        }


def _amount_number(value: Any) -> Any:
    txt = amount_text(value)
    if txt is None:
        return None
    try:
        return float(Decimal(txt))
    except InvalidOperation:
        # Unparseable text is sent as-is and reported back by the server
        return txt


# Receipts change only through the session's attach/detach, which run the file validator
CLIENT_ONLY_FIELDS: FrozenSet[str] = frozenset({"receipt", "receipt_error"})
EDITABLE_FIELDS: FrozenSet[str] = frozenset(
    f.name for f in fields(WorkingRow) if f.name != "id" and f.name not in CLIENT_ONLY_FIELDS
)

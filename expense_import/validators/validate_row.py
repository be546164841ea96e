# expense_import/validators/validate_row.py
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from expense_import.data_model import FieldError, WorkingRow
from expense_import.utilities import is_null_or_whitespace

from .validate_money import validate_money

DESCRIPTION_TOO_SHORT = "Description must be at least 3 characters"
CATEGORY_REQUIRED = "Category is required"
MIN_DESCRIPTION_LENGTH = 3


def validate_row(row: WorkingRow) -> List[FieldError]:
    """
    Validate the user-editable fields of one import row.

    Checks description (trimmed length >= 3), amount (money format) and
    category (either a category id or non-blank category text). Returns one
    FieldError per failing field, or an empty list when the row is valid.
    Values of the wrong type count as invalid rather than raising.
    """
    errors: List[FieldError] = []

    description = row.description
    if not isinstance(description, str) or len(description.strip()) < MIN_DESCRIPTION_LENGTH:
        errors.append(FieldError("description", DESCRIPTION_TOO_SHORT))

    money_error = validate_money(row.amount)
    if money_error is not None:
        errors.append(FieldError("amount", money_error))

    no_category_id = not isinstance(row.category_id, int) or isinstance(row.category_id, bool)
    no_category_text = not isinstance(row.category, str) or is_null_or_whitespace(row.category)
    if no_category_id and no_category_text:
        errors.append(FieldError("category", CATEGORY_REQUIRED))

    return errors


def validate_rows(rows: Iterable[WorkingRow]) -> Dict[str, Tuple[FieldError, ...]]:
    """Full validation pass; only rows with at least one problem appear in the result."""
    out: Dict[str, Tuple[FieldError, ...]] = {}
    for row in rows:
        errs = validate_row(row)
        if errs:
            out[row.id] = tuple(errs)
    return out


def error_for(field: str, errors: Sequence[FieldError]) -> str:
    """First message recorded for ``field`` (empty string when the field is fine)."""
    return next((e.message for e in errors if e.field == field), "")

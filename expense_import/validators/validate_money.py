from __future__ import annotations

import re
from typing import Any, Final, Optional

from expense_import.utilities import amount_text

_MONEY_RE: Final[re.Pattern[str]] = re.compile(r"^\d+(\.\d{1,2})?$")

REQUIRED = "Field is required"
INVALID_MONEY = "Enter a valid amount with up to 2 decimal places"
NEGATIVE_MONEY = "Enter a positive amount"


def validate_money(value: Any) -> Optional[str]:
    """
    Check that ``value`` is a non-negative amount with at most two decimals.

    Returns the error message, or None when the value is valid. Accepts text
    or numbers; never raises.
    """
    txt = amount_text(value)
    if txt is None:
        return REQUIRED

    if _MONEY_RE.match(txt):
        return None
    # A well-formed amount with a leading minus gets the more specific message
    if txt.startswith("-") and _MONEY_RE.match(txt[1:]):
        return NEGATIVE_MONEY
    return INVALID_MONEY

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FieldError:
    field: str  # name of a WorkingRow attribute
    message: str


@dataclass(frozen=True)
class ImportErrorRecord:
    """
    A row the server refused to persist.

    ``row`` is the 1-based position in the submitted batch; the server never
    sees client ids. ``row_id`` is filled in during reconciliation when the
    position maps back to a submitted row.
    """

    row: int
    message: str
    row_id: Optional[str] = None

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from .receipt import Receipt


@dataclass(frozen=True)
class RawRow:
    """One record exactly as the file parser produced it (no validation applied)."""

    date: Union[date, str, None]
    amount: Union[str, Decimal, int, float, None]
    description: Optional[str]
    category: Optional[str] = None
    category_id: Optional[int] = None
    receipt: Optional[Receipt] = None
    source_line: int = -1  # 1-based line in the source file, -1 when unknown

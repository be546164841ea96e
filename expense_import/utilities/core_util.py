"""
Core Utilities

Features:
- String utilities
- Row identifier generation
"""

from __future__ import annotations

import uuid
from typing import Any, Optional


def is_null_or_whitespace(s: Optional[Any]) -> bool:
    """Check if a value is None, or a string that is empty or only whitespace.

    Non-string values count as present.
    """
    if s is None:
        return True
    if isinstance(s, str):
        return s.strip() == ""
    return False


def new_row_id() -> str:
    """Return a fresh opaque row identifier (never reused within a process)."""
    return uuid.uuid4().hex

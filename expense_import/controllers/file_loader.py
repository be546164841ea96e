"""
Import file → RawRow records.

This is the default file parser handed to ImportSession. It reads a CSV (or
Excel) export with pandas, checks the required columns, and yields one
``RawRow`` per data line without validating field contents; validation is the
session's job once rows are in the working set.

Expected columns (case-insensitive, surrounding whitespace ignored):
    date, amount, description            required
    category, category_id / categoryid   optional
"""

# expense_import/controllers/file_loader.py
from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from expense_import.data_model import RawRow
from expense_import.errors import FileLoadError
from expense_import.utilities import (
    ImportSettings,
    amount_text,
    to_category_id,
    to_date,
)
from expense_import.validators.validate_file import INVALID_TYPE, TOO_LARGE

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "amount", "description")
_COLUMN_ALIASES = {"categoryid": "category_id", "category id": "category_id"}
_EXCEL_SUFFIXES = (".xlsx",)

PathLike = Union[str, Path]


def check_import_file(path: Path, settings: ImportSettings) -> None:
    """Reject files that are missing, of the wrong type, or larger than allowed."""
    if not path.is_file():
        raise FileLoadError(f"File not found: {path}")
    if path.suffix.lower() not in settings.import_extensions:
        raise FileLoadError(INVALID_TYPE)
    if path.stat().st_size > settings.max_import_file_size:
        raise FileLoadError(TOO_LARGE)


def _read_frame(path: Path) -> pd.DataFrame:
    try:
        if path.suffix.lower() in _EXCEL_SUFFIXES:
            return pd.read_excel(path)
        return pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError, OSError, ImportError) as e:
        # ImportError: pandas lacks the engine for this workbook format
        raise FileLoadError(f"Could not read {path.name}: {e}") from e


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    renamed: Dict[Any, str] = {}
    for col in df.columns:
        key = str(col).strip().lower()
        renamed[col] = _COLUMN_ALIASES.get(key, key)
    return df.rename(columns=renamed)


def _cell(r: pd.Series, name: str) -> Any:
    """Cell value with blanks and NaN collapsed to None and text trimmed."""
    if name not in r.index:
        return None
    v = r[name]
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip()
        return v or None
    try:
        if pd.isna(v):
            return None
    except (TypeError, ValueError):
        pass
    return v


def _row_date(v: Any) -> Union[date, str, None]:
    # Excel hands back Timestamps; CSV text is kept verbatim for the user to fix
    if isinstance(v, (datetime, date)):
        return to_date(v)
    return None if v is None else str(v)


def frame_to_rows(df: pd.DataFrame) -> List[RawRow]:
    """
    Convert a parsed sheet into RawRow records.

    Raises
    ------
    FileLoadError
        If any required column is missing.
    """
    df = _normalize_columns(df)
    if df.empty and len(df.columns) == 0:
        return []

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise FileLoadError(f"Import file is missing columns: {missing}")

    rows: List[RawRow] = []
    for i, r in df.iterrows():
        category = _cell(r, "category")
        category_id: Optional[int] = to_category_id(_cell(r, "category_id"))
        # A bare number in the category column is a reference id
        if category_id is None and to_category_id(category) is not None:
            category_id = to_category_id(category)
            category = None

        description = _cell(r, "description")
        rows.append(
            RawRow(
                date=_row_date(_cell(r, "date")),
                amount=amount_text(_cell(r, "amount")),
                description=None if description is None else str(description),
                category=None if category is None else str(category),
                category_id=category_id,
                source_line=int(i) + 2,  # header is line 1
            )
        )
    return rows


def load_rows(path: PathLike, settings: Optional[ImportSettings] = None) -> List[RawRow]:
    """Read ``path`` and return its rows; raises FileLoadError on any load problem."""
    path = Path(path)
    settings = settings or ImportSettings()
    check_import_file(path, settings)

    log.info("Loading import file: %s", path)
    rows = frame_to_rows(_read_frame(path))
    log.debug("Loaded %d rows from %s", len(rows), path)
    return rows


async def parse_file(path: PathLike, settings: Optional[ImportSettings] = None) -> List[RawRow]:
    """``load_rows`` on a worker thread, so the event loop stays responsive."""
    return await asyncio.to_thread(load_rows, path, settings)

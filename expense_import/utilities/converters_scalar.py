# expense_import/utilities/converters_scalar.py
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Final, Optional, overload


@overload
def to_date(s: datetime, should_raise: bool = True, /) -> Optional[date]: ...
@overload
def to_date(s: date, should_raise: bool = True, /) -> Optional[date]: ...
@overload
def to_date(s: str, should_raise: bool = True, /) -> Optional[date]: ...


def to_date(s: object, should_raise: bool = True, /) -> Optional[date]:
    """
    Parse the date encodings seen in exported spreadsheets into a date.

    Supported examples:
      - 2024-12-31            (ISO)
      - 12/31/2024            (US)
      - 2024/12/31, 2024.12.31
      - 12-31-2024, 12.31.2024
      - 31/12/2024            (D/M/Y when unambiguous: first token > 12)
      - 2024-12-31T23:59:59Z  (ISO datetime; time/offset ignored)
      - pandas.Timestamp / datetime / date values

    Returns:
        datetime.date if recognized; otherwise raises ValueError, or returns
        None when ``should_raise`` is False.
    """
    if s is None:
        if should_raise:
            raise ValueError("Cannot convert None to date")
        return None

    # pandas.Timestamp is a datetime subclass
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s

    txt = str(s).strip()
    if not txt:
        if should_raise:
            raise ValueError("Empty string cannot be converted to date")
        return None

    if "T" in txt:
        try:
            return datetime.fromisoformat(re.sub(r"Z$", "", txt)).date()
        except ValueError:
            pass  # fall through

    # Order matters
    patterns = (
        "%Y-%m-%d",
        "%m/%d/%Y",
        "%Y/%m/%d",
        "%Y.%m.%d",
        "%m-%d-%Y",
        "%m.%d.%Y",
        "%Y-%m-%d %H:%M:%S",
    )
    for fmt in patterns:
        try:
            return datetime.strptime(txt, fmt).date()
        except ValueError:
            continue

    # D/M/Y vs M/D/Y ambiguity
    m = _DATE_RE_DMY.match(txt)
    if m:
        a, b, c = m.groups()
        sep = _DATE_RE_SEP.search(txt).group(0)  # type: ignore[union-attr]
        year_fmt = "%Y" if len(c) == 4 else "%y"
        is_dmy = int(a) > 12 and int(b) <= 12
        fmt = ("%d{sep}%m{sep}" + year_fmt) if is_dmy else ("%m{sep}%d{sep}" + year_fmt)
        try:
            return datetime.strptime(txt, fmt.format(sep=sep)).date()
        except ValueError:
            pass

    if should_raise:
        raise ValueError(f"Unrecognized date format: {s!r}")
    return None


def date_text(value: Any) -> str:
    """
    Render a row date for the wire: ISO ``YYYY-MM-DD`` when it can be parsed,
    otherwise the trimmed original text so the server can report it.
    """
    parsed = to_date(value, False)
    if parsed is not None:
        return parsed.isoformat()
    return "" if value is None else str(value).strip()


def amount_text(value: Any) -> Optional[str]:
    """
    Normalise an amount cell to the text the money validator inspects.

    None, NaN and blank strings become None. Decimals are rendered in plain
    (non-scientific) notation and floats via ``repr`` so "12.5" stays "12.5".
    Never raises.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        if value.is_nan():
            return None
        return format(value, "f")
    if isinstance(value, float):
        if value != value:  # NaN from pandas
            return None
        return repr(float(value))  # numpy scalars repr with their type name
    if isinstance(value, int):
        return str(value)
    txt = str(value).replace("\xa0", " ").replace(_UNICODE_MINUS, "-").strip()
    return txt or None


def to_category_id(value: Any) -> Optional[int]:
    """Return an integer category reference, or None for blanks and non-numeric text."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or not value.is_integer():
            return None
        return int(value)
    txt = str(value).strip()
    if not _INT_RE.fullmatch(txt):
        return None
    return int(txt)


_DATE_RE_DMY: Final[re.Pattern[str]] = re.compile(
    r"^\s*(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2,4})\s*$"
)
_DATE_RE_SEP: Final[re.Pattern[str]] = re.compile(r"[/\-.]")
_INT_RE: Final[re.Pattern[str]] = re.compile(r"\d+")
_UNICODE_MINUS = "\u2212"  # '−'

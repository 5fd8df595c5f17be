"""VITRINE — Brazilian-Locale Cell Parsers.

Operator-typed sheet cells arrive as native numbers, dates or loosely
formatted text ("R$ 1.234,56", "12,5%", "31/01/2024"). Every parser here is
total: a cell that cannot be read degrades to the type's zero value (or to
None for dates, which drops the row upstream). Nothing in this module raises.
"""

import datetime as dt
import math
import re
from decimal import Decimal
from typing import Any, NamedTuple, Optional

from dateutil import parser as date_parser
from openpyxl.utils.datetime import from_excel

_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"[+-]?\d+")
_WHITESPACE = re.compile(r"\s")

# Fields missing from a free-form date come from here, never from "today"
_PARSE_DEFAULT = dt.datetime(2000, 1, 1)


class LocalDate(NamedTuple):
    """A parsed reporting day in both of its textual forms."""

    display_form: str  # DD/MM/YYYY
    iso_key: str  # YYYY-MM-DD
    value: dt.date


def _is_number(raw: Any) -> bool:
    return isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool)


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _float_prefix(text: str) -> float:
    """Parse the longest leading float, like a lenient spreadsheet would."""
    match = _FLOAT_PREFIX.match(text.lstrip())
    if not match:
        return 0.0
    try:
        value = float(match.group())
    except (ValueError, OverflowError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def _int_prefix(text: str) -> Optional[int]:
    match = _INT_PREFIX.match(text.lstrip())
    return int(match.group()) if match else None


def parse_money(raw: Any) -> float:
    """Parse a BRL amount: ``"R$ 1.234,56"`` → ``1234.56``."""
    if _is_number(raw):
        value = float(raw)
        return value if math.isfinite(value) else 0.0
    if _is_blank(raw):
        return 0.0
    text = str(raw).replace("R$", "", 1)
    text = _WHITESPACE.sub("", text).replace(".", "").replace(",", ".", 1)
    return _float_prefix(text)


def parse_percent(raw: Any) -> float:
    """Parse a percentage keeping its scale: ``"12,5%"`` → ``12.5``."""
    if _is_number(raw):
        value = float(raw)
        return value if math.isfinite(value) else 0.0
    if _is_blank(raw):
        return 0.0
    text = str(raw).replace("%", "", 1).replace(",", ".", 1).strip()
    return _float_prefix(text)


def parse_integer(raw: Any) -> int:
    """Parse a count: ``"1.234"`` → ``1234``; native numbers are floored."""
    if _is_number(raw):
        value = float(raw)
        return math.floor(value) if math.isfinite(value) else 0
    if _is_blank(raw):
        return 0
    text = str(raw).replace(".", "").replace(",", "")
    value = _int_prefix(text)
    return value if value is not None else 0


def parse_text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def _local_date(year: int, month: int, day: int) -> Optional[LocalDate]:
    try:
        value = dt.date(year, month, day)
    except (ValueError, OverflowError):
        return None
    return _from_date(value)


def _from_date(value: dt.date) -> LocalDate:
    return LocalDate(
        display_form=f"{value.day:02d}/{value.month:02d}/{value.year:04d}",
        iso_key=f"{value.year:04d}-{value.month:02d}-{value.day:02d}",
        value=value,
    )


def parse_local_date(raw: Any) -> Optional[LocalDate]:
    """Parse a reporting day. ``"31/01/2024"`` is read day-first.

    Native dates pass through, numbers are spreadsheet serial days and any
    other text goes through ISO-8601 and then dateutil. Returns None when no
    valid calendar date comes out.
    """
    if _is_blank(raw) or isinstance(raw, bool):
        return None
    if isinstance(raw, dt.datetime):
        return _from_date(raw.date())
    if isinstance(raw, dt.date):
        return _from_date(raw)
    if _is_number(raw):
        try:
            serial = float(raw)
            if not math.isfinite(serial):
                return None
            converted = from_excel(serial)
        except (ValueError, OverflowError, TypeError):
            return None
        if isinstance(converted, dt.datetime):
            return _from_date(converted.date())
        if isinstance(converted, dt.date):
            return _from_date(converted)
        return None

    text = str(raw).strip()
    if "/" in text:
        parts = text.split("/")
        if len(parts) != 3:
            return None
        day, month, year = (_int_prefix(p) for p in parts)
        if day is None or month is None or year is None:
            return None
        return _local_date(year, month, day)

    try:
        return _from_date(dt.datetime.fromisoformat(text).date())
    except ValueError:
        pass
    try:
        parsed = date_parser.parse(text, default=_PARSE_DEFAULT)
    except (ValueError, OverflowError, TypeError):
        return None
    return _from_date(parsed.date())

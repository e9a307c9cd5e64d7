"""
Numeric/Text Normalizer - coerces cell and text representations.

Single responsibility: turn "$45,000", "(1,234.50)", 1000 into floats and guess
period / currency from surrounding text. No I/O, no state.
"""
import math
import numbers
import re
from datetime import datetime
from typing import Any, Union

# Characters removed before float(): currency symbols, separators, whitespace, parens
_STRIP_CHARS = re.compile(r"[$€£¥,\s()]")
_YEAR_PATTERN = re.compile(r"(\d{4})")
_QUARTER_PATTERN = re.compile(r"(Q[1-4]|quarter\s+[1-4])", re.IGNORECASE)

# Checked in order, first hit wins
_CURRENCY_MARKERS = [
    ("USD", "$", "dollar"),
    ("EUR", "€", "euro"),
    ("GBP", "£", "pound"),
    ("JPY", "¥", "yen"),
]


def parse_numeric_value(value: Any) -> float:
    """
    Coerce a cell or text fragment to a float.

    Accounting negatives "(1,234.50)" become -1234.5. Returns NaN when the
    remainder is not a float; callers must drop NaN rather than store it.
    """
    if isinstance(value, bool) or value is None:
        return math.nan

    if isinstance(value, numbers.Number):
        return float(value)

    text = str(value)
    if not text.strip():
        return math.nan

    cleaned = _STRIP_CHARS.sub("", text)
    try:
        parsed = float(cleaned)
    except ValueError:
        return math.nan

    if "(" in text and ")" in text:
        return -parsed
    return parsed


def is_valid_number(value: float) -> bool:
    return isinstance(value, float) and math.isfinite(value)


def parse_cell_value(text: str) -> Union[float, str]:
    """Number when the cell parses as one, otherwise the original text."""
    numeric = parse_numeric_value(text)
    if is_valid_number(numeric):
        return numeric
    return text


def extract_period(text: str) -> str:
    """
    Fiscal period token from text: a 4-digit run wins over a quarter token,
    falling back to the current calendar year.
    """
    year_match = _YEAR_PATTERN.search(text or "")
    if year_match:
        return year_match.group(1)

    quarter_match = _QUARTER_PATTERN.search(text or "")
    if quarter_match:
        return quarter_match.group(0)

    return str(datetime.now().year)


def extract_currency(text: str, default: str = "USD") -> str:
    """Currency code from symbols or names, priority USD, EUR, GBP, JPY."""
    text = text or ""
    lowered = text.lower()
    for code, symbol, name in _CURRENCY_MARKERS:
        if symbol in text or name in lowered:
            return code
    return default

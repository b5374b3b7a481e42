# src/lab_ingestion/normalization/numeric.py
"""
Numeric value parsing for lab values.

Lab reports and model output mix locale formats ("17,9" vs "1,234"),
trailing units ("120 mg/dL") and trend arrows ("↑95"). parse_numeric_value
reduces all of these to a float, or NaN when nothing numeric is left.
"""

import math
import re
from typing import Any

from ..constants.units import RECOGNIZED_UNITS, TREND_SYMBOLS

_TREND_RE = re.compile(f"[{TREND_SYMBOLS}]")
_TRAILING_UNIT_RE = re.compile(
    r"\s*(?:" + "|".join(re.escape(unit) for unit in RECOGNIZED_UNITS) + r")\s*$",
    re.IGNORECASE,
)

# Comma disambiguation, checked in this order
_DECIMAL_COMMA_RE = re.compile(r"^\d+,\d{1,2}$")
_THOUSANDS_RE = re.compile(r"^\d{1,3}(,\d{3})*$")
_THOUSANDS_WITH_DECIMAL_RE = re.compile(r"^\d{1,3}(,\d{3})*\.\d+$")

# Leading float literal; trailing garbage is ignored
_FLOAT_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_numeric_value(value: Any) -> float:
    """
    Parse a loosely formatted lab value into a float.

    Handles values like:
    - 95 / 95.0       (already numeric, returned unchanged)
    - "17,9"          (decimal comma)
    - "1,234"         (thousands separator)
    - "1,234.56"      (thousands separator with decimal point)
    - "120 mg/dL"     (trailing unit)
    - "↑95"           (trend arrow)

    Returns:
        The parsed value, or NaN when the input is None, empty or not
        numeric. Never raises.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return math.nan

    text = str(value).strip()
    text = _TREND_RE.sub("", text)
    text = _TRAILING_UNIT_RE.sub("", text)
    text = text.strip()

    if _DECIMAL_COMMA_RE.match(text):
        text = text.replace(",", ".")
    elif _THOUSANDS_RE.match(text):
        text = text.replace(",", "")
    elif _THOUSANDS_WITH_DECIMAL_RE.match(text):
        integer_part, _, fraction = text.partition(".")
        text = integer_part.replace(",", "") + "." + fraction
    else:
        text = text.replace(",", "")

    match = _FLOAT_PREFIX_RE.match(text)
    if not match:
        return math.nan
    try:
        return float(match.group(0))
    except ValueError:
        return math.nan


def parse_optional_numeric(value: Any):
    """Like parse_numeric_value, but None stays None instead of becoming NaN."""
    if value is None:
        return None
    return parse_numeric_value(value)


def is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)

# src/lab_ingestion/normalization/status.py
"""
Status classification of a value against its reference range.
"""

import math
from typing import Optional

from ..core.models import AnalyteStatus


def infer_status(
    value: float,
    ref_low: Optional[float],
    ref_high: Optional[float]
) -> AnalyteStatus:
    """
    Classify a value relative to its reference range.

    Bounds are inclusive: a value equal to ref_low or ref_high is normal.
    A single bound is enough to call a value normal when it respects that
    bound. Without bounds (or with a non-finite value) the status is unknown.
    ref_low > ref_high is not rejected; the low check runs first.
    """
    if value is None or not math.isfinite(value):
        return AnalyteStatus.UNKNOWN

    low = ref_low if ref_low is not None and math.isfinite(ref_low) else None
    high = ref_high if ref_high is not None and math.isfinite(ref_high) else None

    if low is None and high is None:
        return AnalyteStatus.UNKNOWN
    if low is not None and value < low:
        return AnalyteStatus.LOW
    if high is not None and value > high:
        return AnalyteStatus.HIGH
    return AnalyteStatus.NORMAL


def coerce_status(raw: object) -> Optional[AnalyteStatus]:
    """Return the status when raw is one of the four labels, else None."""
    if isinstance(raw, AnalyteStatus):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return AnalyteStatus(raw.strip().lower())
    except ValueError:
        return None

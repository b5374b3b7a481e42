# src/lab_ingestion/normalization/__init__.py

from .numeric import parse_numeric_value, parse_optional_numeric, is_finite_number
from .names import normalize_name, name_key
from .status import infer_status, coerce_status

__all__ = [
    "parse_numeric_value",
    "parse_optional_numeric",
    "is_finite_number",
    "normalize_name",
    "name_key",
    "infer_status",
    "coerce_status",
]

# src/lab_ingestion/normalization/names.py
"""
Analyte name normalization.
"""

from typing import Any, Dict, Optional

from ..constants.analyte_aliases import ANALYTE_ALIASES


def normalize_name(raw: Any, aliases: Optional[Dict[str, str]] = None) -> str:
    """
    Map a raw analyte label to its canonical name.

    Lookup is case-insensitive. Labels that are not in the alias table are
    returned exactly as given. Non-string input yields "".
    """
    if not isinstance(raw, str):
        return ""
    table = ANALYTE_ALIASES if aliases is None else aliases
    return table.get(raw.strip().lower(), raw)


def name_key(name: str) -> str:
    """Case-insensitive comparison key for an analyte name."""
    return normalize_name(name).strip().lower()

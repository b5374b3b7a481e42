# ============================================================================
# src/lab_ingestion/constants/units.py
# ============================================================================
"""
Unit tokens and symbols stripped from numeric values.
"""

# Matched case-insensitively at the end of a value string
RECOGNIZED_UNITS = (
    "mmol/mol",
    "mg/dL",
    "g/dL",
    "mmol/L",
    "µmol/L",
    "μmol/L",
    "umol/L",
    "mEq/L",
    "ng/mL",
    "pg/mL",
    "µg/dL",
    "μg/dL",
    "ug/dL",
    "mIU/L",
    "mUI/mL",
    "IU/L",
    "UI/mL",
    "U/L",
    "g/L",
    "mg/L",
    "%",
)

# Trend arrows lab reports print next to out-of-range values
TREND_SYMBOLS = "↑↓→←⬆⬇"

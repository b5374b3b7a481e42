# ============================================================================
# src/lab_ingestion/constants/__init__.py
# ============================================================================
"""
Convenient imports for all constants
"""

from .analyte_aliases import ANALYTE_ALIASES
from .units import RECOGNIZED_UNITS, TREND_SYMBOLS
from .sample_reports import SAMPLE_LAB_TEXT, SAMPLE_COMPREHENSIVE_LAB_TEXT

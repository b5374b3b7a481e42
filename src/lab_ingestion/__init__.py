# src/lab_ingestion/__init__.py
"""
Lab report extraction and normalization service.
"""

__version__ = "1.0.0"

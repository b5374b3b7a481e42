# src/lab_ingestion/llm/__init__.py

from .client import StructuredExtractionClient

__all__ = ["StructuredExtractionClient"]

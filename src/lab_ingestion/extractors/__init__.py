# src/lab_ingestion/extractors/__init__.py

from .text_extractor import DocumentTextExtractor
from .page_renderer import VisionFallbackRenderer

__all__ = [
    "DocumentTextExtractor",
    "VisionFallbackRenderer",
]

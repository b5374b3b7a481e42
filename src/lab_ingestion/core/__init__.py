# ============================================================================
# src/lab_ingestion/core/__init__.py
# ============================================================================
"""
Core data model for the lab ingestion service.

Orchestration lives in submodules (orchestrator, postprocessor, pipeline,
report_analyzer, report_store); import them directly.
"""

from .models import (
    AnalyteStatus,
    ExtractionMethod,
    ExtractionQuality,
    AttemptError,
    DocumentMeta,
    RawAnalyteCandidate,
    RawExtractionResult,
    ExtractionAttempt,
    NormalizedAnalyte,
    ExtractionMeta,
    ExtractionOutcome,
    RequestedAnalyte,
    PageImage,
    TextExtractionResult,
)

__all__ = [
    "AnalyteStatus",
    "ExtractionMethod",
    "ExtractionQuality",
    "AttemptError",
    "DocumentMeta",
    "RawAnalyteCandidate",
    "RawExtractionResult",
    "ExtractionAttempt",
    "NormalizedAnalyte",
    "ExtractionMeta",
    "ExtractionOutcome",
    "RequestedAnalyte",
    "PageImage",
    "TextExtractionResult",
]

# ============================================================================
# src/lab_ingestion/core/models.py
# ============================================================================
"""
Extraction data model
- Raw candidates as returned by the extraction backend
- Normalized analytes and the final extraction outcome
- Tagged result of a single backend attempt

Candidates are frozen and held in tuples: an attempt's result is never
edited after it is built, the orchestrator only chooses between them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class AnalyteStatus(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    UNKNOWN = "unknown"


class ExtractionMethod(str, Enum):
    TEXT_ONLY = "text_only"
    VISION_FALLBACK = "vision_fallback"


class ExtractionQuality(str, Enum):
    COMPREHENSIVE = "comprehensive"
    MODERATE = "moderate"
    LIMITED = "limited"


class AttemptError(str, Enum):
    BACKEND_CALL = "backend_call"      # network, auth, quota
    BACKEND_PARSE = "backend_parse"    # response was not a JSON object
    EMPTY_RESPONSE = "empty_response"  # response had no content


@dataclass(frozen=True)
class DocumentMeta:
    lab_name: Optional[str] = None
    collection_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "DocumentMeta":
        if not isinstance(data, dict):
            return cls()
        return cls(
            lab_name=_optional_str(data.get("lab_name")),
            collection_date=_optional_str(data.get("collection_date")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"lab_name": self.lab_name, "collection_date": self.collection_date}


@dataclass(frozen=True)
class RawAnalyteCandidate:
    """One analyte row as the backend returned it, before normalization."""
    name: str
    value: Union[str, float, int, None]
    unit: Optional[str] = None
    ref_low: Union[str, float, int, None] = None
    ref_high: Union[str, float, int, None] = None
    status: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "RawAnalyteCandidate":
        if not isinstance(data, dict):
            return cls(name="", value=None)
        name = data.get("name")
        if name is None:
            name = data.get("analyte")
        return cls(
            name=name if isinstance(name, str) else "",
            value=data.get("value"),
            unit=_optional_str(data.get("unit")),
            ref_low=data.get("ref_low"),
            ref_high=data.get("ref_high"),
            status=_optional_str(data.get("status")),
            note=_optional_str(data.get("note")),
        )


@dataclass(frozen=True)
class RawExtractionResult:
    document_meta: DocumentMeta = field(default_factory=DocumentMeta)
    analytes: Tuple[RawAnalyteCandidate, ...] = ()

    @property
    def analyte_count(self) -> int:
        return len(self.analytes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawExtractionResult":
        rows = data.get("analytes")
        if not isinstance(rows, list):
            rows = []
        return cls(
            document_meta=DocumentMeta.from_dict(data.get("document_meta")),
            analytes=tuple(RawAnalyteCandidate.from_dict(row) for row in rows),
        )


@dataclass(frozen=True)
class ExtractionAttempt:
    """
    Outcome of one call to the extraction backend.

    Exactly one of result / error is set. detail holds a truncated raw
    response or the backend error message for diagnostics.
    """
    result: Optional[RawExtractionResult] = None
    error: Optional[AttemptError] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    @classmethod
    def success(cls, result: RawExtractionResult) -> "ExtractionAttempt":
        return cls(result=result)

    @classmethod
    def failure(cls, error: AttemptError, detail: Optional[str] = None) -> "ExtractionAttempt":
        return cls(error=error, detail=detail)


@dataclass(frozen=True)
class NormalizedAnalyte:
    name: str
    value: float
    unit: Optional[str] = None
    ref_low: Optional[float] = None
    ref_high: Optional[float] = None
    status: AnalyteStatus = AnalyteStatus.UNKNOWN
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "value": self.value,
            "unit": self.unit,
            "ref_low": self.ref_low,
            "ref_high": self.ref_high,
            "status": self.status.value,
        }
        if self.note is not None:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class ExtractionMeta:
    extraction_quality: ExtractionQuality
    analyte_count: int
    text_length: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extraction_quality": self.extraction_quality.value,
            "analyte_count": self.analyte_count,
            "text_length": self.text_length,
        }


@dataclass(frozen=True)
class ExtractionOutcome:
    document_meta: DocumentMeta
    analytes: Tuple[NormalizedAnalyte, ...]
    extraction_method: ExtractionMethod
    extraction_meta: ExtractionMeta

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_meta": self.document_meta.to_dict(),
            "analytes": [a.to_dict() for a in self.analytes],
            "extraction_method": self.extraction_method.value,
            "extraction_meta": self.extraction_meta.to_dict(),
        }


@dataclass(frozen=True)
class RequestedAnalyte:
    """An analyte the caller explicitly asked to analyze (manual entry)."""
    name: str
    value: float
    unit: Optional[str] = None
    ref_low: Optional[float] = None
    ref_high: Optional[float] = None


@dataclass(frozen=True)
class PageImage:
    """A rendered PDF page ready to send to a vision model."""
    page_index: int
    data_url: str


@dataclass
class TextExtractionResult:
    """Text pulled from a PDF and which pass produced it."""
    text: str
    method: str = "primary"  # 'primary' or 'secondary'
    page_count: int = 0
    warnings: List[str] = field(default_factory=list)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)

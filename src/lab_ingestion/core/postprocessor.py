# ============================================================================
# src/lab_ingestion/core/postprocessor.py
# ============================================================================
"""
Result post-processing

Turns a raw extraction result into the final outcome:
1. Normalize names, values and reference bounds
2. Drop rows without a name or a finite value
3. Infer the status from the bounds (the analysis flow may keep a valid
   model label)
4. Drop exact duplicates
5. Backfill analytes the caller asked about but the model left out
6. Attach extraction metadata (quality tier, counts)

Data-quality problems never raise; bad rows are dropped.
"""

import logging
import math
from typing import List, Optional, Sequence

from ..config import extraction_settings
from ..llm.prompts import BACKFILL_NOTE
from ..normalization import (
    coerce_status,
    infer_status,
    name_key,
    normalize_name,
    parse_numeric_value,
    parse_optional_numeric,
)
from ..utils.exceptions import ConfigurationError
from .models import (
    ExtractionMeta,
    ExtractionMethod,
    ExtractionOutcome,
    ExtractionQuality,
    NormalizedAnalyte,
    RawAnalyteCandidate,
    RawExtractionResult,
    RequestedAnalyte,
)


class ResultPostProcessor:
    """Normalizes and validates a raw extraction result."""

    def __init__(
        self,
        comprehensive_threshold: Optional[int] = None,
        moderate_threshold: Optional[int] = None
    ):
        self.logger = logging.getLogger(__name__)
        self.comprehensive_threshold = (
            extraction_settings.COMPREHENSIVE_THRESHOLD
            if comprehensive_threshold is None else comprehensive_threshold
        )
        self.moderate_threshold = (
            extraction_settings.MODERATE_THRESHOLD
            if moderate_threshold is None else moderate_threshold
        )
        if self.moderate_threshold > self.comprehensive_threshold:
            raise ConfigurationError(
                "Quality thresholds out of order",
                details=f"moderate={self.moderate_threshold} > comprehensive={self.comprehensive_threshold}"
            )

    def process(
        self,
        raw: RawExtractionResult,
        *,
        text_length: int = 0,
        method: ExtractionMethod = ExtractionMethod.TEXT_ONLY,
        requested: Optional[Sequence[RequestedAnalyte]] = None,
        keep_reported_status: bool = False
    ) -> ExtractionOutcome:
        """
        Build the final outcome from a raw result.

        Args:
            raw: Adopted raw extraction result
            text_length: Length of the document text that was sent
            method: How the result was obtained
            requested: Analytes the caller submitted; missing ones are backfilled
            keep_reported_status: Keep a valid status label sent by the model
                instead of inferring it from the bounds

        Returns:
            ExtractionOutcome with only valid, de-duplicated analytes
        """
        analytes: List[NormalizedAnalyte] = []
        seen = set()
        dropped = 0

        for candidate in raw.analytes:
            analyte = self.normalize_candidate(candidate, keep_reported_status)
            if analyte is None:
                dropped += 1
                continue

            key = (name_key(analyte.name), analyte.unit, analyte.value)
            if key in seen:
                dropped += 1
                continue
            seen.add(key)
            analytes.append(analyte)

        if dropped:
            self.logger.info(f"Dropped {dropped} invalid or duplicate row(s) of {raw.analyte_count}")

        if requested:
            analytes.extend(self._backfill(analytes, requested))

        meta = ExtractionMeta(
            extraction_quality=self.quality_for(len(analytes)),
            analyte_count=len(analytes),
            text_length=text_length,
        )
        return ExtractionOutcome(
            document_meta=raw.document_meta,
            analytes=tuple(analytes),
            extraction_method=method,
            extraction_meta=meta,
        )

    def normalize_candidate(
        self,
        candidate: RawAnalyteCandidate,
        keep_reported_status: bool = False
    ) -> Optional[NormalizedAnalyte]:
        """Normalize one raw row, or None when it fails the validity gate."""
        name = normalize_name(candidate.name)
        if not name.strip():
            return None

        value = parse_numeric_value(candidate.value)
        if not math.isfinite(value):
            return None

        ref_low = self._parse_bound(candidate.ref_low)
        ref_high = self._parse_bound(candidate.ref_high)

        status = coerce_status(candidate.status) if keep_reported_status else None
        if status is None:
            status = infer_status(value, ref_low, ref_high)

        return NormalizedAnalyte(
            name=name,
            value=value,
            unit=candidate.unit or None,
            ref_low=ref_low,
            ref_high=ref_high,
            status=status,
            note=candidate.note,
        )

    def quality_for(self, analyte_count: int) -> ExtractionQuality:
        if analyte_count >= self.comprehensive_threshold:
            return ExtractionQuality.COMPREHENSIVE
        if analyte_count >= self.moderate_threshold:
            return ExtractionQuality.MODERATE
        return ExtractionQuality.LIMITED

    def _parse_bound(self, raw) -> Optional[float]:
        bound = parse_optional_numeric(raw)
        if bound is None or not math.isfinite(bound):
            return None
        return bound

    def _backfill(
        self,
        analytes: Sequence[NormalizedAnalyte],
        requested: Sequence[RequestedAnalyte]
    ) -> List[NormalizedAnalyte]:
        present = {name_key(a.name) for a in analytes}
        added = []

        for entry in requested:
            name = normalize_name(entry.name)
            key = name_key(name)
            if not key or key in present:
                continue
            value = parse_numeric_value(entry.value)
            if not math.isfinite(value):
                continue

            ref_low = self._parse_bound(entry.ref_low)
            ref_high = self._parse_bound(entry.ref_high)
            added.append(NormalizedAnalyte(
                name=name,
                value=value,
                unit=entry.unit or None,
                ref_low=ref_low,
                ref_high=ref_high,
                status=infer_status(value, ref_low, ref_high),
                note=BACKFILL_NOTE,
            ))
            present.add(key)

        if added:
            self.logger.info(f"Backfilled {len(added)} requested analyte(s) missing from the model output")
        return added

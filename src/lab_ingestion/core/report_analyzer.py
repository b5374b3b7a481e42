# ============================================================================
# src/lab_ingestion/core/report_analyzer.py
# ============================================================================
"""
Report Analyzer

Educational analysis of manually entered lab values. The model's answer
is treated as opaque except for its analytes, which go through the same
post-processing as extracted ones, with every submitted entry backfilled
if the model dropped it.
"""

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..config import llm_settings
from ..llm import StructuredExtractionClient
from ..llm.prompts import ANALYSIS_SYSTEM_PROMPT, DEFAULT_DISCLAIMERS
from ..normalization import is_finite_number
from .models import AnalyteStatus, NormalizedAnalyte, RawExtractionResult, RequestedAnalyte
from .postprocessor import ResultPostProcessor


def compute_health_score(reported: Any, analytes: Sequence[NormalizedAnalyte]) -> int:
    """
    Overall score in 0..100.

    A numeric score from the model is clamped; otherwise the score is the
    share of normal results among analytes with a known status.
    """
    if is_finite_number(reported):
        return int(round(min(100.0, max(0.0, float(reported)))))

    classified = [a for a in analytes if a.status is not AnalyteStatus.UNKNOWN]
    if not classified:
        return 0
    normal = sum(1 for a in classified if a.status is AnalyteStatus.NORMAL)
    return int(round(100.0 * normal / len(classified)))


class ReportAnalyzer:
    """Builds the stored report for a manual-entry submission."""

    def __init__(
        self,
        client: Optional[StructuredExtractionClient] = None,
        postprocessor: Optional[ResultPostProcessor] = None,
        temperature: Optional[float] = None
    ):
        self.logger = logging.getLogger(__name__)
        self.client = client or StructuredExtractionClient()
        self.postprocessor = postprocessor or ResultPostProcessor()
        self.temperature = llm_settings.ANALYSIS_TEMPERATURE if temperature is None else temperature

    async def analyze(
        self,
        demographics: Dict[str, Any],
        lab_results: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Ask the model for an educational analysis and normalize its analytes.

        Args:
            demographics: Validated demographics (sex, birth_year, height_cm, weight_kg)
            lab_results: Validated entries (analyte, value, unit, ref_low?, ref_high?)

        Returns:
            Report payload: overall_summary, overall_score, flags, analytes,
            chart_series, disclaimers

        Raises:
            ExtractionBackendError: the model call failed or returned no JSON object
        """
        requested = [
            RequestedAnalyte(
                name=entry["analyte"],
                value=entry["value"],
                unit=entry.get("unit"),
                ref_low=entry.get("ref_low"),
                ref_high=entry.get("ref_high"),
            )
            for entry in lab_results
        ]

        prompt_data = {
            "demographics": demographics,
            "lab_results": lab_results,
            "date": date.today().isoformat(),
        }
        self.logger.info(f"Analyzing {len(lab_results)} lab result(s)")

        data = await self.client.complete_json(
            ANALYSIS_SYSTEM_PROMPT,
            f"Analyze these lab results: {json.dumps(prompt_data)}",
            temperature=self.temperature,
        )

        outcome = self.postprocessor.process(
            RawExtractionResult.from_dict(data),
            requested=requested,
            keep_reported_status=True,
        )
        analytes = outcome.analytes

        summary = data.get("overall_summary")
        flags = data.get("flags")
        chart_series = data.get("chart_series")
        disclaimers = data.get("disclaimers")

        if not isinstance(disclaimers, list) or not disclaimers:
            disclaimers = list(DEFAULT_DISCLAIMERS)

        report = {
            "overall_summary": summary if isinstance(summary, str) else "",
            "overall_score": compute_health_score(data.get("overall_score"), analytes),
            "flags": [str(f) for f in flags] if isinstance(flags, list) else [],
            "analytes": [a.to_dict() for a in analytes],
            "chart_series": chart_series if isinstance(chart_series, list) else [],
            "disclaimers": [str(d) for d in disclaimers],
        }
        self.logger.info(
            f"Analysis ready: {len(analytes)} analytes, score {report['overall_score']}"
        )
        return report

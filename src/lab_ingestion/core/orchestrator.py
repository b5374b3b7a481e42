# ============================================================================
# src/lab_ingestion/core/orchestrator.py
# ============================================================================
"""
Extraction Orchestrator

Runs the extraction state machine for one document:

    NOT_STARTED -> TEXT_ATTEMPTING -> TEXT_SUCCEEDED_COMPREHENSIVE
                                    | TEXT_SUCCEEDED_PARTIAL
                                    | TEXT_EXHAUSTED
                -> VISION_ATTEMPTING (only when text found nothing)
                -> DONE | FAILED

Text attempts are best-of-N: every attempt is a full extraction, the one
with the most analytes wins, and retrying stops as soon as one attempt is
comprehensive. Results from different attempts are never merged.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence

from ..config import extraction_settings
from ..utils.exceptions import BackendUnavailableError, ModelEmptyResponseError
from .models import (
    AttemptError,
    ExtractionAttempt,
    ExtractionMethod,
    ExtractionOutcome,
    RawExtractionResult,
    RequestedAnalyte,
)
from .postprocessor import ResultPostProcessor


class OrchestratorState(str, Enum):
    NOT_STARTED = "not_started"
    TEXT_ATTEMPTING = "text_attempting"
    TEXT_SUCCEEDED_COMPREHENSIVE = "text_succeeded_comprehensive"
    TEXT_SUCCEEDED_PARTIAL = "text_succeeded_partial"
    TEXT_EXHAUSTED = "text_exhausted"
    VISION_ATTEMPTING = "vision_attempting"
    DONE = "done"
    FAILED = "failed"


class ExtractionOrchestrator:
    """
    Drives text extraction attempts and the vision fallback.

    Holds no per-run state; one instance can serve concurrent requests.

    Args:
        client: StructuredExtractionClient (anything with async extract(content, seed))
        renderer: VisionFallbackRenderer; without it the vision step is skipped
        postprocessor: ResultPostProcessor applied to the adopted result
        sleep: Awaitable used for the pause between attempts
    """

    def __init__(
        self,
        client,
        renderer=None,
        postprocessor: Optional[ResultPostProcessor] = None,
        max_attempts: Optional[int] = None,
        comprehensive_threshold: Optional[int] = None,
        retry_delay: Optional[float] = None,
        max_text_chars: Optional[int] = None,
        seed: Optional[int] = None,
        vision_max_pages: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.logger = logging.getLogger(__name__)
        self.client = client
        self.renderer = renderer
        self.postprocessor = postprocessor or ResultPostProcessor()

        s = extraction_settings
        self.max_attempts = s.MAX_ATTEMPTS if max_attempts is None else max_attempts
        self.comprehensive_threshold = (
            s.COMPREHENSIVE_THRESHOLD if comprehensive_threshold is None else comprehensive_threshold
        )
        self.retry_delay = s.RETRY_DELAY_SECONDS if retry_delay is None else retry_delay
        self.max_text_chars = s.MAX_TEXT_CHARS if max_text_chars is None else max_text_chars
        self.seed = s.EXTRACTION_SEED if seed is None else seed
        self.vision_max_pages = s.VISION_MAX_PAGES if vision_max_pages is None else vision_max_pages
        self._sleep = sleep

    async def run(
        self,
        document_text: str,
        document_bytes: Optional[bytes] = None,
        requested: Optional[Sequence[RequestedAnalyte]] = None
    ) -> ExtractionOutcome:
        """
        Extract analytes from document text.

        Args:
            document_text: Text obtained from the document
            document_bytes: Original PDF, needed for the vision fallback
            requested: Analytes to backfill if the model leaves them out

        Returns:
            Post-processed ExtractionOutcome

        Raises:
            BackendUnavailableError: every backend call failed
            ModelEmptyResponseError: no attempt produced a usable result
        """
        state = OrchestratorState.NOT_STARTED
        text = document_text[:self.max_text_chars]
        if len(document_text) > self.max_text_chars:
            self.logger.info(f"Truncated document text from {len(document_text)} to {self.max_text_chars} chars")

        state = self._transition(state, OrchestratorState.TEXT_ATTEMPTING)
        best, attempts = await self._run_text_attempts(text)
        best_count = best.analyte_count if best is not None else 0

        if best is not None and best_count >= self.comprehensive_threshold:
            state = self._transition(state, OrchestratorState.TEXT_SUCCEEDED_COMPREHENSIVE)
        elif best is not None and best_count > 0:
            state = self._transition(state, OrchestratorState.TEXT_SUCCEEDED_PARTIAL)
        else:
            state = self._transition(state, OrchestratorState.TEXT_EXHAUSTED)

        method = ExtractionMethod.TEXT_ONLY
        vision_attempt = None

        if best_count == 0 and document_bytes and self.renderer is not None:
            state = self._transition(state, OrchestratorState.VISION_ATTEMPTING)
            vision_attempt = await self._run_vision_attempt(document_bytes)
            if vision_attempt is not None and vision_attempt.ok:
                vision_count = vision_attempt.result.analyte_count
                if vision_count > best_count:
                    self.logger.info(f"Adopting vision result with {vision_count} analytes")
                    best = vision_attempt.result
                    best_count = vision_count
                    method = ExtractionMethod.VISION_FALLBACK
                elif best is None:
                    # Vision answered with an empty list: still a valid, empty result
                    best = vision_attempt.result
                    method = ExtractionMethod.VISION_FALLBACK

        if best is None:
            self._transition(state, OrchestratorState.FAILED)
            all_calls_failed = all(
                a.error is AttemptError.BACKEND_CALL for a in attempts
            ) and (vision_attempt is None or vision_attempt.error is AttemptError.BACKEND_CALL)
            details = "; ".join(
                f"attempt {i}: {a.error.value}" for i, a in enumerate(attempts, start=1)
            )
            if attempts and all_calls_failed:
                raise BackendUnavailableError("Extraction backend unavailable", details=details)
            raise ModelEmptyResponseError("No valid response from the extraction model", details=details)

        outcome = self.postprocessor.process(
            best,
            text_length=len(document_text),
            method=method,
            requested=requested,
        )
        self._transition(state, OrchestratorState.DONE)
        self.logger.info(
            f"Extraction done: {outcome.extraction_meta.analyte_count} analytes "
            f"({outcome.extraction_meta.extraction_quality.value}, {method.value})"
        )
        return outcome

    async def _run_text_attempts(self, text: str):
        """Best-of-N text attempts with early stop. Returns (best, attempts)."""
        best: Optional[RawExtractionResult] = None
        best_count = 0
        attempts: List[ExtractionAttempt] = []

        for attempt_no in range(1, self.max_attempts + 1):
            self.logger.info(f"Attempt {attempt_no}/{self.max_attempts}: sending {len(text)} chars")
            attempt = await self.client.extract(text, seed=self.seed)
            attempts.append(attempt)

            if not attempt.ok:
                self.logger.warning(
                    f"Attempt {attempt_no} failed ({attempt.error.value}): {attempt.detail}"
                )
            else:
                count = attempt.result.analyte_count
                self.logger.info(f"Attempt {attempt_no} found {count} analytes")

                if best is None or count > best_count:
                    if best is not None:
                        self.logger.info(f"New best result: {count} analytes")
                    best = attempt.result
                    best_count = count

                if count >= self.comprehensive_threshold:
                    self.logger.info(
                        f"Comprehensive result with {count} analytes, stopping retries"
                    )
                    break

            if attempt_no < self.max_attempts:
                await self._sleep(self.retry_delay)

        return best, attempts

    async def _run_vision_attempt(self, document_bytes: bytes) -> Optional[ExtractionAttempt]:
        self.logger.info("Text extraction found no analytes, trying vision fallback")
        pages = await self.renderer.render_pages_async(document_bytes, max_pages=self.vision_max_pages)
        if not pages:
            self.logger.warning("No pages could be rendered for vision fallback")
            return None

        attempt = await self.client.extract(pages, seed=self.seed)
        if attempt.ok:
            self.logger.info(f"Vision attempt found {attempt.result.analyte_count} analytes")
        else:
            self.logger.warning(f"Vision attempt failed ({attempt.error.value}): {attempt.detail}")
        return attempt

    def _transition(self, current: OrchestratorState, new: OrchestratorState) -> OrchestratorState:
        self.logger.debug(f"State {current.value} -> {new.value}")
        return new

# ============================================================================
# src/lab_ingestion/core/pipeline.py
# ============================================================================
"""
Lab report pipeline

Service facade used by the HTTP layer:

    upload validation -> text extraction -> orchestrator -> ExtractionOutcome

Components are injected so tests can swap the LLM client and renderer.
"""

import logging
from typing import Optional

from ..config import api_settings
from ..extractors import DocumentTextExtractor, VisionFallbackRenderer
from ..llm import StructuredExtractionClient
from ..utils.exceptions import (
    FileTooLargeError,
    InvalidInputError,
    NoFileError,
    UnsupportedMediaTypeError,
)
from ..utils.logging import log_performance
from .models import ExtractionOutcome
from .orchestrator import ExtractionOrchestrator

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class LabReportPipeline:
    """
    End-to-end extraction for uploaded PDFs and raw lab text.

    Usage:
        pipeline = LabReportPipeline()
        outcome = await pipeline.extract_from_pdf(data, "application/pdf")
        print(outcome.to_dict())
    """

    def __init__(
        self,
        text_extractor: Optional[DocumentTextExtractor] = None,
        orchestrator: Optional[ExtractionOrchestrator] = None,
        max_upload_bytes: Optional[int] = None
    ):
        self.text_extractor = text_extractor or DocumentTextExtractor()
        self.orchestrator = orchestrator or ExtractionOrchestrator(
            client=StructuredExtractionClient(),
            renderer=VisionFallbackRenderer(),
        )
        self.max_upload_bytes = max_upload_bytes or api_settings.MAX_UPLOAD_BYTES

    def validate_upload(self, content_type: Optional[str], size: int, has_file: bool = True) -> None:
        """
        Reject uploads before any extraction work.

        Raises:
            NoFileError: no file or an empty file
            UnsupportedMediaTypeError: not application/pdf
            FileTooLargeError: larger than the upload limit
        """
        if not has_file or size <= 0:
            raise NoFileError("No file uploaded")

        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type != PDF_CONTENT_TYPE:
            raise UnsupportedMediaTypeError(
                "Only PDF files are supported",
                details=f"Received content type: {content_type or 'none'}"
            )

        if size > self.max_upload_bytes:
            raise FileTooLargeError(
                "File too large",
                details=f"{size} bytes exceeds the {self.max_upload_bytes} byte limit"
            )

    @log_performance(logger, "PDF extraction")
    async def extract_from_pdf(self, data: bytes, content_type: Optional[str]) -> ExtractionOutcome:
        """Validate, extract text and run the orchestrator on a PDF upload."""
        self.validate_upload(content_type, len(data) if data else 0, has_file=data is not None)

        text_result = await self.text_extractor.extract_text_async(data)
        logger.info(
            f"Text extracted via {text_result.method} pass: "
            f"{len(text_result.text)} chars, {text_result.page_count} page(s)"
        )
        logger.debug(f"Text preview: {text_result.text[:500]}")

        return await self.orchestrator.run(text_result.text, document_bytes=data)

    @log_performance(logger, "Text extraction")
    async def extract_from_text(self, text: str) -> ExtractionOutcome:
        """Run the orchestrator on raw lab report text (no vision fallback)."""
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Text content required")

        logger.info(f"Extracting from raw text ({len(text)} chars)")
        return await self.orchestrator.run(text)

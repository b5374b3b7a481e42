# src/lab_ingestion/extractors/text_extractor.py
"""
Text extraction from lab report PDFs.

Extraction cascade:
1. Primary pass over the whole document
   - pypdfium2: fast, good Unicode support
   - pypdf: fallback when pypdfium2 cannot open the file
2. Secondary pass when the primary text is too short
   - pdfplumber, page by page, first few pages only
3. Hard floor: too little text from both passes means the document has
   no usable text layer (DocumentTextEmptyError)
"""

import asyncio
import io
import logging
from typing import List, Optional, Tuple

import pdfplumber
import pypdf
import pypdfium2

from ..config import extraction_settings
from ..core.models import TextExtractionResult
from ..utils.exceptions import DocumentTextEmptyError


class DocumentTextExtractor:
    """
    Pulls plain text out of PDF bytes, cheap strategies first.

    Thresholds default to extraction_settings and can be overridden per
    instance (tests use small values).
    """

    def __init__(
        self,
        min_quality_chars: Optional[int] = None,
        min_floor_chars: Optional[int] = None,
        secondary_max_pages: Optional[int] = None
    ):
        self.logger = logging.getLogger(__name__)
        self.min_quality_chars = (
            extraction_settings.MIN_TEXT_QUALITY_CHARS
            if min_quality_chars is None else min_quality_chars
        )
        self.min_floor_chars = (
            extraction_settings.MIN_TEXT_FLOOR_CHARS
            if min_floor_chars is None else min_floor_chars
        )
        self.secondary_max_pages = (
            extraction_settings.SECONDARY_MAX_PAGES
            if secondary_max_pages is None else secondary_max_pages
        )

    def extract_text(self, data: bytes) -> TextExtractionResult:
        """
        Extract text from PDF bytes.

        Args:
            data: Raw PDF file content

        Returns:
            TextExtractionResult with method 'primary' or 'secondary'

        Raises:
            DocumentTextEmptyError: both passes produced less than the floor
        """
        result = TextExtractionResult(text="")

        try:
            text, page_count = self._extract_with_pypdfium2(data)
            self.logger.debug(f"pypdfium2 extracted {len(text)} chars from {page_count} pages")
        except Exception as e:
            self.logger.warning(f"pypdfium2 failed, trying pypdf: {e}")
            result.warnings.append(f"pypdfium2 failed: {e}")
            try:
                text, page_count = self._extract_with_pypdf(data)
                self.logger.debug(f"pypdf extracted {len(text)} chars from {page_count} pages")
            except Exception as e2:
                self.logger.error(f"pypdf also failed: {e2}")
                result.warnings.append(f"pypdf failed: {e2}")
                text, page_count = "", 0

        result.text = text
        result.page_count = page_count
        result.method = "primary"

        if len(text.strip()) < self.min_quality_chars:
            self.logger.info(
                f"Primary text too short ({len(text.strip())} chars), "
                f"running page-by-page pass on first {self.secondary_max_pages} pages"
            )
            try:
                secondary_text, secondary_pages = self._extract_with_pdfplumber(data)
            except Exception as e:
                self.logger.warning(f"pdfplumber failed: {e}")
                result.warnings.append(f"pdfplumber failed: {e}")
            else:
                if len(secondary_text.strip()) > len(result.text.strip()):
                    result.text = secondary_text
                    result.method = "secondary"
                    result.page_count = max(result.page_count, secondary_pages)

        text_length = len(result.text.strip())
        if text_length < self.min_floor_chars:
            raise DocumentTextEmptyError(
                details=f"Extracted {text_length} characters; at least {self.min_floor_chars} required"
            )

        self.logger.info(f"Extracted {len(result.text)} chars using {result.method} pass")
        return result

    async def extract_text_async(self, data: bytes) -> TextExtractionResult:
        """Run extract_text in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.extract_text, data)

    def _extract_with_pypdfium2(self, data: bytes) -> Tuple[str, int]:
        """Extract text from every page using pypdfium2."""
        pdf = pypdfium2.PdfDocument(data)
        all_text = []
        try:
            for page_num in range(len(pdf)):
                page = pdf[page_num]
                try:
                    textpage = page.get_textpage()
                    text = textpage.get_text_range()
                    text = text.strip() if text else ""
                except Exception:
                    text = ""
                all_text.append(text)
        finally:
            pdf.close()

        return "\n\n".join(all_text), len(all_text)

    def _extract_with_pypdf(self, data: bytes) -> Tuple[str, int]:
        """Extract text from every page using pypdf."""
        reader = pypdf.PdfReader(io.BytesIO(data))

        if reader.is_encrypted:
            try:
                reader.decrypt("")
            except Exception:
                raise RuntimeError("PDF is encrypted and requires a password")

        all_text: List[str] = []
        for page in reader.pages:
            try:
                text = page.extract_text() or ""
            except Exception:
                text = ""
            all_text.append(text)

        return "\n\n".join(all_text), len(all_text)

    def _extract_with_pdfplumber(self, data: bytes) -> Tuple[str, int]:
        """Page-by-page extraction of the leading pages using pdfplumber."""
        all_text = []
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages[:self.secondary_max_pages]:
                try:
                    text = page.extract_text() or ""
                except Exception:
                    text = ""
                all_text.append(text)

        return "\n\n".join(all_text), len(all_text)

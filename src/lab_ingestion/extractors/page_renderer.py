# src/lab_ingestion/extractors/page_renderer.py
"""
Page rasterization for vision extraction.

Used only when text-based extraction finds no analytes: the leading pages
are rendered with pypdfium2, downscaled to fit the model's image budget
and encoded as PNG data URLs.
"""

import asyncio
import base64
import logging
from io import BytesIO
from typing import List, Optional

import pypdfium2
from PIL import Image

from ..config import extraction_settings
from ..core.models import PageImage


class VisionFallbackRenderer:
    """Renders PDF pages to images for a vision-capable model."""

    def __init__(self, max_dimension: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.max_dimension = (
            extraction_settings.MAX_IMAGE_DIMENSION
            if max_dimension is None else max_dimension
        )

    def render_pages(
        self,
        data: bytes,
        max_pages: Optional[int] = None,
        scale: Optional[float] = None
    ) -> List[PageImage]:
        """
        Render the first pages of a PDF.

        Args:
            data: Raw PDF file content
            max_pages: Number of leading pages to render
            scale: Render scale (1.0 = 72 DPI)

        Returns:
            Rendered pages in page order. A page that fails to render is
            skipped; an unreadable document yields an empty list.
        """
        max_pages = extraction_settings.VISION_MAX_PAGES if max_pages is None else max_pages
        scale = extraction_settings.VISION_RENDER_SCALE if scale is None else scale

        try:
            pdf = pypdfium2.PdfDocument(data)
        except Exception as e:
            self.logger.warning(f"Could not open PDF for rendering: {e}")
            return []

        images = []
        try:
            for page_idx in range(min(len(pdf), max_pages)):
                try:
                    page = pdf[page_idx]
                    bitmap = page.render(scale=scale)
                    pil_image = self._resize_image(bitmap.to_pil())
                    images.append(PageImage(
                        page_index=page_idx,
                        data_url=self._image_to_data_url(pil_image)
                    ))
                except Exception as e:
                    self.logger.warning(f"Failed to render page {page_idx}: {e}")
        finally:
            pdf.close()

        self.logger.info(f"Rendered {len(images)} page(s) for vision extraction")
        return images

    async def render_pages_async(
        self,
        data: bytes,
        max_pages: Optional[int] = None,
        scale: Optional[float] = None
    ) -> List[PageImage]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.render_pages, data, max_pages, scale)

    def _resize_image(self, image: Image.Image) -> Image.Image:
        """Resize image to fit within max dimension while preserving aspect ratio."""
        width, height = image.size

        if width <= self.max_dimension and height <= self.max_dimension:
            return image

        ratio = min(self.max_dimension / width, self.max_dimension / height)
        new_size = (max(1, int(width * ratio)), max(1, int(height * ratio)))

        return image.resize(new_size, Image.Resampling.LANCZOS)

    def _image_to_data_url(self, image: Image.Image) -> str:
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
        return f"data:image/png;base64,{encoded}"

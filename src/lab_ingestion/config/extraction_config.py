# ============================================================================
# src/lab_ingestion/config/extraction_config.py
# ============================================================================
"""
Extraction Thresholds
- Retry bound and early-stop threshold
- Text quality thresholds (secondary extraction / hard floor)
- Vision fallback rendering
- Quality tiers for extraction metadata
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExtractionSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1, le=10,
        description="Text extraction attempts before falling back to the best result"
    )
    COMPREHENSIVE_THRESHOLD: int = Field(
        default=20,
        ge=1,
        description="Analyte count at which an attempt is complete enough to stop retrying"
    )
    MODERATE_THRESHOLD: int = Field(
        default=10,
        ge=1,
        description="Analyte count for the 'moderate' extraction quality label"
    )
    RETRY_DELAY_SECONDS: float = Field(
        default=1.0,
        ge=0.0,
        description="Pause between extraction attempts"
    )
    MAX_TEXT_CHARS: int = Field(
        default=50000,
        ge=1000,
        description="Document text is truncated to this many characters before it is sent to the model"
    )
    EXTRACTION_SEED: int = Field(
        default=12345,
        description="Seed passed to the model on every extraction call"
    )

    # Text extraction
    MIN_TEXT_QUALITY_CHARS: int = Field(
        default=200,
        ge=0,
        description="Below this many characters the secondary (page-by-page) text pass runs"
    )
    MIN_TEXT_FLOOR_CHARS: int = Field(
        default=20,
        ge=0,
        description="Below this many characters the document is treated as having no usable text"
    )
    SECONDARY_MAX_PAGES: int = Field(
        default=5,
        ge=1,
        description="Pages read by the secondary text pass"
    )

    # Vision fallback
    VISION_MAX_PAGES: int = Field(
        default=3,
        ge=1,
        description="Leading pages rendered to images for vision extraction"
    )
    VISION_RENDER_SCALE: float = Field(
        default=2.0,
        gt=0.0,
        description="Render scale (1.0 = 72 DPI)"
    )
    MAX_IMAGE_DIMENSION: int = Field(
        default=2048,
        ge=256,
        description="Rendered pages are downscaled to fit within this many pixels"
    )


extraction_settings = ExtractionSettings()

# ============================================================================
# api/main.py
# ============================================================================
"""
FastAPI Backend for Lab Report Ingestion

Endpoints:
- GET  /api/health
- POST /api/extract          PDF upload -> normalized analytes
- POST /api/test-extract     raw lab text -> normalized analytes
- GET  /api/test-extract     built-in sample text (smoke test)
- POST /api/analyze          manual entry -> stored educational report
- GET  /api/report/{id}      stored report

Errors are returned as {"error": <code>, "details"?: <text>}; details are
only included when DEV_MODE is on.
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

# Add src to path for imports when running from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lab_ingestion import __version__
from lab_ingestion.config import api_settings, base_settings, logging_settings
from lab_ingestion.constants import SAMPLE_LAB_TEXT
from lab_ingestion.core.pipeline import LabReportPipeline
from lab_ingestion.core.report_analyzer import ReportAnalyzer
from lab_ingestion.core.report_store import ReportRepository, create_repository
from lab_ingestion.utils import (
    ExtractionTimeoutError,
    InvalidInputError,
    LabIngestionError,
    NoFileError,
    ReportNotFoundError,
    setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(
        level=logging_settings.LOG_LEVEL,
        log_file=logging_settings.LOG_FILE,
        format_json=logging_settings.LOG_JSON,
    )
    if base_settings.STORE_BACKEND == "sqlite":
        base_settings.create_directories()
    logger.info(f"Lab ingestion API {__version__} starting (store={base_settings.STORE_BACKEND})")
    yield


app = FastAPI(
    title="Lab Report Ingestion API",
    description="Extracts and normalizes lab analytes from blood-test reports",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Models
# ============================================================================

class Demographics(BaseModel):
    sex: Literal["M", "F", "X"]
    birth_year: int = Field(ge=1900)
    height_cm: float = Field(ge=50, le=300)
    weight_kg: float = Field(ge=20, le=500)

    @field_validator("birth_year")
    @classmethod
    def birth_year_not_in_future(cls, v: int) -> int:
        if v > date.today().year:
            raise ValueError("birth_year cannot be in the future")
        return v


class LabEntry(BaseModel):
    analyte: str = Field(min_length=1)
    value: float
    unit: str = Field(min_length=1)
    ref_low: Optional[float] = None
    ref_high: Optional[float] = None


class AnalyzeRequest(BaseModel):
    demographics: Demographics
    lab_results: List[LabEntry] = Field(min_length=1)


class TextExtractRequest(BaseModel):
    text: str


# ============================================================================
# Dependencies
# ============================================================================

@lru_cache
def get_pipeline() -> LabReportPipeline:
    return LabReportPipeline()


@lru_cache
def get_analyzer() -> ReportAnalyzer:
    return ReportAnalyzer()


@lru_cache
def get_upload_repository() -> ReportRepository:
    return create_repository("uploads")


@lru_cache
def get_report_repository() -> ReportRepository:
    return create_repository("reports")


async def _with_timeout(coro):
    try:
        return await asyncio.wait_for(coro, timeout=api_settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        raise ExtractionTimeoutError(
            "Extraction timed out",
            details=f"Exceeded {api_settings.REQUEST_TIMEOUT_SECONDS:.0f}s"
        )


# ============================================================================
# Error handling
# ============================================================================

def _error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body: Dict[str, Any] = {"error": error}
    if details and api_settings.DEV_MODE:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(LabIngestionError)
async def lab_ingestion_error_handler(request: Request, exc: LabIngestionError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.error_code}: {exc.message} ({exc.details})")
    else:
        logger.warning(f"{request.url.path} rejected: {exc.error_code}: {exc.message}")
    return _error_response(exc.status_code, exc.error_code, exc.details or exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"{request.url.path} invalid input: {exc.errors()}")
    return _error_response(400, InvalidInputError.error_code, str(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.url.path} unexpected error: {exc}")
    return _error_response(500, LabIngestionError.error_code, str(exc))


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/api/health")
async def health():
    """Health check for monitoring."""
    return {"status": "healthy", "version": __version__}


@app.post("/api/extract")
async def extract(
    file: Optional[UploadFile] = File(None),
    pipeline: LabReportPipeline = Depends(get_pipeline),
):
    """Extract normalized analytes from an uploaded lab report PDF."""
    if file is None:
        raise NoFileError("No file uploaded")

    # Check the declared size before reading the body into memory
    if file.size is not None:
        pipeline.validate_upload(file.content_type, file.size)

    data = await file.read()
    logger.info(f"Received {file.filename} ({len(data)} bytes, {file.content_type})")

    outcome = await _with_timeout(pipeline.extract_from_pdf(data, file.content_type))
    return outcome.to_dict()


@app.post("/api/test-extract")
async def test_extract(
    body: TextExtractRequest,
    pipeline: LabReportPipeline = Depends(get_pipeline),
):
    """Run extraction on raw lab report text."""
    outcome = await _with_timeout(pipeline.extract_from_text(body.text))
    return {
        "success": True,
        "extracted_data": outcome.to_dict(),
        "text_length": len(body.text),
    }


@app.get("/api/test-extract")
async def test_extract_sample(pipeline: LabReportPipeline = Depends(get_pipeline)):
    """Run extraction on the built-in sample lab text."""
    outcome = await _with_timeout(pipeline.extract_from_text(SAMPLE_LAB_TEXT))
    return {
        "success": True,
        "sample_text": SAMPLE_LAB_TEXT,
        "extracted_data": outcome.to_dict(),
        "text_length": len(SAMPLE_LAB_TEXT),
    }


@app.post("/api/analyze")
async def analyze(
    body: AnalyzeRequest,
    analyzer: ReportAnalyzer = Depends(get_analyzer),
    uploads: ReportRepository = Depends(get_upload_repository),
    reports: ReportRepository = Depends(get_report_repository),
):
    """Store a manual-entry upload and generate its educational report."""
    demographics = body.demographics.model_dump()
    lab_results = [entry.model_dump() for entry in body.lab_results]

    upload_id = uploads.save({
        "demographics": demographics,
        "raw_entries": lab_results,
    })

    result = await _with_timeout(analyzer.analyze(demographics, lab_results))

    report_id = reports.save({
        "upload_id": upload_id,
        "result_json": result,
    })
    logger.info(f"Created report {report_id} for upload {upload_id}")

    return {"success": True, "upload_id": upload_id, "report_id": report_id}


@app.get("/api/report/{report_id}")
async def get_report(
    report_id: str,
    reports: ReportRepository = Depends(get_report_repository),
):
    """Fetch a stored report."""
    report = reports.find_by_id(report_id)
    if report is None:
        raise ReportNotFoundError("Report not found", details=f"No report with id {report_id}")
    return report


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

# ============================================================================
# src/lab_ingestion/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the lab ingestion service.

Each error carries the HTTP status and short error code the API layer
returns, plus optional diagnostic details that are only exposed in
development mode.
"""

from typing import Optional


class LabIngestionError(Exception):
    """Base exception for all lab ingestion errors."""
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message or self.error_code)
        self.message = message or self.error_code
        self.details = details


class InvalidInputError(LabIngestionError):
    """Request input rejected before extraction starts."""
    status_code = 400
    error_code = "invalid_input"


class NoFileError(InvalidInputError):
    """No file in the upload."""
    error_code = "no_file"


class UnsupportedMediaTypeError(InvalidInputError):
    """Upload is not a PDF."""
    status_code = 415
    error_code = "not_pdf"


class FileTooLargeError(InvalidInputError):
    """Upload exceeds the size limit."""
    status_code = 413
    error_code = "file_too_large"


class DocumentTextEmptyError(LabIngestionError):
    """Neither text extraction pass produced usable text."""
    status_code = 422
    error_code = "pdf_text_empty_or_too_short"


class ExtractionBackendError(LabIngestionError):
    """The structured extraction backend could not produce a result."""
    status_code = 502
    error_code = "extraction_backend_error"


class BackendUnavailableError(ExtractionBackendError):
    """Every call to the extraction backend failed."""
    error_code = "backend_unavailable"


class ModelEmptyResponseError(ExtractionBackendError):
    """All attempts and the vision fallback ended without a usable result."""
    error_code = "model_empty_response"


class ExtractionTimeoutError(LabIngestionError):
    """Extraction exceeded the request wall-clock ceiling."""
    status_code = 504
    error_code = "extraction_timeout"


class ConfigurationError(LabIngestionError):
    """Invalid configuration."""
    error_code = "configuration_error"


class ResponseParseError(ExtractionBackendError):
    """The backend answered, but not with a JSON object."""
    error_code = "model_invalid_json"


class ReportNotFoundError(LabIngestionError):
    """No stored report with the requested id."""
    status_code = 404
    error_code = "report_not_found"

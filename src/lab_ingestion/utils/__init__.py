# ============================================================================
# src/lab_ingestion/utils/__init__.py
# ============================================================================
"""
Utility modules for the lab ingestion service.
"""

from .exceptions import (
    LabIngestionError,
    InvalidInputError,
    NoFileError,
    UnsupportedMediaTypeError,
    FileTooLargeError,
    DocumentTextEmptyError,
    ExtractionBackendError,
    BackendUnavailableError,
    ModelEmptyResponseError,
    ResponseParseError,
    ReportNotFoundError,
    ExtractionTimeoutError,
    ConfigurationError,
)

from .logging import (
    setup_logging,
    get_logger,
    log_performance,
    JsonFormatter,
)

__all__ = [
    # Exceptions
    'LabIngestionError',
    'InvalidInputError',
    'NoFileError',
    'UnsupportedMediaTypeError',
    'FileTooLargeError',
    'DocumentTextEmptyError',
    'ExtractionBackendError',
    'BackendUnavailableError',
    'ModelEmptyResponseError',
    'ResponseParseError',
    'ReportNotFoundError',
    'ExtractionTimeoutError',
    'ConfigurationError',
    # Logging
    'setup_logging',
    'get_logger',
    'log_performance',
    'JsonFormatter',
]

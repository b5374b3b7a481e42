# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import json
from types import SimpleNamespace

import pytest

from lab_ingestion.core.models import (
    AttemptError,
    ExtractionAttempt,
    RawExtractionResult,
)


# ============================================================================
# FAKE BACKENDS
# ============================================================================

def make_raw_result(count, prefix="Analyte"):
    """Raw result with `count` distinct valid analytes."""
    return RawExtractionResult.from_dict({
        "document_meta": {"lab_name": "Test Lab", "collection_date": "2024-01-15"},
        "analytes": [
            {"name": f"{prefix} {i}", "value": 10 + i, "unit": "mg/dL", "ref_low": 0, "ref_high": 100}
            for i in range(count)
        ],
    })


class ScriptedExtractionClient:
    """
    Stand-in for StructuredExtractionClient.

    Returns the queued attempts in order and records what it was sent.
    Items may be an int (analyte count), an AttemptError, or a ready-made
    ExtractionAttempt.
    """

    def __init__(self, script, vision=None):
        self.script = list(script)
        self.vision = vision
        self.text_calls = []
        self.vision_calls = []

    async def extract(self, content, seed=None):
        if isinstance(content, str):
            self.text_calls.append((content, seed))
            item = self.script.pop(0)
        else:
            self.vision_calls.append((list(content), seed))
            item = self.vision
        return self._to_attempt(item)

    def _to_attempt(self, item):
        if isinstance(item, ExtractionAttempt):
            return item
        if isinstance(item, AttemptError):
            return ExtractionAttempt.failure(item, "scripted failure")
        if item is None:
            return ExtractionAttempt.failure(AttemptError.EMPTY_RESPONSE, "scripted failure")
        return ExtractionAttempt.success(make_raw_result(item))


class FakeRenderer:
    """Stand-in for VisionFallbackRenderer."""

    def __init__(self, pages=1):
        self.pages = pages
        self.calls = 0

    async def render_pages_async(self, data, max_pages=None, scale=None):
        from lab_ingestion.core.models import PageImage
        self.calls += 1
        return [
            PageImage(page_index=i, data_url="data:image/png;base64,AAAA")
            for i in range(self.pages)
        ]


class FakeChatCompletions:
    """Mimics client.chat.completions of the openai SDK."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            response = json.dumps(response)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=response))]
        )


def make_sdk_client(*responses):
    """Fake openai SDK client answering with the given contents in order."""
    completions = FakeChatCompletions(responses)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


async def no_sleep(seconds):
    return None


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def sample_lab_text():
    """Sample lab report text for testing"""
    return """
    HealthLab Inc.
    Date: 2024-01-15

    GLUCOSE METABOLISM
    Glucose (Fasting): 95 mg/dL (Normal: 70-100)
    HbA1c: 5.8 % (Normal: 4.0-5.6)

    LIPID PANEL
    LDL-C: 145 mg/dL (Normal: <100)
    HDL-C: 42 mg/dL (Normal: >40)
    Triglycerides: 180 mg/dL (Normal: <150)
    """


@pytest.fixture
def glucose_response():
    """Model answer for a single glucose row"""
    return {
        "document_meta": {"lab_name": "HealthLab Inc.", "collection_date": "2024-01-15"},
        "analytes": [
            {"name": "Glucose (fasting)", "value": "95", "unit": "mg/dL", "ref_low": "70", "ref_high": "100"}
        ],
    }


def _write_pdf(path, pages):
    from reportlab.pdfgen import canvas
    from reportlab.lib.pagesizes import letter

    c = canvas.Canvas(str(path), pagesize=letter)
    for lines in pages:
        y = 750
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return path.read_bytes()


@pytest.fixture
def lab_report_pdf(tmp_path):
    """PDF with a text layer long enough for the primary pass"""
    lines = [
        "HealthLab Inc. - Laboratory Report",
        "Patient: John Doe    Collection date: 2024-01-15",
        "Glucose (fasting): 95 mg/dL   (70-100)",
        "HbA1c: 5.8 %   (4.0-5.6)",
        "LDL Cholesterol: 145 mg/dL   (<100)",
        "HDL Cholesterol: 42 mg/dL   (>40)",
        "Triglycerides: 180 mg/dL   (<150)",
        "Hemoglobin: 14.2 g/dL   (13.5-17.5)",
        "Hematocrit: 42.1 %   (41-53)",
        "WBC: 7.2 K/uL   (4.5-11.0)",
    ]
    return _write_pdf(tmp_path / "lab_report.pdf", [lines])


@pytest.fixture
def short_text_pdf(tmp_path):
    """PDF whose text is above the floor but below the quality threshold"""
    return _write_pdf(tmp_path / "short.pdf", [["Glucose: 95 mg/dL (70-100)"]])


@pytest.fixture
def blank_pdf(tmp_path):
    """PDF with pages but no text layer"""
    return _write_pdf(tmp_path / "blank.pdf", [[], []])


@pytest.fixture
def multi_page_pdf(tmp_path):
    """Seven-page PDF, one line per page"""
    pages = [[f"Page {i + 1} Content: Analyte {i + 1}: {i + 1}.0 mg/dL"] for i in range(7)]
    return _write_pdf(tmp_path / "multi_page.pdf", pages)

# ============================================================================
# FILE: tests/unit/test_api.py
# ============================================================================
"""
Unit tests for the FastAPI endpoints
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from api.main import (
    app,
    get_analyzer,
    get_pipeline,
    get_report_repository,
    get_upload_repository,
)
from lab_ingestion.config import api_settings
from lab_ingestion.core.orchestrator import ExtractionOrchestrator
from lab_ingestion.core.pipeline import LabReportPipeline
from lab_ingestion.core.report_analyzer import ReportAnalyzer
from lab_ingestion.core.report_store import InMemoryReportRepository
from lab_ingestion.llm import StructuredExtractionClient

from conftest import ScriptedExtractionClient, make_sdk_client, no_sleep


ANALYZE_BODY = {
    "demographics": {"sex": "M", "birth_year": 1980, "height_cm": 180, "weight_kg": 80},
    "lab_results": [
        {"analyte": "LDL", "value": 145, "unit": "mg/dL", "ref_high": 100},
        {"analyte": "Glucose", "value": 95, "unit": "mg/dL", "ref_low": 70, "ref_high": 100},
    ],
}


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_pipeline(extraction_client, renderer=None):
    orchestrator = ExtractionOrchestrator(client=extraction_client, renderer=renderer, sleep=no_sleep)
    pipeline = LabReportPipeline(orchestrator=orchestrator)
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    return pipeline


def _use_repositories():
    uploads = InMemoryReportRepository("uploads")
    reports = InMemoryReportRepository("reports")
    app.dependency_overrides[get_upload_repository] = lambda: uploads
    app.dependency_overrides[get_report_repository] = lambda: reports
    return uploads, reports


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ============================================================================
# /api/extract
# ============================================================================

def test_extract_pdf(client, lab_report_pdf, glucose_response):
    """Test a PDF upload returns the normalized outcome"""
    sdk = make_sdk_client(glucose_response, glucose_response, glucose_response)
    _use_pipeline(StructuredExtractionClient(client=sdk, model="test-model"))

    response = client.post(
        "/api/extract",
        files={"file": ("report.pdf", lab_report_pdf, "application/pdf")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["extraction_method"] == "text_only"
    assert data["analytes"][0]["name"] == "Glucose"
    assert data["analytes"][0]["status"] == "normal"
    assert data["extraction_meta"]["analyte_count"] == 1
    assert data["document_meta"]["lab_name"] == "HealthLab Inc."


def test_extract_without_file(client):
    _use_pipeline(ScriptedExtractionClient([]))
    response = client.post("/api/extract")
    assert response.status_code == 400
    assert response.json() == {"error": "no_file"}


def test_extract_wrong_content_type(client):
    _use_pipeline(ScriptedExtractionClient([]))
    response = client.post(
        "/api/extract",
        files={"file": ("notes.txt", b"Glucose: 95", "text/plain")},
    )
    assert response.status_code == 415
    assert response.json()["error"] == "not_pdf"


def test_extract_too_large(client, monkeypatch):
    pipeline = _use_pipeline(ScriptedExtractionClient([]))
    monkeypatch.setattr(pipeline, "max_upload_bytes", 10)

    response = client.post(
        "/api/extract",
        files={"file": ("report.pdf", b"%PDF-1.4" + b"0" * 100, "application/pdf")},
    )

    assert response.status_code == 413
    assert response.json()["error"] == "file_too_large"


def test_extract_blank_pdf(client, blank_pdf):
    _use_pipeline(ScriptedExtractionClient([]))
    response = client.post(
        "/api/extract",
        files={"file": ("blank.pdf", blank_pdf, "application/pdf")},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "pdf_text_empty_or_too_short"


def test_extract_model_failure_is_502(client, lab_report_pdf):
    _use_pipeline(ScriptedExtractionClient([None, None, None]))
    response = client.post(
        "/api/extract",
        files={"file": ("report.pdf", lab_report_pdf, "application/pdf")},
    )
    assert response.status_code == 502
    assert response.json()["error"] == "model_empty_response"


def test_details_only_in_dev_mode(client, monkeypatch, blank_pdf):
    """Test diagnostic details are hidden unless DEV_MODE is on"""
    _use_pipeline(ScriptedExtractionClient([]))
    files = {"file": ("blank.pdf", blank_pdf, "application/pdf")}

    assert "details" not in client.post("/api/extract", files=files).json()

    monkeypatch.setattr(api_settings, "DEV_MODE", True)
    body = client.post("/api/extract", files=files).json()
    assert "characters" in body["details"]


# ============================================================================
# /api/test-extract
# ============================================================================

def test_test_extract_text(client, sample_lab_text):
    _use_pipeline(ScriptedExtractionClient([4, 4, 4]))

    response = client.post("/api/test-extract", json={"text": sample_lab_text})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["text_length"] == len(sample_lab_text)
    assert data["extracted_data"]["extraction_meta"]["analyte_count"] == 4


def test_test_extract_requires_text(client):
    _use_pipeline(ScriptedExtractionClient([]))
    assert client.post("/api/test-extract", json={}).status_code == 400
    assert client.post("/api/test-extract", json={"text": "  "}).status_code == 400


def test_test_extract_sample(client):
    extraction_client = ScriptedExtractionClient([9, 9, 9])
    _use_pipeline(extraction_client)

    response = client.get("/api/test-extract")

    assert response.status_code == 200
    assert response.json()["extracted_data"]["extraction_meta"]["analyte_count"] == 9
    assert "LDL Cholesterol" in extraction_client.text_calls[0][0]


def test_timeout_is_504(client, monkeypatch):
    """Test a slow extraction is cut off at the request ceiling"""

    class SlowPipeline:
        async def extract_from_text(self, text):
            await asyncio.sleep(5)

    app.dependency_overrides[get_pipeline] = lambda: SlowPipeline()
    monkeypatch.setattr(api_settings, "REQUEST_TIMEOUT_SECONDS", 0.05)

    response = client.post("/api/test-extract", json={"text": "Glucose: 95"})

    assert response.status_code == 504
    assert response.json()["error"] == "extraction_timeout"


# ============================================================================
# /api/analyze and /api/report
# ============================================================================

def _use_analyzer(response):
    sdk = make_sdk_client(response)
    analyzer = ReportAnalyzer(client=StructuredExtractionClient(client=sdk, model="test-model"))
    app.dependency_overrides[get_analyzer] = lambda: analyzer
    return analyzer


def test_analyze_and_fetch_report(client):
    """Test the manual-entry flow stores upload and report"""
    uploads, _ = _use_repositories()
    _use_analyzer({
        "overall_summary": "Educational summary",
        "overall_score": 70,
        "analytes": [{"name": "LDL", "value": 145, "unit": "mg/dL", "ref_high": 100, "status": "high"}],
    })

    response = client.post("/api/analyze", json=ANALYZE_BODY)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    upload = uploads.find_by_id(data["upload_id"])
    assert upload["demographics"]["sex"] == "M"
    assert len(upload["raw_entries"]) == 2

    report = client.get(f"/api/report/{data['report_id']}").json()
    assert report["upload_id"] == data["upload_id"]
    result = report["result_json"]
    assert result["overall_score"] == 70
    assert [a["name"] for a in result["analytes"]] == ["LDL", "Glucose"]
    assert result["disclaimers"]


@pytest.mark.parametrize("patch", [
    {"demographics": {"sex": "Q", "birth_year": 1980, "height_cm": 180, "weight_kg": 80}},
    {"demographics": {"sex": "M", "birth_year": 1850, "height_cm": 180, "weight_kg": 80}},
    {"demographics": {"sex": "M", "birth_year": 2999, "height_cm": 180, "weight_kg": 80}},
    {"demographics": {"sex": "M", "birth_year": 1980, "height_cm": 20, "weight_kg": 80}},
    {"demographics": {"sex": "M", "birth_year": 1980, "height_cm": 180, "weight_kg": 900}},
    {"lab_results": []},
    {"lab_results": [{"analyte": "", "value": 1, "unit": "mg/dL"}]},
    {"lab_results": [{"analyte": "LDL", "value": 1, "unit": ""}]},
])
def test_analyze_validation_errors(client, patch):
    """Test invalid manual entries are rejected with 400"""
    _use_repositories()
    _use_analyzer({})

    response = client.post("/api/analyze", json={**ANALYZE_BODY, **patch})

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_input"


def test_report_not_found(client):
    _use_repositories()
    response = client.get("/api/report/missing")
    assert response.status_code == 404
    assert response.json()["error"] == "report_not_found"

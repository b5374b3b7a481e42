# ============================================================================
# FILE: tests/unit/test_consistency_check.py
# ============================================================================
"""
Unit tests for the run-to-run consistency script
"""

import pytest

from scripts import check_extraction_consistency as consistency
from lab_ingestion.core.orchestrator import ExtractionOrchestrator
from lab_ingestion.core.pipeline import LabReportPipeline

from conftest import ScriptedExtractionClient, no_sleep


def test_summarize_runs():
    summary = consistency.summarize_runs([
        ["Glucose", "HDL", "LDL"],
        ["Glucose", "LDL"],
        ["Glucose", "HDL", "LDL", "Triglycerides"],
    ])

    assert summary["counts"] == [3, 2, 4]
    assert summary["min"] == 2
    assert summary["max"] == 4
    assert summary["avg"] == pytest.approx(3.0)
    assert summary["inconsistent_names"] == ["HDL", "Triglycerides"]


def test_summarize_no_runs():
    summary = consistency.summarize_runs([])
    assert summary["counts"] == []
    assert summary["inconsistent_names"] == []


@pytest.mark.asyncio
async def test_run_checks_exit_codes(monkeypatch, capsys):
    """Test a failed run makes the script exit non-zero"""
    client = ScriptedExtractionClient([25, None, None, None])
    orchestrator = ExtractionOrchestrator(client=client, sleep=no_sleep)
    monkeypatch.setattr(
        consistency, "LabReportPipeline",
        lambda: LabReportPipeline(orchestrator=orchestrator),
    )

    exit_code = await consistency.run_checks("Glucose: 95 mg/dL", runs=2, delay=0)

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "Run 1/2: 25 analytes" in output
    assert "Run 2/2: FAILED (model_empty_response)" in output

# ============================================================================
# FILE: tests/unit/test_orchestrator.py
# ============================================================================
"""
Unit tests for the extraction orchestrator
"""

import pytest

from lab_ingestion.core.models import (
    AttemptError,
    ExtractionAttempt,
    ExtractionMethod,
    ExtractionQuality,
)
from lab_ingestion.core.orchestrator import ExtractionOrchestrator
from lab_ingestion.utils.exceptions import BackendUnavailableError, ModelEmptyResponseError

from conftest import FakeRenderer, ScriptedExtractionClient, make_raw_result, no_sleep


def _orchestrator(client, renderer=None, **kwargs):
    return ExtractionOrchestrator(client=client, renderer=renderer, sleep=no_sleep, **kwargs)


# ============================================================================
# BEST-OF-N
# ============================================================================

@pytest.mark.asyncio
async def test_best_of_attempts_is_adopted():
    """Test counts [3, 7, 2] adopt the 7-analyte attempt"""
    client = ScriptedExtractionClient([3, 7, 2])

    outcome = await _orchestrator(client).run("lab text")

    assert len(client.text_calls) == 3
    assert outcome.extraction_meta.analyte_count == 7
    assert outcome.extraction_method is ExtractionMethod.TEXT_ONLY


@pytest.mark.asyncio
async def test_early_stop_on_comprehensive_result():
    """Test retrying stops once an attempt reaches 20 analytes"""
    client = ScriptedExtractionClient([25, 30, 40])

    outcome = await _orchestrator(client).run("lab text")

    assert len(client.text_calls) == 1
    assert outcome.extraction_meta.analyte_count == 25
    assert outcome.extraction_meta.extraction_quality is ExtractionQuality.COMPREHENSIVE


@pytest.mark.asyncio
async def test_early_stop_on_second_attempt():
    client = ScriptedExtractionClient([5, 20, 40])

    outcome = await _orchestrator(client).run("lab text")

    assert len(client.text_calls) == 2
    assert outcome.extraction_meta.analyte_count == 20


@pytest.mark.asyncio
async def test_ties_keep_the_earlier_attempt():
    """Test only a strictly greater count replaces the best result"""
    client = ScriptedExtractionClient([
        ExtractionAttempt.success(make_raw_result(4, prefix="First")),
        ExtractionAttempt.success(make_raw_result(4, prefix="Second")),
        3,
    ])

    outcome = await _orchestrator(client).run("lab text")

    assert outcome.analytes[0].name.startswith("First")


@pytest.mark.asyncio
async def test_failed_attempts_are_skipped():
    """Test parse and backend failures do not stop the retries"""
    client = ScriptedExtractionClient([AttemptError.BACKEND_PARSE, AttemptError.BACKEND_CALL, 6])

    outcome = await _orchestrator(client).run("lab text")

    assert outcome.extraction_meta.analyte_count == 6


@pytest.mark.asyncio
async def test_delay_between_attempts_only():
    """Test the pause runs between attempts, never after the last one"""
    delays = []

    async def record_sleep(seconds):
        delays.append(seconds)

    client = ScriptedExtractionClient([1, 2, 3])
    orchestrator = ExtractionOrchestrator(client=client, sleep=record_sleep, retry_delay=1.0)

    await orchestrator.run("lab text")

    assert delays == [1.0, 1.0]


@pytest.mark.asyncio
async def test_text_truncated_and_seed_fixed():
    """Test the text budget and the fixed seed on every call"""
    client = ScriptedExtractionClient([1, 1, 1])
    orchestrator = _orchestrator(client, max_text_chars=1000, seed=12345)

    outcome = await orchestrator.run("x" * 5000)

    assert all(len(text) == 1000 for text, _ in client.text_calls)
    assert all(seed == 12345 for _, seed in client.text_calls)
    assert outcome.extraction_meta.text_length == 5000


# ============================================================================
# VISION FALLBACK
# ============================================================================

@pytest.mark.asyncio
async def test_vision_fallback_on_zero_analytes():
    """Test vision runs once when every text attempt found nothing"""
    renderer = FakeRenderer(pages=2)
    client = ScriptedExtractionClient([0, 0, 0], vision=4)

    outcome = await _orchestrator(client, renderer=renderer).run("lab text", document_bytes=b"%PDF")

    assert renderer.calls == 1
    assert len(client.vision_calls) == 1
    assert len(client.vision_calls[0][0]) == 2
    assert outcome.extraction_method is ExtractionMethod.VISION_FALLBACK
    assert outcome.extraction_meta.analyte_count == 4


@pytest.mark.asyncio
async def test_vision_not_run_when_text_found_analytes():
    renderer = FakeRenderer()
    client = ScriptedExtractionClient([0, 2, 0], vision=10)

    outcome = await _orchestrator(client, renderer=renderer).run("lab text", document_bytes=b"%PDF")

    assert renderer.calls == 0
    assert client.vision_calls == []
    assert outcome.extraction_method is ExtractionMethod.TEXT_ONLY


@pytest.mark.asyncio
async def test_vision_with_zero_analytes_keeps_text_result():
    """Test an empty vision result is not adopted over the text result"""
    client = ScriptedExtractionClient([0, 0, 0], vision=0)

    outcome = await _orchestrator(client, renderer=FakeRenderer()).run("lab text", document_bytes=b"%PDF")

    assert len(client.vision_calls) == 1
    assert outcome.extraction_method is ExtractionMethod.TEXT_ONLY
    assert outcome.extraction_meta.analyte_count == 0


@pytest.mark.asyncio
async def test_vision_skipped_without_document_bytes():
    """Test raw-text runs never render pages"""
    renderer = FakeRenderer()
    client = ScriptedExtractionClient([0, 0, 0], vision=5)

    outcome = await _orchestrator(client, renderer=renderer).run("lab text")

    assert renderer.calls == 0
    assert outcome.extraction_meta.analyte_count == 0


@pytest.mark.asyncio
async def test_vision_rescues_failed_text_attempts():
    client = ScriptedExtractionClient([None, None, None], vision=3)

    outcome = await _orchestrator(client, renderer=FakeRenderer()).run("lab text", document_bytes=b"%PDF")

    assert outcome.extraction_method is ExtractionMethod.VISION_FALLBACK
    assert outcome.extraction_meta.analyte_count == 3


# ============================================================================
# FAILURE
# ============================================================================

@pytest.mark.asyncio
async def test_all_attempts_empty_raises_model_empty_response():
    client = ScriptedExtractionClient([None, AttemptError.BACKEND_PARSE, None])

    with pytest.raises(ModelEmptyResponseError) as exc_info:
        await _orchestrator(client).run("lab text")

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_all_backend_calls_failed_raises_unavailable():
    client = ScriptedExtractionClient([AttemptError.BACKEND_CALL] * 3, vision=AttemptError.BACKEND_CALL)

    with pytest.raises(BackendUnavailableError):
        await _orchestrator(client, renderer=FakeRenderer()).run("lab text", document_bytes=b"%PDF")


@pytest.mark.asyncio
async def test_orchestrator_is_reusable():
    """Test no state leaks between runs"""
    client = ScriptedExtractionClient([7, 2, 1, 1, 1, 1])
    orchestrator = _orchestrator(client)

    first = await orchestrator.run("first")
    second = await orchestrator.run("second")

    assert first.extraction_meta.analyte_count == 7
    assert second.extraction_meta.analyte_count == 1

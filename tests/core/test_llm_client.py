"""Tests for JSON extraction and the retry-until-valid loop."""

import asyncio

import pytest

from factories import FakeGenerator, RecordingSleep, as_llm_text, case_payload
from prompt_detective.core.llm_client import (
    NoJsonInResponse,
    extract_json_object,
    generate_until_valid,
)
from prompt_detective.core.metrics import metrics
from prompt_detective.core.schemas import CaseData


def test_extract_json_object_ignores_surrounding_text():
    assert extract_json_object('Sure: {"a": {"b": 1}} hope that helps') == {"a": {"b": 1}}


def test_extract_json_object_without_braces_fails():
    with pytest.raises(NoJsonInResponse):
        extract_json_object("I could not think of a case today.")


def test_extract_json_object_with_broken_json_fails():
    with pytest.raises(ValueError):
        extract_json_object('{"id": "1", "title": }')


@pytest.mark.asyncio
async def test_retries_until_output_parses():
    """Test two bad responses then a good one: three calls, two sleeps."""
    generator = FakeGenerator("no json here", '{"broken": ', as_llm_text(case_payload()))
    sleep = RecordingSleep()

    case = await generate_until_valid(
        generator, "prompt", "model-x", CaseData.model_validate, label="case", retry_delay=0.5, sleep=sleep
    )

    assert case.id == "417"
    assert len(generator.calls) == 3
    assert sleep.delays == [0.5, 0.5]


@pytest.mark.asyncio
async def test_generator_exceptions_are_retried():
    generator = FakeGenerator(ConnectionError("boom"), as_llm_text(case_payload()))
    case = await generate_until_valid(
        generator, "prompt", "model-x", CaseData.model_validate, label="case", sleep=RecordingSleep()
    )
    assert case.title.startswith("The Case")
    assert generator.calls[0] == {"prompt": "prompt", "model": "model-x"}


@pytest.mark.asyncio
async def test_validation_failures_are_retried_and_counted():
    retries_before = metrics.generation_retries
    generator = FakeGenerator(
        as_llm_text(case_payload(botchedElement="vibe")), as_llm_text(case_payload())
    )
    await generate_until_valid(
        generator, "p", "m", CaseData.model_validate, label="case", sleep=RecordingSleep()
    )
    assert len(generator.calls) == 2
    assert metrics.generation_retries == retries_before + 1


@pytest.mark.asyncio
async def test_caller_timeout_cancels_endless_retries():
    """Test that a caller-side timeout is the way to bound a failing generator."""
    generator = FakeGenerator("never json")
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(
            generate_until_valid(
                generator, "p", "m", CaseData.model_validate, label="case", retry_delay=0.01
            ),
            timeout=0.1,
        )
    assert len(generator.calls) >= 2

# -*- coding: utf-8 -*-
"""Tests for analyzer dispatch, error wrapping and retry."""

from __future__ import annotations

import pytest

from conftest import SAMPLE_ANALYSIS, FakeVisionClient
from fontidentifier.integrations.gemini_client import GeminiClient
from fontidentifier.models.uploaded_image import UploadedImage
from fontidentifier.pipeline.analyzer import FONT_ANALYSIS_PROMPT, AnalysisFailedError, Analyzer


def _image() -> UploadedImage:
    return UploadedImage(data_uri="data:image/png;base64,AAAA", mime_type="image/png", size_bytes=3, name="a.png")


def test_prompt_lists_all_eight_sections() -> None:
    for number in range(1, 9):
        assert f"\n{number}. " in FONT_ANALYSIS_PROMPT
    assert "best educated guess" in FONT_ANALYSIS_PROMPT


def test_analyze_uses_gemini_by_default(keyed_config: dict, fake_gemini, fake_openrouter) -> None:
    analyzer = Analyzer(gemini_client=fake_gemini, openrouter_client=fake_openrouter)
    result = analyzer.analyze(_image(), keyed_config)

    assert result.text == SAMPLE_ANALYSIS
    assert result.provider == "gemini"
    assert result.model_used == "gemini_flash"
    assert not result.is_default
    assert len(fake_gemini.calls) == 1
    assert fake_openrouter.calls == []
    call = fake_gemini.calls[0]
    assert call["prompt"] == FONT_ANALYSIS_PROMPT
    assert call["api_key"] == "test-gemini-key"
    assert call["timeout"] == 60.0


def test_analyze_dispatches_to_openrouter(keyed_config: dict, fake_gemini, fake_openrouter) -> None:
    keyed_config["analysis"]["provider"] = "openrouter"
    keyed_config["analysis"]["model"] = "qwen_vl"
    analyzer = Analyzer(gemini_client=fake_gemini, openrouter_client=fake_openrouter)
    result = analyzer.analyze(_image(), keyed_config)

    assert result.provider == "openrouter"
    assert fake_openrouter.calls[0]["model_name"] == "qwen_vl"
    assert fake_gemini.calls == []


def test_missing_key_fails_without_request(default_config: dict, fake_gemini) -> None:
    analyzer = Analyzer(gemini_client=fake_gemini)
    with pytest.raises(AnalysisFailedError, match="No API key configured for gemini"):
        analyzer.analyze(_image(), default_config)
    assert fake_gemini.calls == []


def test_client_errors_become_analysis_failed(keyed_config: dict) -> None:
    client = FakeVisionClient(RuntimeError("Gemini request failed (status=503)"))
    analyzer = Analyzer(gemini_client=client)
    with pytest.raises(AnalysisFailedError, match="status=503"):
        analyzer.analyze(_image(), keyed_config)
    assert len(client.calls) == 1


def test_empty_response_is_failure(keyed_config: dict) -> None:
    analyzer = Analyzer(gemini_client=FakeVisionClient("   \n"))
    with pytest.raises(AnalysisFailedError, match="empty response"):
        analyzer.analyze(_image(), keyed_config)


def test_bounded_retry_with_backoff(keyed_config: dict) -> None:
    keyed_config["analysis"]["max_retries"] = 2
    keyed_config["analysis"]["retry_backoff_seconds"] = 0.5
    client = FakeVisionClient(OSError("reset"), RuntimeError("status=500"), "1. Primary")
    sleeps: list[float] = []
    analyzer = Analyzer(gemini_client=client, sleep=sleeps.append)

    result = analyzer.analyze(_image(), keyed_config)
    assert result.text == "1. Primary"
    assert len(client.calls) == 3
    assert sleeps == [0.5, 1.0]


def test_retry_gives_up_after_limit(keyed_config: dict) -> None:
    keyed_config["analysis"]["max_retries"] = 1
    client = FakeVisionClient(RuntimeError("first"), RuntimeError("second"))
    sleeps: list[float] = []
    analyzer = Analyzer(gemini_client=client, sleep=sleeps.append)

    with pytest.raises(AnalysisFailedError, match="second"):
        analyzer.analyze(_image(), keyed_config)
    assert len(client.calls) == 2
    assert sleeps == [1.0]


def test_unsupported_model_is_not_retried(keyed_config: dict) -> None:
    keyed_config["analysis"]["model"] = "nope"
    keyed_config["analysis"]["max_retries"] = 3
    sleeps: list[float] = []
    analyzer = Analyzer(gemini_client=GeminiClient(), sleep=sleeps.append)

    with pytest.raises(AnalysisFailedError, match="Unsupported model: nope"):
        analyzer.analyze(_image(), keyed_config)
    assert sleeps == []


def test_malformed_key_is_not_retried(keyed_config: dict) -> None:
    keyed_config["analysis"]["max_retries"] = 2
    client = FakeVisionClient(ValueError("Gemini API key missing or invalid format"), "1. Primary")
    sleeps: list[float] = []
    analyzer = Analyzer(gemini_client=client, sleep=sleeps.append)

    with pytest.raises(AnalysisFailedError, match="invalid format"):
        analyzer.analyze(_image(), keyed_config)
    assert len(client.calls) == 1
    assert sleeps == []


def test_key_is_passed_per_call_without_touching_client(keyed_config: dict, fake_gemini) -> None:
    analyzer = Analyzer(gemini_client=fake_gemini)
    analyzer.analyze(_image(), keyed_config)
    keyed_config["api_keys"]["gemini"] = "test-second-key"
    analyzer.analyze(_image(), keyed_config)

    assert [call["api_key"] for call in fake_gemini.calls] == ["test-gemini-key", "test-second-key"]
    assert fake_gemini.api_key == ""

# -*- coding: utf-8 -*-
"""Tests for the OpenRouter client payloads."""

from __future__ import annotations

from urllib import request

import pytest

from fontidentifier.integrations.openrouter_client import OpenRouterClient
from fontidentifier.models.uploaded_image import UploadedImage


IMAGE = UploadedImage(data_uri="data:image/png;base64,AAAA", mime_type="image/png", size_bytes=3)


def test_run_vision_model_sends_data_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    client = OpenRouterClient(api_key="sk-or-test")
    captured: dict = {}

    def fake_request(method, url, *, api_key, timeout, data=None):
        captured.update(method=method, url=url, api_key=api_key, data=data)
        return 200, {"choices": [{"message": {"content": "1. Primary Font Identification:"}}]}

    monkeypatch.setattr(client, "_request_json", fake_request)
    text = client.run_vision_model("qwen_vl", IMAGE, "identify the font")

    assert text == "1. Primary Font Identification:"
    assert captured["url"].endswith("/chat/completions")
    assert captured["data"]["model"] == "qwen/qwen2.5-vl-72b-instruct"
    content = captured["data"]["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "identify the font"}
    assert content[1]["image_url"]["url"] == IMAGE.data_uri


def test_list_content_is_joined(monkeypatch: pytest.MonkeyPatch) -> None:
    client = OpenRouterClient(api_key="sk-or-test")
    monkeypatch.setattr(
        client,
        "_request_json",
        lambda *args, **kwargs: (
            200,
            {"choices": [{"message": {"content": [{"type": "text", "text": "a"}, {"type": "text", "text": "b"}]}}]},
        ),
    )
    assert client.run_vision_model("gpt4o_vision", IMAGE, "p") == "a\nb"


def test_failed_status_carries_error_message(monkeypatch: pytest.MonkeyPatch) -> None:
    client = OpenRouterClient(api_key="sk-or-test")
    monkeypatch.setattr(client, "_request_json", lambda *args, **kwargs: (402, {"error": {"message": "Insufficient credits"}}))
    with pytest.raises(RuntimeError, match="status=402\\): Insufficient credits"):
        client.run_vision_model("qwen_vl", IMAGE, "p")


def test_empty_choices(monkeypatch: pytest.MonkeyPatch) -> None:
    client = OpenRouterClient(api_key="sk-or-test")
    monkeypatch.setattr(client, "_request_json", lambda *args, **kwargs: (200, {"choices": []}))
    with pytest.raises(RuntimeError, match="no choices"):
        client.run_vision_model("qwen_vl", IMAGE, "p")


def test_invalid_key_format_is_rejected_before_request() -> None:
    client = OpenRouterClient(api_key="AIza-gemini-key")
    assert not client.validate_key()
    with pytest.raises(ValueError, match="OpenRouter API key"):
        client.run_vision_model("qwen_vl", IMAGE, "p")


def test_transport_failure_names_the_service(monkeypatch: pytest.MonkeyPatch) -> None:
    client = OpenRouterClient(api_key="sk-or-test")

    def time_out(*args, **kwargs):
        raise TimeoutError("timed out")

    monkeypatch.setattr(request, "urlopen", time_out)
    with pytest.raises(RuntimeError, match="^Could not reach OpenRouter: timed out"):
        client.run_vision_model("qwen_vl", IMAGE, "p")

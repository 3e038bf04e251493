# -*- coding: utf-8 -*-
"""Shared pytest fixtures."""

from __future__ import annotations

import base64
import os
import sys
from pathlib import Path

import pytest


SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


PNG_1X1_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAwMCAO7+fJ8AAAAASUVORK5CYII="
)

SAMPLE_ANALYSIS = (
    "1. Primary Font Identification:\n"
    "- Font Name: Helvetica\n"
    "- Classification: Sans-serif\n"
    "\n"
    "2. Similar Fonts & Alternatives:\n"
    "- Arial\n"
    "- Inter\n"
)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_1X1_BYTES


@pytest.fixture
def sample_png(tmp_path: Path) -> Path:
    path = tmp_path / "sample.png"
    path.write_bytes(PNG_1X1_BYTES)
    return path


@pytest.fixture
def sample_jpeg(tmp_path: Path) -> Path:
    """A ~1 KiB file that starts like a JPEG."""
    path = tmp_path / "sample.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0" + b"\x00" * 1020)
    return path


@pytest.fixture
def default_config() -> dict:
    from fontidentifier.config import get_default_config

    return get_default_config()


@pytest.fixture
def keyed_config(default_config: dict) -> dict:
    default_config["api_keys"]["gemini"] = "test-gemini-key"
    default_config["api_keys"]["openrouter"] = "sk-or-test"
    return default_config


class FakeVisionClient:
    """Records calls and replays queued responses; exceptions in the queue are raised."""

    def __init__(self, *responses: object) -> None:
        self.api_key = ""
        self.responses = list(responses) or [SAMPLE_ANALYSIS]
        self.calls: list[dict] = []

    def run_vision_model(self, model_name, image, prompt, *, api_key=None, temperature=0.4, timeout=60.0) -> str:
        self.calls.append(
            {
                "model_name": model_name,
                "image": image,
                "prompt": prompt,
                "temperature": temperature,
                "timeout": timeout,
                "api_key": self.api_key if api_key is None else api_key,
            }
        )
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return str(response)


@pytest.fixture
def fake_gemini() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def fake_openrouter() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture(scope="session")
def qt_app():
    pytest.importorskip("PyQt6")
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app

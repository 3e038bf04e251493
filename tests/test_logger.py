# -*- coding: utf-8 -*-
"""Tests for session logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fontidentifier.utils.logger import setup_session_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    for attr in ("_fontidentifier_logging_configured", "_fontidentifier_session_log"):
        if hasattr(root, attr):
            delattr(root, attr)
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    for attr in ("_fontidentifier_logging_configured", "_fontidentifier_session_log"):
        if hasattr(root, attr):
            delattr(root, attr)


def test_session_log_file_is_created_once(tmp_path: Path, clean_root_logger: logging.Logger) -> None:
    first = setup_session_logging(tmp_path, "Font Identifier", level="DEBUG")
    second = setup_session_logging(tmp_path, "Font Identifier", level="ERROR")

    assert first is not None
    assert first == second
    assert first.parent == tmp_path / "logs"
    assert first.name.startswith("font-identifier-")
    assert clean_root_logger.level == logging.DEBUG

    logging.getLogger("fontidentifier.test").info("hello from test")
    for handler in clean_root_logger.handlers:
        handler.flush()
    assert "hello from test" in first.read_text(encoding="utf-8")


def test_unknown_level_falls_back_to_info(tmp_path: Path, clean_root_logger: logging.Logger) -> None:
    setup_session_logging(tmp_path, "app", level="chatty", log_dir="custom-logs")
    assert clean_root_logger.level == logging.INFO
    assert (tmp_path / "custom-logs").is_dir()

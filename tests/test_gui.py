# -*- coding: utf-8 -*-
"""Tests for the main window, dialogs and help integration."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PyQt6")

from PyQt6.QtWidgets import QDialogButtonBox, QLabel, QPlainTextEdit

from conftest import FakeVisionClient
from fontidentifier.config import KEY_PLACEHOLDER
from fontidentifier.gui.about_dialog import AboutDialog
from fontidentifier.gui.analysis_widget import AnalysisWidget
from fontidentifier.gui.controller import AppController
from fontidentifier.gui.help_system import HelpSystem
from fontidentifier.gui.main_window import MainWindow
from fontidentifier.gui.settings_dialog import SettingsDialog
from fontidentifier.models.analysis_result import AnalysisResult
from fontidentifier.models.display_block import SectionHeader
from fontidentifier.pipeline.analyzer import Analyzer


def _window(config: dict, tmp_path: Path, client: FakeVisionClient | None = None) -> MainWindow:
    controller = AppController(config, Analyzer(gemini_client=client or FakeVisionClient()), threaded=False)
    return MainWindow(config, controller=controller, settings_path=tmp_path / "settings.json")


def test_help_system_tooltip_lookup_and_fallback() -> None:
    assert HelpSystem.get_tooltip("main_window", "identify_button").startswith("Send the current image")
    assert HelpSystem.get_tooltip("missing", "missing") == "No help available."


def test_help_dialog_for_known_and_unknown_topic(qt_app) -> None:
    dialog = HelpSystem.build_help_dialog("settings.api_keys")
    assert dialog.windowTitle() == "API Keys Help"
    details = dialog.findChild(QPlainTextEdit)
    assert details is not None and "GEMINI_API_KEY" in details.toPlainText()
    dialog.close()

    dialog = HelpSystem.build_help_dialog("unknown.topic")
    assert dialog.windowTitle() == "Help"
    assert any("No help is available" in label.text() for label in dialog.findChildren(QLabel))
    dialog.close()


def test_loading_indicator_only_without_image(qt_app, keyed_config: dict, tmp_path: Path) -> None:
    window = _window(keyed_config, tmp_path)
    assert window.loading_label.isHidden()
    assert window.image_section.isHidden()
    assert window.upload_hint_label.text() == "PNG, JPG, JPEG or WEBP (MAX. 20MB)"

    window.controller.session.begin()
    window.controller.state_changed.emit("loading")
    assert not window.loading_label.isHidden()
    window.close()


def test_mount_renders_preview_and_results(qt_app, keyed_config: dict, tmp_path: Path) -> None:
    window = _window(keyed_config, tmp_path)
    window.controller.mount()

    assert not window.image_section.isHidden()
    assert not window.analysis_widget.isHidden()
    assert window.preview_widget.has_image()
    assert window.analysis_widget.blocks[0] == SectionHeader("Primary Font Identification:")
    assert window.identify_button.isEnabled()
    assert window.identify_button.text() == "Identify Font"
    assert window.error_label.isHidden()
    window.close()


def test_identify_button_disabled_while_loading(qt_app, keyed_config: dict, tmp_path: Path) -> None:
    window = _window(keyed_config, tmp_path)
    window.controller.mount()
    window.controller.session.begin()
    window.controller.state_changed.emit("loading")

    assert not window.identify_button.isEnabled()
    assert window.identify_button.text() == "Analyzing..."
    window.close()


def test_failed_upload_shows_error_banner(qt_app, keyed_config: dict, tmp_path: Path) -> None:
    window = _window(keyed_config, tmp_path)
    window.controller.mount()
    window.upload_image(tmp_path / "missing.png")

    assert not window.error_label.isHidden()
    assert window.error_label.text() == "Failed to read the image file. Please try again."
    assert window.preview_widget.has_image()
    window.close()


def test_analysis_widget_clears_rows(qt_app) -> None:
    widget = AnalysisWidget()
    widget.set_analysis(AnalysisResult("1. Header\n- Font Name: Futura\n- Bembo\nText"))
    assert len(widget.blocks) == 4
    widget.set_analysis(None)
    assert widget.blocks == []
    assert widget.isHidden()


def test_settings_dialog_round_trip(qt_app, keyed_config: dict) -> None:
    keyed_config["api_keys"]["openrouter"] = KEY_PLACEHOLDER
    dialog = SettingsDialog(keyed_config)

    assert dialog._line("api_gemini").text() == "test-gemini-key"
    assert dialog._line("api_openrouter").text() == ""

    dialog._combo("analysis_provider").setCurrentText("openrouter")
    assert dialog._combo("analysis_model").currentText() in {"gemini_flash", "gpt4o_vision", "qwen_vl", "llama_32_vision"}
    dialog._combo("analysis_model").setCurrentText("qwen_vl")
    dialog._spin("analysis_retries").setValue(2)
    dialog._line("api_openrouter").setText("sk-or-new")
    dialog.button_box.button(QDialogButtonBox.StandardButton.Apply).click()

    settings = dialog.get_settings()
    assert settings["analysis"]["provider"] == "openrouter"
    assert settings["analysis"]["model"] == "qwen_vl"
    assert settings["analysis"]["max_retries"] == 2
    assert settings["api_keys"]["openrouter"] == "sk-or-new"
    assert keyed_config["analysis"]["provider"] == "gemini"
    dialog.reject()


def test_about_dialog_builds(qt_app) -> None:
    dialog = AboutDialog()
    assert dialog.windowTitle() == "About AI Font Identifier"
    dialog.close()

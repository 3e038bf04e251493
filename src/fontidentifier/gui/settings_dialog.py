# -*- coding: utf-8 -*-
"""Settings dialog: analysis provider, API keys, upload and startup options."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from PyQt6.QtCore import QObject, QThread, Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QDoubleSpinBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from fontidentifier.config import KEY_PLACEHOLDER, LOG_LEVELS
from fontidentifier.constants import PROVIDERS
from fontidentifier.gui.help_system import HelpSystem
from fontidentifier.integrations.gemini_client import GeminiClient
from fontidentifier.integrations.openrouter_client import OpenRouterClient

MODEL_ALIASES: dict[str, list[str]] = {
    "gemini": list(GeminiClient.SUPPORTED_MODELS.keys()),
    "openrouter": list(OpenRouterClient.SUPPORTED_MODELS.keys()),
}


def _compute_key_status(provider: str, api_key: str) -> dict[str, str]:
    """Check one key: format first, then a short remote call."""
    client = GeminiClient() if provider == "gemini" else OpenRouterClient()
    if not api_key:
        return {"state": "warn", "text": "No key entered"}
    if not client.validate_key(api_key, check_remote=False):
        return {"state": "error", "text": "Key format invalid"}
    if client.validate_key(api_key, check_remote=True, timeout=3.0):
        return {"state": "ok", "text": "Connection OK"}
    return {"state": "error", "text": "Connection failed or key not accepted"}


class _ApiValidationWorker(QObject):
    finished = pyqtSignal(int, object)
    failed = pyqtSignal(int, str)

    def __init__(self, request_id: int, keys: dict[str, str]) -> None:
        super().__init__()
        self.request_id = request_id
        self.keys = keys

    def run(self) -> None:
        try:
            result = {provider: _compute_key_status(provider, key) for provider, key in self.keys.items()}
        except (ValueError, OSError) as exc:
            self.failed.emit(self.request_id, str(exc))
            return
        self.finished.emit(self.request_id, result)


class SettingsDialog(QDialog):
    """Modal settings dialog."""

    TAB_NAMES = ["AI Analysis", "API Keys", "Upload & Startup", "Logging"]

    def __init__(self, settings: dict[str, Any], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.resize(560, 420)
        self._settings = deepcopy(settings)
        self._fields: dict[str, QWidget] = {}
        self._api_status_widgets: dict[str, tuple[QLabel, QLabel]] = {}
        self._api_validation_thread: QThread | None = None
        self._api_validation_worker: _ApiValidationWorker | None = None
        self._api_validation_request_seq = 0

        self.tab_widget = QTabWidget()
        self.tab_widget.addTab(self._build_analysis_tab(), "AI Analysis")
        self.tab_widget.addTab(self._build_api_tab(), "API Keys")
        self.tab_widget.addTab(self._build_upload_tab(), "Upload & Startup")
        self.tab_widget.addTab(self._build_logging_tab(), "Logging")

        self.button_box = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok
            | QDialogButtonBox.StandardButton.Cancel
            | QDialogButtonBox.StandardButton.Apply
        )
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)
        self.button_box.button(QDialogButtonBox.StandardButton.Apply).clicked.connect(self._apply_into_state)

        layout = QVBoxLayout(self)
        layout.addWidget(self.tab_widget, 1)
        layout.addWidget(self.button_box)

        self._apply_field_tooltips()
        self._combo("analysis_provider").currentTextChanged.connect(self._refresh_model_options)

    def get_settings(self) -> dict[str, Any]:
        """Return the updated settings."""
        return deepcopy(self._settings)

    def accept(self) -> None:  # type: ignore[override]
        self._apply_into_state()
        self._stop_api_validation_thread()
        super().accept()

    def reject(self) -> None:  # type: ignore[override]
        self._stop_api_validation_thread()
        super().reject()

    def _apply_into_state(self) -> None:
        analysis = self._settings["analysis"]
        analysis["provider"] = self._combo("analysis_provider").currentText()
        model_text = self._combo("analysis_model").currentText().strip()
        if model_text:
            analysis["model"] = model_text
        analysis["temperature"] = self._dspin("analysis_temperature").value()
        analysis["timeout_seconds"] = self._dspin("analysis_timeout").value()
        analysis["max_retries"] = self._spin("analysis_retries").value()
        analysis["retry_backoff_seconds"] = self._dspin("analysis_backoff").value()

        for provider in PROVIDERS:
            key = self._line(f"api_{provider}").text().strip()
            self._settings["api_keys"][provider] = key or KEY_PLACEHOLDER

        self._settings["upload"]["max_size_mb"] = self._spin("upload_max_size").value()
        self._settings["default_content"]["enabled"] = self._check("default_enabled").isChecked()
        self._settings["logging"]["level"] = self._combo("log_level").currentText()

    def _build_analysis_tab(self) -> QWidget:
        tab = QWidget()
        form = QFormLayout(tab)
        analysis = self._settings["analysis"]
        provider = str(analysis.get("provider", "gemini"))
        form.addRow("Provider", self._register_combo("analysis_provider", list(PROVIDERS), provider))
        form.addRow(
            "Model",
            self._register_combo("analysis_model", MODEL_ALIASES.get(provider, []), str(analysis["model"])),
        )
        form.addRow(
            "Temperature",
            self._register_dspin("analysis_temperature", analysis["temperature"], 0.0, 2.0, 0.1),
        )
        form.addRow(
            "Timeout (s)",
            self._register_dspin("analysis_timeout", analysis["timeout_seconds"], 5.0, 600.0, 5.0),
        )
        form.addRow("Retries", self._register_spin("analysis_retries", analysis["max_retries"], 0, 5))
        form.addRow(
            "Retry Backoff (s)",
            self._register_dspin("analysis_backoff", analysis["retry_backoff_seconds"], 0.0, 30.0, 0.5),
        )
        hint = QLabel("With 0 retries a failed request is reported right away; use Identify Font to try again.")
        hint.setWordWrap(True)
        hint.setObjectName("mutedText")
        form.addRow("", hint)
        return tab

    def _build_api_tab(self) -> QWidget:
        tab = QWidget()
        form = QFormLayout(tab)
        keys = self._settings["api_keys"]
        for provider, label in (("gemini", "Gemini Key"), ("openrouter", "OpenRouter Key")):
            value = str(keys.get(provider, ""))
            form.addRow(label, self._register_line(f"api_{provider}", "" if value == KEY_PLACEHOLDER else value, True))
        form.addRow("Gemini Status", self._create_status_row("gemini"))
        form.addRow("OpenRouter Status", self._create_status_row("openrouter"))

        action_row = QHBoxLayout()
        test_button = QPushButton("Test Keys")
        test_button.clicked.connect(self._validate_api_statuses)
        help_button = QPushButton("Help")
        help_button.clicked.connect(lambda: HelpSystem.show_help_dialog("settings.api_keys", self))
        action_row.addWidget(test_button)
        action_row.addWidget(help_button)
        action_row.addStretch(1)
        action_box = QWidget()
        action_box.setLayout(action_row)
        form.addRow("", action_box)

        hint = QLabel("Keys are saved to the .env file next to settings.json.")
        hint.setWordWrap(True)
        hint.setObjectName("mutedText")
        form.addRow("", hint)
        return tab

    def _build_upload_tab(self) -> QWidget:
        tab = QWidget()
        form = QFormLayout(tab)
        form.addRow(
            "Max Image Size (MB)",
            self._register_spin("upload_max_size", int(self._settings["upload"]["max_size_mb"]), 1, 100),
        )
        form.addRow(
            "Show Example on Startup",
            self._register_check("default_enabled", self._settings["default_content"].get("enabled", True)),
        )
        return tab

    def _build_logging_tab(self) -> QWidget:
        tab = QWidget()
        form = QFormLayout(tab)
        levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        form.addRow(
            "Log Level",
            self._register_combo("log_level", [level for level in levels if level in LOG_LEVELS],
                                 str(self._settings["logging"].get("level", "INFO")).upper()),
        )
        hint = QLabel("Takes effect on the next start.")
        hint.setObjectName("mutedText")
        form.addRow("", hint)
        return tab

    def _refresh_model_options(self, provider: str) -> None:
        combo = self._combo("analysis_model")
        previous = combo.currentText()
        items = MODEL_ALIASES.get(provider, [])
        combo.blockSignals(True)
        combo.clear()
        combo.addItems(items)
        if items:
            combo.setCurrentText(previous if previous in items else items[0])
        combo.blockSignals(False)

    def _register_line(self, key: str, value: str, password: bool = False) -> QLineEdit:
        widget = QLineEdit()
        widget.setText(value)
        if password:
            widget.setEchoMode(QLineEdit.EchoMode.Password)
        self._fields[key] = widget
        return widget

    def _register_spin(self, key: str, value: int, minimum: int, maximum: int) -> QSpinBox:
        widget = QSpinBox()
        widget.setRange(minimum, maximum)
        widget.setValue(int(value))
        self._fields[key] = widget
        return widget

    def _register_dspin(
        self,
        key: str,
        value: float,
        minimum: float,
        maximum: float,
        step: float,
    ) -> QDoubleSpinBox:
        widget = QDoubleSpinBox()
        widget.setDecimals(2)
        widget.setRange(minimum, maximum)
        widget.setSingleStep(step)
        widget.setValue(float(value))
        self._fields[key] = widget
        return widget

    def _register_combo(self, key: str, options: list[str], value: str) -> QComboBox:
        widget = QComboBox()
        widget.addItems(options)
        widget.setCurrentIndex(max(0, widget.findText(value, Qt.MatchFlag.MatchExactly)))
        self._fields[key] = widget
        return widget

    def _register_check(self, key: str, value: bool) -> QCheckBox:
        widget = QCheckBox()
        widget.setChecked(bool(value))
        self._fields[key] = widget
        return widget

    def _create_status_row(self, key: str) -> QWidget:
        row = QWidget()
        layout = QHBoxLayout(row)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)
        indicator = QLabel()
        indicator.setFixedSize(12, 12)
        text = QLabel("Not checked")
        text.setWordWrap(True)
        self._api_status_widgets[key] = (indicator, text)
        layout.addWidget(indicator)
        layout.addWidget(text, 1)
        self._set_status(key, "idle", "Not checked")
        return row

    def _set_status(self, key: str, state: str, text: str) -> None:
        indicator, label = self._api_status_widgets[key]
        palette = {
            "ok": ("#16a34a", "#15803d"),
            "warn": ("#eab308", "#ca8a04"),
            "error": ("#ef4444", "#dc2626"),
            "checking": ("#3b82f6", "#2563eb"),
            "idle": ("#cbd5e1", "#94a3b8"),
        }
        fill, border = palette.get(state, palette["idle"])
        indicator.setStyleSheet(f"background: {fill}; border: 1px solid {border}; border-radius: 6px;")
        label.setText(text)

    def _validate_api_statuses(self) -> None:
        if self._api_validation_thread is not None and self._api_validation_thread.isRunning():
            return
        self._api_validation_request_seq += 1
        payload = {provider: self._line(f"api_{provider}").text().strip() for provider in PROVIDERS}
        for provider in PROVIDERS:
            self._set_status(provider, "checking", "Checking key...")

        thread = QThread(self)
        worker = _ApiValidationWorker(self._api_validation_request_seq, payload)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._on_api_validation_finished)
        worker.failed.connect(self._on_api_validation_failed)
        worker.finished.connect(thread.quit)
        worker.failed.connect(thread.quit)

        self._api_validation_thread = thread
        self._api_validation_worker = worker
        thread.start()

    def _on_api_validation_finished(self, request_id: int, result: object) -> None:
        if request_id != self._api_validation_request_seq or not isinstance(result, dict):
            return
        for provider, status in result.items():
            self._set_status(provider, str(status.get("state", "idle")), str(status.get("text", "")))

    def _on_api_validation_failed(self, request_id: int, error_text: str) -> None:
        if request_id != self._api_validation_request_seq:
            return
        for provider in PROVIDERS:
            self._set_status(provider, "warn", f"Check failed: {error_text}")

    def _stop_api_validation_thread(self) -> None:
        thread = self._api_validation_thread
        if thread is not None and thread.isRunning():
            # Remote checks use short timeouts.
            thread.wait(3500)

    def _apply_field_tooltips(self) -> None:
        for key, text in HelpSystem.get_context_tooltips("settings_fields").items():
            widget = self._fields.get(key)
            if widget is not None:
                widget.setToolTip(text)

    def _line(self, key: str) -> QLineEdit:
        return self._fields[key]  # type: ignore[return-value]

    def _spin(self, key: str) -> QSpinBox:
        return self._fields[key]  # type: ignore[return-value]

    def _dspin(self, key: str) -> QDoubleSpinBox:
        return self._fields[key]  # type: ignore[return-value]

    def _combo(self, key: str) -> QComboBox:
        return self._fields[key]  # type: ignore[return-value]

    def _check(self, key: str) -> QCheckBox:
        return self._fields[key]  # type: ignore[return-value]

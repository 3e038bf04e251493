# -*- coding: utf-8 -*-
"""Main window: upload card, preview, actions and analysis results."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QCloseEvent
from PyQt6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from fontidentifier.config import ConfigError, has_api_key, save_api_keys, save_config
from fontidentifier.constants import ACCEPTED_EXTENSIONS, APP_NAME, APP_VERSION, DEFAULT_SETTINGS_FILE
from fontidentifier.core.state import PageState
from fontidentifier.gui.about_dialog import AboutDialog
from fontidentifier.gui.analysis_widget import AnalysisWidget
from fontidentifier.gui.controller import AppController
from fontidentifier.gui.help_system import HelpSystem
from fontidentifier.gui.preview_widget import PreviewWidget
from fontidentifier.gui.settings_dialog import SettingsDialog
from fontidentifier.models.analysis_result import AnalysisResult
from fontidentifier.models.uploaded_image import UploadedImage

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Images (" + " ".join(f"*{ext}" for ext in ACCEPTED_EXTENSIONS) + ");;All files (*)"


def upload_hint(settings: dict[str, Any]) -> str:
    max_size = settings.get("upload", {}).get("max_size_mb", 20)
    return f"PNG, JPG, JPEG or WEBP (MAX. {max_size:g}MB)"


class MainWindow(QMainWindow):
    """Single-page font identifier window. All state lives in the AppController."""

    def __init__(
        self,
        settings: dict[str, Any],
        controller: AppController | None = None,
        settings_path: str | Path | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.settings = settings
        self.settings_path = Path(settings_path or DEFAULT_SETTINGS_FILE)
        self.controller = controller or AppController(settings)

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.resize(980, 900)

        self._build_actions()
        self._build_ui()
        self._apply_tooltips()
        self._apply_styles()
        self._connect_controller()
        self._refresh_ui()

    def _build_actions(self) -> None:
        self.settings_action = QAction("Settings", self)
        self.settings_action.triggered.connect(self.open_settings_dialog)
        self.about_action = QAction("About", self)
        self.about_action.triggered.connect(self.open_about_dialog)
        self.help_action = QAction("How It Works", self)
        self.help_action.triggered.connect(lambda: HelpSystem.show_help_dialog("main_window.workflow", self))

    def _build_ui(self) -> None:
        toolbar = self.addToolBar("Main")
        toolbar.setMovable(False)
        toolbar.addAction(self.settings_action)
        toolbar.addAction(self.help_action)
        toolbar.addAction(self.about_action)

        self.title_label = QLabel(APP_NAME)
        self.title_label.setObjectName("appTitle")
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.subtitle_label = QLabel("Upload an image containing text and instantly identify the fonts used")
        self.subtitle_label.setObjectName("mutedText")
        self.subtitle_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.subtitle_label.setWordWrap(True)

        self.upload_button = QPushButton("Upload Image with Text")
        self.upload_button.setObjectName("primaryButton")
        self.upload_button.clicked.connect(self.choose_image)
        self.upload_hint_label = QLabel(upload_hint(self.settings))
        self.upload_hint_label.setObjectName("mutedText")
        self.upload_hint_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.error_label = QLabel("")
        self.error_label.setObjectName("errorBanner")
        self.error_label.setWordWrap(True)
        self.error_label.setVisible(False)

        self.loading_label = QLabel("Loading...")
        self.loading_label.setObjectName("mutedText")
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.preview_widget = PreviewWidget()

        self.identify_button = QPushButton("Identify Font")
        self.identify_button.setObjectName("primaryButton")
        self.identify_button.clicked.connect(self.controller.reanalyze)
        self.upload_another_button = QPushButton("Upload Another Image")
        self.upload_another_button.setObjectName("secondaryButton")
        self.upload_another_button.clicked.connect(self.choose_image)
        button_row = QHBoxLayout()
        button_row.setSpacing(12)
        button_row.addWidget(self.identify_button, 1)
        button_row.addWidget(self.upload_another_button, 1)

        self.image_section = QWidget()
        image_layout = QVBoxLayout(self.image_section)
        image_layout.setContentsMargins(0, 0, 0, 0)
        image_layout.setSpacing(12)
        image_layout.addWidget(self.preview_widget)
        image_layout.addLayout(button_row)

        self.analysis_widget = AnalysisWidget()
        self.analysis_widget.setVisible(False)

        card = QWidget()
        card.setObjectName("panelCard")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(20, 20, 20, 20)
        card_layout.setSpacing(14)
        card_layout.addWidget(self.upload_button, 0, Qt.AlignmentFlag.AlignHCenter)
        card_layout.addWidget(self.upload_hint_label)
        card_layout.addWidget(self.error_label)
        card_layout.addWidget(self.loading_label)
        card_layout.addWidget(self.image_section)
        card_layout.addWidget(self.analysis_widget, 1)

        page = QWidget()
        page_layout = QVBoxLayout(page)
        page_layout.setContentsMargins(24, 20, 24, 20)
        page_layout.setSpacing(12)
        page_layout.addWidget(self.title_label)
        page_layout.addWidget(self.subtitle_label)
        page_layout.addWidget(card, 1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(page)
        self.setCentralWidget(scroll)
        self.statusBar().showMessage(self._api_key_status_summary())

    def _apply_tooltips(self) -> None:
        tips = HelpSystem.get_context_tooltips("main_window")
        for name, text in tips.items():
            widget = getattr(self, name, None)
            if widget is not None and hasattr(widget, "setToolTip"):
                widget.setToolTip(text)
        self.settings_action.setToolTip(HelpSystem.get_tooltip("main_window", "settings_button"))
        self.about_action.setToolTip(HelpSystem.get_tooltip("main_window", "about_button"))

    def _connect_controller(self) -> None:
        self.controller.image_changed.connect(self._on_image_changed)
        self.controller.analysis_changed.connect(self._on_analysis_changed)
        self.controller.state_changed.connect(self._on_state_changed)
        self.controller.error_occurred.connect(self._on_error)

    def choose_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Upload Image with Text", "", IMAGE_FILE_FILTER)
        if not path:
            return
        self.upload_image(path)

    def upload_image(self, path: str | Path) -> None:
        logger.info("User selected %s", path)
        self.controller.upload(path)

    def _on_image_changed(self, image: UploadedImage | None) -> None:
        self.preview_widget.set_image(image)
        self._refresh_ui()

    def _on_analysis_changed(self, analysis: AnalysisResult | None) -> None:
        self.analysis_widget.set_analysis(analysis)
        self._refresh_ui()

    def _on_state_changed(self, _state: str) -> None:
        self._refresh_ui()

    def _on_error(self, message: str) -> None:
        self.statusBar().showMessage(message, 8000)

    def _refresh_ui(self) -> None:
        session = self.controller.session
        has_image = session.image is not None

        self.error_label.setText(session.error or "")
        self.error_label.setVisible(bool(session.error))
        self.loading_label.setVisible(session.loading and not has_image)
        self.image_section.setVisible(has_image)
        self.analysis_widget.setVisible(session.analysis is not None and bool(self.analysis_widget.blocks))

        self.identify_button.setEnabled(has_image and not session.loading)
        self.identify_button.setText("Analyzing..." if session.loading else "Identify Font")

        if session.state is PageState.LOADING and has_image:
            self.statusBar().showMessage("Analyzing image...")
        elif session.state is PageState.READY:
            self.statusBar().showMessage(self._api_key_status_summary())

    def _api_key_status_summary(self) -> str:
        provider = str(self.settings.get("analysis", {}).get("provider", "gemini"))
        model = str(self.settings.get("analysis", {}).get("model", ""))
        key_state = "key set" if has_api_key(self.settings, provider) else "no API key"
        return f"Provider: {provider} ({model}), {key_state}"

    def open_settings_dialog(self) -> None:
        """Open the settings dialog and persist changes."""
        dialog = SettingsDialog(self.settings, self)
        if not dialog.exec():
            return
        new_settings = dialog.get_settings()
        try:
            save_config(new_settings, self.settings_path)
            save_api_keys(new_settings, self.settings_path.parent / ".env")
        except (ConfigError, OSError) as exc:
            logger.error("Saving settings failed: %s", exc)
            self.statusBar().showMessage(f"Settings not saved: {exc}", 8000)
            return
        self.settings = new_settings
        self.controller.update_settings(new_settings)
        self.upload_hint_label.setText(upload_hint(new_settings))
        self.statusBar().showMessage(self._api_key_status_summary())

    def open_about_dialog(self) -> None:
        AboutDialog(self).exec()

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        self.controller.shutdown()
        super().closeEvent(event)

    def _apply_styles(self) -> None:
        self.setStyleSheet(
            """
            QMainWindow, QWidget {
                background: #f9fafb;
                color: #1f2937;
                font-family: "Segoe UI", "Noto Sans", sans-serif;
                font-size: 13px;
            }
            QLabel#appTitle {
                font-size: 28px;
                font-weight: 700;
                color: #111827;
            }
            QLabel#resultsTitle {
                font-size: 24px;
                font-weight: 700;
                color: #111827;
            }
            QLabel#sectionHeading {
                font-size: 19px;
                font-weight: 700;
                color: #111827;
            }
            QLabel#fieldLabel {
                font-weight: 600;
                color: #1f2937;
            }
            QLabel#mutedText {
                color: #6b7280;
            }
            QLabel#errorBanner {
                background: #fef2f2;
                color: #b91c1c;
                border-radius: 6px;
                padding: 12px;
            }
            QLabel#previewSurface {
                background: #f3f4f6;
                border-radius: 8px;
                color: #6b7280;
            }
            QWidget#panelCard {
                background: white;
                border: 1px solid #e5e7eb;
                border-radius: 12px;
            }
            QPushButton#primaryButton {
                background: #2563eb;
                color: white;
                border: 1px solid #1d4ed8;
                border-radius: 8px;
                padding: 10px 18px;
                font-weight: 600;
            }
            QPushButton#primaryButton:hover {
                background: #1d4ed8;
            }
            QPushButton#primaryButton:disabled {
                background: #93c5fd;
                border-color: #93c5fd;
            }
            QPushButton#secondaryButton {
                background: white;
                color: #374151;
                border: 1px solid #d1d5db;
                border-radius: 8px;
                padding: 10px 18px;
                font-weight: 600;
            }
            QPushButton#secondaryButton:hover {
                background: #f9fafb;
            }
            """
        )

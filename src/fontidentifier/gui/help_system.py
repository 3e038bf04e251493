# -*- coding: utf-8 -*-
"""Centralized tooltip and contextual help texts for the GUI."""

from __future__ import annotations

from typing import Any

from PyQt6.QtWidgets import QDialog, QDialogButtonBox, QLabel, QPlainTextEdit, QVBoxLayout, QWidget


class HelpSystem:
    """Small registry for tooltips and help topics."""

    _TOOLTIPS: dict[str, dict[str, str]] = {
        "main_window": {
            "upload_button": "Choose a PNG, JPG, JPEG or WEBP image (max. 20MB) that contains text.",
            "identify_button": "Send the current image to the vision model again and refresh the analysis.",
            "upload_another_button": "Pick a different image. Its analysis starts right away.",
            "preview_widget": "Preview of the image that is analyzed.",
            "analysis_widget": "Font name, characteristics, similar fonts and usage notes from the model.",
            "settings_button": "Choose the vision provider and model and enter API keys.",
            "about_button": "What this tool does and who it is for.",
        },
        "settings_fields": {
            "analysis_provider": "Vision backend used for font analysis. Gemini is the default.",
            "analysis_model": "Model alias for the selected provider.",
            "analysis_temperature": "Lower values give more consistent answers.",
            "analysis_timeout": "Seconds to wait for the model before the request fails.",
            "analysis_retries": "Extra attempts after a failed request. 0 means a single attempt.",
            "analysis_backoff": "Wait before the first retry; doubles for each further retry.",
            "api_gemini": "Google Gemini API key. Stored in the .env file, never in settings.json.",
            "api_openrouter": "OpenRouter API key. Stored in the .env file, never in settings.json.",
            "upload_max_size": "Largest accepted image in megabytes.",
            "default_enabled": "Show the example image and its analysis on startup.",
            "log_level": "Verbosity of the console and session log.",
        },
    }

    _TOPICS: dict[str, dict[str, Any]] = {
        "main_window.workflow": {
            "title": "How It Works",
            "summary": "Upload a clear photo of printed or digital text and the model identifies the typeface.",
            "sections": [
                ("Upload", "Pick an image. It is checked for type and size before it is read."),
                ("Analysis", "The image and a fixed font prompt are sent to the configured model."),
                ("Results", "Sections, labeled fields and bullet lists from the answer are shown below the image."),
                ("Identify Font", "Runs the analysis again for the current image."),
            ],
        },
        "settings.api_keys": {
            "title": "API Keys Help",
            "summary": "Keys are written to the .env file next to settings.json.",
            "sections": [
                ("Gemini", "GEMINI_API_KEY (GOOGLE_API_KEY is also read)."),
                ("OpenRouter", "OPENROUTER_API_KEY."),
                ("Test Key", "Checks the key format and, when online, whether the service accepts it."),
            ],
        },
    }

    @classmethod
    def get_tooltip(cls, context: str, element: str, default: str = "No help available.") -> str:
        """Return a tooltip string for a UI context and element key."""
        return cls._TOOLTIPS.get(context, {}).get(element, default)

    @classmethod
    def get_context_tooltips(cls, context: str) -> dict[str, str]:
        return dict(cls._TOOLTIPS.get(context, {}))

    @classmethod
    def build_help_dialog(cls, context: str, parent: QWidget | None = None) -> QDialog:
        """Create a modal help dialog for a topic; unknown topics get a short notice."""
        topic = cls._TOPICS.get(context) or {
            "title": "Help",
            "summary": "No help is available for this context yet.",
            "sections": [],
        }
        dialog = QDialog(parent)
        dialog.setModal(True)
        dialog.setWindowTitle(str(topic.get("title", "Help")))
        dialog.resize(480, 320)
        layout = QVBoxLayout(dialog)

        summary_label = QLabel(str(topic.get("summary", "")))
        summary_label.setWordWrap(True)
        layout.addWidget(summary_label)

        sections = topic.get("sections", [])
        if sections:
            details = QPlainTextEdit()
            details.setReadOnly(True)
            details.setPlainText("\n\n".join(f"{title}\n  {content}" for title, content in sections))
            layout.addWidget(details, 1)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(dialog.reject)
        layout.addWidget(buttons)
        return dialog

    @classmethod
    def show_help_dialog(cls, context: str, parent: QWidget | None = None) -> int:
        dialog = cls.build_help_dialog(context, parent=parent)
        return dialog.exec()

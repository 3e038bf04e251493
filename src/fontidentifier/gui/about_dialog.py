# -*- coding: utf-8 -*-
"""About dialog."""

from __future__ import annotations

from PyQt6.QtWidgets import QDialog, QDialogButtonBox, QLabel, QTextBrowser, QVBoxLayout, QWidget

from fontidentifier.constants import APP_NAME, APP_VERSION

ABOUT_HTML = """
<p>{app_name} recognizes typefaces in photos and screenshots of printed or
digital text. It is meant for designers, marketers, publishers, developers and
anyone curious about the fonts around them.</p>

<h3>What you get</h3>
<ul>
  <li>The most likely font name with classification, style, weight and era</li>
  <li>Designer, distinctive features and character details</li>
  <li>Secondary fonts found in headings or captions</li>
  <li>Similar fonts and alternatives</li>
  <li>Licensing information and where to get the font</li>
  <li>Historical context</li>
  <li>Usage and pairing suggestions</li>
</ul>

<h3>Privacy</h3>
<p>The image is sent only to the AI provider configured in Settings. Nothing is
stored apart from the local session log.</p>
"""


class AboutDialog(QDialog):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(f"About {APP_NAME}")
        self.resize(520, 460)

        title = QLabel(f"{APP_NAME} {APP_VERSION}")
        title.setObjectName("appTitle")

        body = QTextBrowser()
        body.setOpenExternalLinks(True)
        body.setHtml(ABOUT_HTML.format(app_name=APP_NAME))

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addWidget(title)
        layout.addWidget(body, 1)
        layout.addWidget(buttons)

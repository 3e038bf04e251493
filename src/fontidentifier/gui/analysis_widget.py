# -*- coding: utf-8 -*-
"""Results panel rendering formatted analysis blocks."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QScrollArea, QVBoxLayout, QWidget

from fontidentifier.core.formatter import format_analysis
from fontidentifier.models.analysis_result import AnalysisResult
from fontidentifier.models.display_block import (
    BulletItem,
    DisplayBlock,
    LabeledField,
    SectionHeader,
)

FIELD_LABEL_MIN_WIDTH = 120


class AnalysisWidget(QWidget):
    """"Font Analysis Results" panel: one row per display block."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("panelCard")
        self.blocks: list[DisplayBlock] = []

        self.title_label = QLabel("Font Analysis Results")
        self.title_label.setObjectName("resultsTitle")
        self.source_label = QLabel("")
        self.source_label.setObjectName("mutedText")

        self._content = QWidget()
        self._content_layout = QVBoxLayout(self._content)
        self._content_layout.setContentsMargins(0, 0, 0, 0)
        self._content_layout.setSpacing(6)
        self._content_layout.addStretch(1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        scroll.setWidget(self._content)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(10)
        layout.addWidget(self.title_label)
        layout.addWidget(self.source_label)
        layout.addWidget(scroll, 1)

    def set_analysis(self, analysis: AnalysisResult | None) -> None:
        self._clear_rows()
        if analysis is None:
            self.blocks = []
            self.source_label.setText("")
            self.setVisible(False)
            return

        self.blocks = format_analysis(analysis.text)
        if analysis.is_default:
            self.source_label.setText("Example analysis for the sample image")
        else:
            self.source_label.setText(f"{analysis.provider} · {analysis.model_used}".strip(" ·"))
        for index, block in enumerate(self.blocks):
            self._content_layout.insertWidget(index, self._build_row(block, first=index == 0))
        self.setVisible(bool(self.blocks))

    def _clear_rows(self) -> None:
        while self._content_layout.count() > 1:
            item = self._content_layout.takeAt(0)
            widget = item.widget() if item is not None else None
            if widget is not None:
                widget.deleteLater()

    def _build_row(self, block: DisplayBlock, *, first: bool = False) -> QWidget:
        if isinstance(block, SectionHeader):
            label = QLabel(block.text)
            label.setObjectName("sectionHeading")
            label.setWordWrap(True)
            if not first:
                label.setContentsMargins(0, 18, 0, 4)
            return label

        if isinstance(block, LabeledField):
            row = QWidget()
            row_layout = QHBoxLayout(row)
            row_layout.setContentsMargins(16, 0, 0, 0)
            row_layout.setSpacing(8)
            name = QLabel(f"{block.label}:")
            name.setObjectName("fieldLabel")
            name.setMinimumWidth(FIELD_LABEL_MIN_WIDTH)
            name.setAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
            value = QLabel(block.value)
            value.setWordWrap(True)
            value.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            row_layout.addWidget(name)
            row_layout.addWidget(value, 1)
            return row

        if isinstance(block, BulletItem):
            row = QWidget()
            row_layout = QHBoxLayout(row)
            row_layout.setContentsMargins(16, 0, 0, 0)
            row_layout.setSpacing(8)
            bullet = QLabel("•")
            bullet.setObjectName("mutedText")
            bullet.setAlignment(Qt.AlignmentFlag.AlignTop)
            text = QLabel(block.text)
            text.setWordWrap(True)
            text.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            row_layout.addWidget(bullet)
            row_layout.addWidget(text, 1)
            return row

        paragraph = QLabel(block.text)
        paragraph.setWordWrap(True)
        paragraph.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        return paragraph

# -*- coding: utf-8 -*-
"""Image preview that keeps the aspect ratio inside a bounded height."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPixmap, QResizeEvent
from PyQt6.QtWidgets import QLabel, QSizePolicy, QVBoxLayout, QWidget

from fontidentifier.models.uploaded_image import UploadedImage

logger = logging.getLogger(__name__)

MAX_PREVIEW_HEIGHT = 500


class PreviewWidget(QWidget):
    """Shows the current UploadedImage scaled to fit, never taller than 500px."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._pixmap = QPixmap()
        self.image_label = QLabel("No image")
        self.image_label.setObjectName("previewSurface")
        self.image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.image_label.setMinimumHeight(160)
        self.image_label.setMaximumHeight(MAX_PREVIEW_HEIGHT)
        self.image_label.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self.image_label.setAccessibleName("Text sample preview")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.image_label)

    def has_image(self) -> bool:
        return not self._pixmap.isNull()

    def set_image(self, image: UploadedImage | None) -> None:
        if image is None:
            self.clear()
            return
        pixmap = QPixmap()
        if not pixmap.loadFromData(image.to_bytes()):
            # Qt may lack a decoder (e.g. WEBP without the imageformats plugin).
            logger.warning("Preview could not decode %s (%s)", image.name, image.mime_type)
            self._pixmap = QPixmap()
            self.image_label.setPixmap(QPixmap())
            self.image_label.setText(f"Preview unavailable for {image.name or image.mime_type}")
            return
        self._pixmap = pixmap
        self._update_display()

    def clear(self) -> None:
        self._pixmap = QPixmap()
        self.image_label.setPixmap(QPixmap())
        self.image_label.setText("No image")

    def _update_display(self) -> None:
        if self._pixmap.isNull():
            return
        width = max(1, self.image_label.width())
        height = min(MAX_PREVIEW_HEIGHT, self._pixmap.height())
        scaled = self._pixmap.scaled(
            width,
            height,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.image_label.setPixmap(scaled)

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802
        super().resizeEvent(event)
        self._update_display()

# -*- coding: utf-8 -*-
"""Worker objects for background processing."""

from __future__ import annotations

import logging
from typing import Any

from PyQt6.QtCore import QObject, pyqtSignal

from fontidentifier.models.uploaded_image import UploadedImage
from fontidentifier.pipeline.analyzer import AnalysisFailedError, Analyzer, GENERIC_FAILURE_MESSAGE

logger = logging.getLogger(__name__)


class AnalysisWorker(QObject):
    """Run one font analysis off the GUI thread.

    Both signals carry the generation token the request was started with.
    """

    finished = pyqtSignal(int, object)
    error = pyqtSignal(int, str)

    def __init__(
        self,
        analyzer: Analyzer,
        image: UploadedImage,
        settings: dict[str, Any],
        token: int,
    ) -> None:
        super().__init__()
        self.analyzer = analyzer
        self.image = image
        self.settings = settings
        self.token = token

    def run(self) -> None:
        try:
            logger.info("AnalysisWorker: starting cycle %d", self.token)
            result = self.analyzer.analyze(self.image, self.settings)
        except AnalysisFailedError as exc:
            self.error.emit(self.token, str(exc))
            return
        except Exception:
            # Unexpected errors still end the cycle.
            logger.exception("AnalysisWorker: unexpected failure in cycle %d", self.token)
            self.error.emit(self.token, GENERIC_FAILURE_MESSAGE)
            return
        self.finished.emit(self.token, result)

# -*- coding: utf-8 -*-
"""Application controller: page state, user actions and analysis threads."""

from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from fontidentifier.config import max_upload_bytes
from fontidentifier.core.default_content import load_default_content
from fontidentifier.core.image_loader import ImageLoadError, load_image
from fontidentifier.core.state import PageSession
from fontidentifier.gui.workers import AnalysisWorker
from fontidentifier.models.analysis_result import AnalysisResult
from fontidentifier.pipeline.analyzer import Analyzer

logger = logging.getLogger(__name__)


class AppController(QObject):
    """
    Owns the PageSession and wires mount, upload and re-analyze to it.
    Views only listen to the signals below.
    """

    image_changed = pyqtSignal(object)
    analysis_changed = pyqtSignal(object)
    state_changed = pyqtSignal(str)
    error_occurred = pyqtSignal(str)

    def __init__(
        self,
        settings: dict[str, Any],
        analyzer: Analyzer | None = None,
        *,
        threaded: bool = True,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.analyzer = analyzer or Analyzer()
        self.session = PageSession()
        self._threaded = threaded
        # Workers stay referenced here until their thread has stopped.
        self._active_threads: list[tuple[QThread, AnalysisWorker]] = []

    def _cleanup_threads(self) -> None:
        """Drop finished threads from the active list and release them."""
        running: list[tuple[QThread, AnalysisWorker]] = []
        for thread, worker in self._active_threads:
            if thread.isRunning():
                running.append((thread, worker))
            else:
                thread.deleteLater()
        self._active_threads = running

    def _emit_state(self) -> None:
        self.state_changed.emit(self.session.state.value)

    def _fail(self, token: int, message: str) -> None:
        if self.session.fail(token, message):
            logger.warning("Cycle %d failed: %s", token, message)
            self.error_occurred.emit(message)
            self._emit_state()

    def _reject(self, message: str) -> None:
        if self.session.loading:
            logger.warning("Selection rejected while cycle %d runs: %s", self.session.generation, message)
            self.session.note_error(message)
            self.error_occurred.emit(message)
            self._emit_state()
            return
        self._fail(self.session.begin(), message)

    def update_settings(self, settings: dict[str, Any]) -> None:
        self.settings = settings
        logger.info(
            "Settings updated: provider=%s model=%s",
            settings.get("analysis", {}).get("provider"),
            settings.get("analysis", {}).get("model"),
        )

    def mount(self) -> None:
        """Show the bundled default image and its canned analysis. No network call."""
        token = self.session.begin()
        self._emit_state()
        if not self.settings.get("default_content", {}).get("enabled", True):
            self.session.complete(token)
            self._emit_state()
            return
        try:
            image, analysis = load_default_content(self.settings)
        except ImageLoadError as exc:
            self._fail(token, str(exc))
            return
        if self.session.set_image(token, image):
            self.image_changed.emit(image)
        if self.session.complete(token, analysis):
            self.analysis_changed.emit(analysis)
            self._emit_state()

    def upload(self, path: str | Path) -> None:
        """Validate and load a user file, show it, then analyze it.

        A rejected file leaves a running analysis of the current image alone.
        """
        try:
            image = load_image(path, max_upload_bytes(self.settings))
        except ImageLoadError as exc:
            self._reject(str(exc))
            return
        token = self.session.begin()
        self._emit_state()
        had_analysis = self.session.analysis is not None
        if not self.session.set_image(token, image):
            return
        self.image_changed.emit(image)
        if had_analysis and self.session.analysis is None:
            self.analysis_changed.emit(None)
        self._start_analysis(token)

    def reanalyze(self) -> bool:
        """Analyze the current image again. Returns False when there is nothing to do."""
        if self.session.image is None:
            return False
        if self.session.loading:
            logger.debug("Re-analyze ignored, cycle %d still running", self.session.generation)
            return False
        token = self.session.begin()
        self._emit_state()
        self._start_analysis(token)
        return True

    def _start_analysis(self, token: int) -> None:
        image = self.session.image
        if image is None:
            return
        worker = AnalysisWorker(self.analyzer, image, deepcopy(self.settings), token)
        if not self._threaded:
            worker.finished.connect(self._on_analysis_finished)
            worker.error.connect(self._on_analysis_failed)
            worker.run()
            return

        self._cleanup_threads()
        thread = QThread(self)
        worker.moveToThread(thread)

        thread.started.connect(worker.run)
        worker.finished.connect(self._on_analysis_finished)
        worker.error.connect(self._on_analysis_failed)

        worker.finished.connect(thread.quit)
        worker.error.connect(thread.quit)

        self._active_threads.append((thread, worker))
        thread.start()

    def _on_analysis_finished(self, token: int, result: AnalysisResult) -> None:
        self._cleanup_threads()
        if self.session.complete(token, result):
            self.analysis_changed.emit(result)
            self._emit_state()

    def _on_analysis_failed(self, token: int, message: str) -> None:
        self._cleanup_threads()
        self._fail(token, message)

    def shutdown(self, timeout_ms: int = 2000) -> None:
        """Wait briefly for running analysis threads before the window closes."""
        for thread, _worker in self._active_threads:
            if thread.isRunning():
                thread.quit()
                thread.wait(timeout_ms)
        self._cleanup_threads()

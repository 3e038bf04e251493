# -*- coding: utf-8 -*-
"""Page state container with generation-checked transitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from fontidentifier.models.analysis_result import AnalysisResult
from fontidentifier.models.uploaded_image import UploadedImage

logger = logging.getLogger(__name__)


class PageState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


@dataclass
class PageSession:
    """State owned by the page: current image, its analysis, error and loading cycle.

    Every cycle (mount, upload, re-analyze) starts with ``begin()`` which
    hands out a new generation token. Completions carrying an older token
    are ignored, so a slow response can never overwrite a newer one.
    """

    image: UploadedImage | None = None
    analysis: AnalysisResult | None = None
    error: str | None = None
    state: PageState = PageState.IDLE
    generation: int = 0

    @property
    def loading(self) -> bool:
        return self.state is PageState.LOADING

    def is_current(self, token: int) -> bool:
        return token == self.generation

    def begin(self) -> int:
        """Enter LOADING and return the token for this cycle."""
        self.generation += 1
        self.state = PageState.LOADING
        self.error = None
        logger.debug("Page cycle %d started", self.generation)
        return self.generation

    def set_image(self, token: int, image: UploadedImage) -> bool:
        """Replace the current image; the old image's analysis goes with it."""
        if not self.is_current(token):
            return False
        if image != self.image:
            self.analysis = None
        self.image = image
        return True

    def complete(self, token: int, analysis: AnalysisResult | None = None) -> bool:
        """Finish the cycle successfully, storing ``analysis`` when given."""
        if not self.is_current(token):
            logger.info("Dropping stale result for cycle %d (current %d)", token, self.generation)
            return False
        if analysis is not None:
            self.analysis = analysis
        self.error = None
        self.state = PageState.READY
        return True

    def note_error(self, message: str) -> None:
        """Show an error without ending the running cycle."""
        self.error = message

    def fail(self, token: int, message: str) -> bool:
        """Finish the cycle with an error; image and analysis are left as they were."""
        if not self.is_current(token):
            logger.info("Dropping stale error for cycle %d (current %d): %s", token, self.generation, message)
            return False
        self.error = message
        self.state = PageState.ERRORED
        return True

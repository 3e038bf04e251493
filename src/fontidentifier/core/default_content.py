# -*- coding: utf-8 -*-
"""Bundled example image and analysis shown on first launch."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fontidentifier.config import max_upload_bytes
from fontidentifier.core.image_loader import ReadError, load_default_image
from fontidentifier.models.analysis_result import AnalysisResult
from fontidentifier.models.uploaded_image import DefaultAsset, UploadedImage

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"
DEFAULT_ANALYSIS_FILE = ASSETS_DIR / "default_analysis.md"


def load_default_analysis(path: str | Path | None = None) -> AnalysisResult:
    source = Path(path) if path else DEFAULT_ANALYSIS_FILE
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Default analysis %s could not be read: %s", source, exc)
        raise ReadError("Failed to load default image") from exc
    return AnalysisResult(text=text, is_default=True)


def load_default_content(settings: dict[str, Any]) -> tuple[UploadedImage, AnalysisResult]:
    """Load the default image and its precomputed analysis, without any network call.

    Raises ReadError when either part is unavailable. Both are loaded before
    anything is returned so the page never shows one without the other.
    """
    default_settings = settings.get("default_content", {})
    image_path = str(default_settings.get("image_path", "") or "").strip()
    analysis_path = str(default_settings.get("analysis_path", "") or "").strip()

    try:
        image = load_default_image(
            DefaultAsset(Path(image_path) if image_path else None),
            max_upload_bytes(settings),
        )
    except OSError as exc:
        # Pillow raises OSError subclasses while rendering the built-in sample
        logger.error("Rendering the default image failed: %s", exc)
        raise ReadError("Failed to load default image") from exc
    analysis = load_default_analysis(analysis_path or None)
    logger.info("Default content ready: %s", image.name)
    return image, analysis

# -*- coding: utf-8 -*-
"""Font analysis orchestration: prompt, provider dispatch and bounded retry."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from fontidentifier.config import has_api_key
from fontidentifier.integrations.gemini_client import GeminiClient
from fontidentifier.integrations.openrouter_client import OpenRouterClient
from fontidentifier.models.analysis_result import AnalysisResult
from fontidentifier.models.uploaded_image import UploadedImage

logger = logging.getLogger(__name__)


FONT_ANALYSIS_PROMPT = (
    "Analyze this image and identify the fonts used in it. Provide the following information:\n"
    "1. Primary Font Identification (font name, classification, style, weight, era/period, "
    "sample characters)\n"
    "2. Font Details & Characteristics (designer, distinctive features, x-height, serifs, "
    "terminals, stress angle, character recognition)\n"
    "3. Secondary Fonts Detected (if any other fonts are present in headings, captions, etc.)\n"
    "4. Typographic Analysis (leading, paragraph formatting, margins, character spacing, "
    "word spacing, layout)\n"
    "5. Similar Fonts & Alternatives (list of similar typefaces and good alternatives)\n"
    "6. Font Licensing & Sources (where to find the font, licensing information)\n"
    "7. Historical Context (background information about the font)\n"
    "8. Usage Recommendations (ideal uses, print applications, digital use, pairing suggestions, "
    "size recommendations)\n"
    "\n"
    "If you cannot identify the exact font with certainty, provide your best educated guess "
    "and list several possible matches."
)

GENERIC_FAILURE_MESSAGE = "Failed to analyze image. Please try again."


class AnalysisFailedError(RuntimeError):
    """The vision model could not produce an analysis. The message is shown to the user."""


class Analyzer:
    """Send one image plus the font prompt to the configured provider."""

    def __init__(
        self,
        gemini_client: GeminiClient | None = None,
        openrouter_client: OpenRouterClient | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.gemini_client = gemini_client or GeminiClient()
        self.openrouter_client = openrouter_client or OpenRouterClient()
        self._sleep = sleep

    def _client_for(self, provider: str) -> GeminiClient | OpenRouterClient:
        if provider == "gemini":
            return self.gemini_client
        if provider == "openrouter":
            return self.openrouter_client
        raise AnalysisFailedError(f"Unknown analysis provider: {provider}")

    def analyze(
        self,
        image: UploadedImage,
        settings: dict[str, Any],
        prompt: str = FONT_ANALYSIS_PROMPT,
    ) -> AnalysisResult:
        """Return the model's analysis text or raise AnalysisFailedError."""
        analysis_settings = settings.get("analysis", {})
        provider = str(analysis_settings.get("provider", "gemini"))
        model_name = str(analysis_settings.get("model", "gemini_flash"))
        temperature = float(analysis_settings.get("temperature", 0.4))
        timeout = float(analysis_settings.get("timeout_seconds", 60.0))
        max_retries = max(0, int(analysis_settings.get("max_retries", 0)))
        backoff = float(analysis_settings.get("retry_backoff_seconds", 1.0))

        client = self._client_for(provider)
        if not has_api_key(settings, provider):
            logger.warning("API key for %s is missing", provider)
            raise AnalysisFailedError(
                f"No API key configured for {provider}. Add it in Settings or the .env file."
            )
        api_key = str(settings["api_keys"][provider]).strip()

        logger.info(
            "Starting font analysis: provider=%s model=%s image=%s (%d bytes) prompt=%d chars",
            provider,
            model_name,
            image.name or "<unnamed>",
            image.size_bytes,
            len(prompt),
        )
        attempt = 0
        while True:
            attempt += 1
            try:
                text = client.run_vision_model(
                    model_name,
                    image,
                    prompt,
                    api_key=api_key,
                    temperature=temperature,
                    timeout=timeout,
                )
                break
            except ValueError as exc:
                # Unsupported model or malformed key, never retried.
                logger.error("%s request rejected: %s", provider, exc)
                raise AnalysisFailedError(str(exc) or GENERIC_FAILURE_MESSAGE) from exc
            except (RuntimeError, OSError) as exc:
                logger.error("%s request failed (attempt %d): %s", provider, attempt, exc)
                if attempt > max_retries:
                    raise AnalysisFailedError(str(exc) or GENERIC_FAILURE_MESSAGE) from exc
                delay = backoff * (2 ** (attempt - 1))
                logger.info("Retrying in %.1fs", delay)
                self._sleep(delay)

        if not text.strip():
            logger.warning("%s returned an empty analysis", provider)
            raise AnalysisFailedError("The model returned an empty response. Please try again.")

        logger.info("Received analysis from %s (%d chars)", provider, len(text))
        return AnalysisResult(text=text, provider=provider, model_used=model_name)

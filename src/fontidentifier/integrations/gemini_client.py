# -*- coding: utf-8 -*-
"""Google Gemini ``generateContent`` wrapper for image + prompt requests."""

from __future__ import annotations

import json
from typing import Any
from urllib import error, parse, request

from fontidentifier.models.uploaded_image import UploadedImage


class GeminiClient:
    """Thin wrapper for Gemini key checks and vision inference."""

    API_BASE = "https://generativelanguage.googleapis.com/v1beta"

    SUPPORTED_MODELS = {
        "gemini_flash": "gemini-2.0-flash",
        "gemini_flash_lite": "gemini-2.0-flash-lite",
        "gemini_pro": "gemini-1.5-pro",
    }

    def __init__(self, api_key: str = "") -> None:
        self.api_key = api_key

    def validate_key(
        self,
        api_key: str | None = None,
        *,
        check_remote: bool = False,
        timeout: float = 2.0,
    ) -> bool:
        """Validate key format and optionally verify it against the model listing."""
        key = (api_key if api_key is not None else self.api_key).strip()
        if not (bool(key) and (key.startswith("AIza") or key.startswith("test-"))):
            return False
        if not check_remote:
            return True
        status, _ = self._request_json("GET", f"{self.API_BASE}/models", api_key=key, timeout=timeout)
        return status == 200

    def run_vision_model(
        self,
        model_name: str,
        image: UploadedImage,
        prompt: str,
        *,
        api_key: str | None = None,
        temperature: float = 0.4,
        timeout: float = 60.0,
    ) -> str:
        """Send one inline image plus prompt and return the concatenated text parts."""
        model_id = self.SUPPORTED_MODELS.get(model_name)
        if not model_id:
            raise ValueError(f"Unsupported model: {model_name}")
        key = (api_key if api_key is not None else self.api_key).strip()
        if not self.validate_key(key, check_remote=False):
            raise ValueError("Gemini API key missing or invalid format")

        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"inline_data": {"mime_type": image.mime_type, "data": image.base64_data}},
                        {"text": prompt},
                    ],
                }
            ],
            "generationConfig": {"temperature": temperature},
        }
        status, response_payload = self._request_json(
            "POST",
            f"{self.API_BASE}/models/{parse.quote(model_id, safe='')}:generateContent",
            api_key=key,
            timeout=timeout,
            data=payload,
        )
        if status == 0:
            raise RuntimeError(f"Could not reach Gemini{_error_suffix(response_payload)}")
        if status != 200 or not isinstance(response_payload, dict):
            raise RuntimeError(f"Gemini request failed (status={status}){_error_suffix(response_payload)}")

        feedback = response_payload.get("promptFeedback") or {}
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            raise RuntimeError(f"Gemini blocked the request: {feedback['blockReason']}")

        candidates = response_payload.get("candidates", [])
        if not isinstance(candidates, list) or not candidates:
            raise RuntimeError("Gemini response has no candidates")
        content = candidates[0].get("content", {}) if isinstance(candidates[0], dict) else {}
        parts = content.get("parts", []) if isinstance(content, dict) else []
        texts = [
            str(part.get("text", ""))
            for part in parts
            if isinstance(part, dict) and part.get("text")
        ]
        return "".join(texts)

    def _request_json(
        self,
        method: str,
        url: str,
        *,
        api_key: str,
        timeout: float,
        data: dict[str, Any] | None = None,
    ) -> tuple[int, dict[str, Any] | None]:
        body = None
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["x-goog-api-key"] = api_key
        if data is not None:
            body = json.dumps(data).encode("utf-8")
        req = request.Request(url, headers=headers, data=body, method=method)
        try:
            with request.urlopen(req, timeout=timeout) as response:
                status = int(getattr(response, "status", 200))
                raw_body = response.read().decode("utf-8", errors="ignore")
                try:
                    payload = json.loads(raw_body) if raw_body else {}
                except json.JSONDecodeError:
                    payload = {}
                return status, payload if isinstance(payload, dict) else {}
        except error.HTTPError as exc:
            raw_body = exc.read().decode("utf-8", errors="ignore")
            try:
                payload = json.loads(raw_body) if raw_body else {}
            except json.JSONDecodeError:
                payload = {}
            return int(exc.code), payload if isinstance(payload, dict) else {}
        except OSError as exc:
            return 0, {"error": {"message": str(getattr(exc, "reason", exc))}}


def _error_suffix(payload: dict[str, Any] | None) -> str:
    if not isinstance(payload, dict):
        return ""
    detail = payload.get("error")
    if isinstance(detail, dict):
        detail = detail.get("message")
    return f": {detail}" if detail else ""

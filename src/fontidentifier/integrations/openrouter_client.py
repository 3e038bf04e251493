# -*- coding: utf-8 -*-
"""OpenRouter vision model wrapper with OpenAI-compatible payloads."""

from __future__ import annotations

import json
from typing import Any
from urllib import error, request

from fontidentifier.models.uploaded_image import UploadedImage


class OpenRouterClient:
    """Thin wrapper for OpenRouter key checks and vision inference."""

    API_BASE = "https://openrouter.ai/api/v1"

    SUPPORTED_MODELS = {
        "gemini_flash": "google/gemini-2.0-flash-001",
        "gpt4o_vision": "openai/gpt-4o",
        "qwen_vl": "qwen/qwen2.5-vl-72b-instruct",
        "llama_32_vision": "meta-llama/llama-3.2-11b-vision-instruct",
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
        """Validate key format and optionally test against model listing."""
        key = (api_key if api_key is not None else self.api_key).strip()
        if not (bool(key) and (key.startswith("sk-or-") or key.startswith("test-"))):
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
        """Send one image plus prompt and return the model's text answer."""
        routed_model = self.SUPPORTED_MODELS.get(model_name)
        if not routed_model:
            raise ValueError(f"Unsupported model: {model_name}")
        key = (api_key if api_key is not None else self.api_key).strip()
        if not self.validate_key(key, check_remote=False):
            raise ValueError("OpenRouter API key missing or invalid format")

        payload = {
            "model": routed_model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image.data_uri}},
                    ],
                }
            ],
            "temperature": temperature,
        }
        status, response_payload = self._request_json(
            "POST",
            f"{self.API_BASE}/chat/completions",
            api_key=key,
            timeout=timeout,
            data=payload,
        )
        if status == 0:
            raise RuntimeError(f"Could not reach OpenRouter{_error_suffix(response_payload)}")
        if status != 200 or not isinstance(response_payload, dict):
            raise RuntimeError(
                f"OpenRouter request failed (status={status}){_error_suffix(response_payload)}"
            )

        choices = response_payload.get("choices", [])
        if not isinstance(choices, list) or not choices:
            raise RuntimeError("OpenRouter response has no choices")
        message = choices[0].get("message", {}) if isinstance(choices[0], dict) else {}
        content_value = message.get("content", "") if isinstance(message, dict) else ""
        if isinstance(content_value, str):
            return content_value
        if isinstance(content_value, list):
            text_parts = [
                str(item.get("text", ""))
                for item in content_value
                if isinstance(item, dict) and item.get("type") == "text"
            ]
            return "\n".join(part for part in text_parts if part)
        return str(content_value or "")

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
            headers["Authorization"] = f"Bearer {api_key}"
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

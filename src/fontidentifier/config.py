# -*- coding: utf-8 -*-
"""Settings persistence and validation."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any

from fontidentifier.constants import DEFAULT_SETTINGS_FILE, PROVIDERS


KEY_PLACEHOLDER = "USE_ENV_FILE"

# api_keys entry -> environment variable names, first match wins
API_KEY_ENV_NAMES: dict[str, tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openrouter": ("OPENROUTER_API_KEY",),
}

DEFAULT_CONFIG: dict[str, Any] = {
    "api_keys": {"gemini": KEY_PLACEHOLDER, "openrouter": KEY_PLACEHOLDER},
    "analysis": {
        "provider": "gemini",
        "model": "gemini_flash",
        "temperature": 0.4,
        "timeout_seconds": 60.0,
        "max_retries": 0,
        "retry_backoff_seconds": 1.0,
    },
    "upload": {"max_size_mb": 20},
    "default_content": {"enabled": True, "image_path": "", "analysis_path": ""},
    "logging": {"level": "INFO", "log_dir": "logs"},
}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


class ConfigError(ValueError):
    """Raised when settings are invalid."""


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default config."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load a simple .env file (KEY=VALUE)."""
    values: dict[str, str] = {}
    if not env_path.exists():
        return values

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.removeprefix("export ").strip()
        value = value.strip()
        if not key:
            continue
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        values[key] = value
    return values


def _apply_env_overrides(
    config: dict[str, Any],
    env_values: dict[str, str],
    environ: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Fill API keys from the .env file, then from the process environment."""
    merged = deepcopy(config)
    environ = dict(os.environ) if environ is None else environ
    for key_name, env_names in API_KEY_ENV_NAMES.items():
        value = ""
        for env_name in env_names:
            value = env_values.get(env_name, "").strip() or environ.get(env_name, "").strip()
            if value:
                break
        if value:
            merged.setdefault("api_keys", {})[key_name] = value
    return merged


def has_api_key(config: dict[str, Any], provider: str) -> bool:
    """Return True when a usable (non-placeholder) key is configured."""
    value = str(config.get("api_keys", {}).get(provider, "")).strip()
    return bool(value) and value != KEY_PLACEHOLDER


def max_upload_bytes(config: dict[str, Any]) -> int:
    """Upload size limit in bytes."""
    return int(float(config.get("upload", {}).get("max_size_mb", 20)) * 1024 * 1024)


def validate_config(config: dict[str, Any]) -> None:
    """Validate fields the analysis and upload flow depend on."""
    analysis = config.get("analysis", {})
    provider = analysis.get("provider")
    if provider not in PROVIDERS:
        raise ConfigError(f"analysis.provider must be one of {', '.join(PROVIDERS)}")

    model = analysis.get("model")
    if not isinstance(model, str) or not model.strip():
        raise ConfigError("analysis.model must be a non-empty model alias")

    temperature = analysis.get("temperature")
    if not isinstance(temperature, (float, int)) or not (0 <= float(temperature) <= 2):
        raise ConfigError("analysis.temperature must be in range 0..2")

    timeout = analysis.get("timeout_seconds")
    if not isinstance(timeout, (float, int)) or float(timeout) <= 0:
        raise ConfigError("analysis.timeout_seconds must be a positive number")

    retries = analysis.get("max_retries")
    if not isinstance(retries, int) or isinstance(retries, bool) or not (0 <= retries <= 5):
        raise ConfigError("analysis.max_retries must be an int in range 0..5")

    max_size = config.get("upload", {}).get("max_size_mb")
    if not isinstance(max_size, (float, int)) or not (0 < float(max_size) <= 100):
        raise ConfigError("upload.max_size_mb must be in range 1..100")

    level = str(config.get("logging", {}).get("level", "")).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(sorted(LOG_LEVELS))}")


def load_defaults_with_env(path: str | Path | None = None) -> dict[str, Any]:
    """Default config with API keys from the .env file next to ``path``."""
    config_path = Path(path or DEFAULT_SETTINGS_FILE)
    return _apply_env_overrides(get_default_config(), _load_env_file(config_path.parent / ".env"))


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load config from JSON and merge into defaults."""
    config_path = Path(path or DEFAULT_SETTINGS_FILE)
    if not config_path.exists():
        return load_defaults_with_env(config_path)

    with config_path.open("r", encoding="utf-8") as handle:
        loaded = json.load(handle)
    if not isinstance(loaded, dict):
        raise ConfigError(f"Expected JSON object in {config_path}")
    merged = _deep_merge(get_default_config(), loaded)
    merged = _apply_env_overrides(merged, _load_env_file(config_path.parent / ".env"))
    validate_config(merged)
    return merged


def _strip_api_keys(config: dict[str, Any]) -> dict[str, Any]:
    """Replace real API keys with the placeholder before saving to disk."""
    config_copy = deepcopy(config)
    api_keys = config_copy.get("api_keys", {})
    for key_name in API_KEY_ENV_NAMES:
        if api_keys.get(key_name):
            api_keys[key_name] = KEY_PLACEHOLDER
    return config_copy


def save_config(config: dict[str, Any], path: str | Path | None = None) -> Path:
    """Validate and save config as JSON, but without real API keys.

    API keys belong in the .env file next to settings.json.
    """
    validate_config(config)
    config_path = Path(path or DEFAULT_SETTINGS_FILE)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as handle:
        json.dump(_strip_api_keys(config), handle, indent=2, ensure_ascii=True)
        handle.write("\n")
    return config_path


def save_api_keys(config: dict[str, Any], env_path: str | Path) -> Path:
    """Write real API keys into the .env file, keeping unrelated lines."""
    path = Path(env_path)
    updates = {
        env_names[0]: str(config.get("api_keys", {}).get(key_name, "")).strip()
        for key_name, env_names in API_KEY_ENV_NAMES.items()
        if has_api_key(config, key_name)
    }
    lines = path.read_text(encoding="utf-8").splitlines() if path.exists() else []

    kept: list[str] = []
    for line in lines:
        name = line.split("=", 1)[0].removeprefix("export ").strip()
        if "=" in line and name in updates:
            continue
        kept.append(line)
    kept.extend(f"{name}={value}" for name, value in updates.items())

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(kept) + "\n", encoding="utf-8")
    return path

# -*- coding: utf-8 -*-
"""Application constants."""

APP_NAME = "AI Font Identifier"
APP_SLUG = "font-identifier"
APP_VERSION = "0.1.0"

DEFAULT_SETTINGS_FILE = "settings.json"

MAX_IMAGE_BYTES = 20 * 1024 * 1024
ACCEPTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")

PROVIDERS = ("gemini", "openrouter")

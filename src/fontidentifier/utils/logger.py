# -*- coding: utf-8 -*-
"""Root logger setup: console output plus one log file per session."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(threadName)s] %(name)s - %(levelname)s - %(message)s"


def setup_session_logging(
    base_dir: str | Path,
    app_name: str,
    level: str | int = "INFO",
    log_dir: str = "logs",
) -> Path | None:
    """Configure root logging once per process and return the session log path."""
    root = logging.getLogger()
    if getattr(root, "_fontidentifier_logging_configured", False):
        return getattr(root, "_fontidentifier_session_log", None)

    resolved_level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved_level, int):
        resolved_level = logging.INFO
    root.setLevel(resolved_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")

    if not any(isinstance(handler, logging.StreamHandler) for handler in root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(resolved_level)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)

    logs_dir = Path(base_dir) / log_dir
    safe_app_name = app_name.lower().replace(" ", "-")
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    session_log_path: Path | None = logs_dir / f"{safe_app_name}-{timestamp}.log"
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(session_log_path, encoding="utf-8")
        file_handler.setLevel(resolved_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        root.info("=== %s starting (level=%s) ===", app_name, logging.getLevelName(resolved_level))
        root.info("Session log file: %s", session_log_path)
        root.info("System info: OS=%s", os.name)
    except OSError as exc:
        root.error("Failed to establish session log file: %s", exc)
        session_log_path = None

    root._fontidentifier_logging_configured = True  # type: ignore[attr-defined]
    root._fontidentifier_session_log = session_log_path  # type: ignore[attr-defined]
    return session_log_path

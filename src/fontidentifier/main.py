# -*- coding: utf-8 -*-
"""Application entry point."""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QApplication, QMessageBox

from fontidentifier.config import load_config, load_defaults_with_env
from fontidentifier.constants import APP_NAME, APP_SLUG, DEFAULT_SETTINGS_FILE
from fontidentifier.gui.controller import AppController
from fontidentifier.gui.main_window import MainWindow
from fontidentifier.utils.logger import setup_session_logging


def global_exception_handler(exc_type, exc_value, exc_traceback) -> None:
    """Log uncaught errors and keep a copy in logs/LAST_CRASH.log."""
    error_msg = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    logging.getLogger().critical("FATAL CRASH:\n%s", error_msg)

    crash_path = Path.cwd() / "logs" / "LAST_CRASH.log"
    try:
        crash_path.parent.mkdir(parents=True, exist_ok=True)
        crash_path.write_text(error_msg, encoding="utf-8")
    except OSError:
        logging.getLogger().exception("Could not write %s", crash_path)

    if QApplication.instance() is not None:
        QMessageBox.critical(None, "Application Crash", f"A fatal error occurred.\nDetails saved to: {crash_path}")

    sys.__excepthook__(exc_type, exc_value, exc_traceback)


def main(argv: list[str] | None = None) -> int:
    """Start the GUI application."""
    sys.excepthook = global_exception_handler
    argv = sys.argv if argv is None else argv
    app = QApplication(argv)
    app.setApplicationName(APP_NAME)

    settings_path = Path.cwd() / DEFAULT_SETTINGS_FILE
    config_error = ""
    try:
        settings = load_config(settings_path)
    except (ValueError, OSError) as exc:
        config_error = str(exc)
        settings = load_defaults_with_env(settings_path)

    logging_settings = settings.get("logging", {})
    setup_session_logging(
        Path.cwd(),
        APP_SLUG,
        level=str(logging_settings.get("level", "INFO")),
        log_dir=str(logging_settings.get("log_dir", "logs")),
    )
    logger = logging.getLogger(__name__)
    if config_error:
        logger.error("Invalid settings in %s, using defaults: %s", settings_path, config_error)
        QMessageBox.warning(None, APP_NAME, f"Settings could not be loaded, using defaults.\n\n{config_error}")

    controller = AppController(settings)
    window = MainWindow(settings=settings, controller=controller, settings_path=settings_path)
    window.show()
    # Mount after the event loop starts so the window paints before the default image is rendered.
    QTimer.singleShot(0, controller.mount)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())

"""Logging setup.

The package logger has a ``NullHandler`` by default because the full-screen
UI owns the terminal; diagnostics go to a file only when one is requested.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FILE_ENV = "FORKVIEW_LOG_FILE"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(log_file: Path | None = None, level: int = logging.DEBUG) -> logging.Handler | None:
    """Attach a file handler to the package logger.

    ``log_file`` defaults to ``$FORKVIEW_LOG_FILE``; returns ``None`` when no
    destination is configured.
    """
    if log_file is None:
        env_value = os.environ.get(LOG_FILE_ENV, "").strip()
        if not env_value:
            return None
        log_file = Path(env_value)

    package_logger = logging.getLogger("forkview")
    handler = logging.FileHandler(log_file.expanduser(), encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler

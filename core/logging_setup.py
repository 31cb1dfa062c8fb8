"""
core/logging_setup.py -- Process-wide logging configuration.

Every module logs through a named logger under the "noticeboard." hierarchy
(noticeboard.api, noticeboard.auth, ...). This module installs the handlers
once at startup:

  console  -- always on, same format as the request log lines.
  app.log  -- daily-rotated file with every record at LOG_LEVEL (LOG_DIR only).
  error.log -- daily-rotated file with ERROR and above (LOG_DIR only).

Layer rule: core/ is the kernel. No imports from api/, auth/, or board/.
"""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ERROR_LOG_BACKUP_DAYS = 30

# Marker attribute so repeated configure_logging() calls replace our own
# handlers without touching handlers installed by pytest or uvicorn.
_HANDLER_TAG = "_noticeboard_handler"


def _tagged(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def configure_logging(settings: Settings) -> logging.Logger:
    """Install console (and optionally rotating file) handlers on the app logger.

    Idempotent: handlers from a previous call are removed first, so calling
    this from both the launcher and the lifespan does not duplicate output.
    Returns the "noticeboard" parent logger.
    """
    root = logging.getLogger("noticeboard")
    root.setLevel(settings.log_level)
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    root.addHandler(_tagged(logging.StreamHandler()))

    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        app_handler = TimedRotatingFileHandler(
            log_dir / "app.log",
            when="midnight",
            backupCount=settings.log_backup_days,
            encoding="utf-8",
        )
        app_handler.setLevel(settings.log_level)
        root.addHandler(_tagged(app_handler))

        error_handler = TimedRotatingFileHandler(
            log_dir / "error.log",
            when="midnight",
            backupCount=_ERROR_LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        root.addHandler(_tagged(error_handler))

    return root

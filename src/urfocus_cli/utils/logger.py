"""Application-wide logger writing to platformdirs user_log_dir.

Set ``URFOCUS_LOG_LEVEL`` (e.g. ``WARNING``) to change how much is kept;
everything down to DEBUG is logged by default.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "urfocus_cli"
_LOG_FILE = "urfocus.log"
_LEVEL_ENV = "URFOCUS_LOG_LEVEL"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def log_file_path() -> Path:
    """Location of the current log file."""
    return Path(user_log_dir(_APP_NAME)) / _LOG_FILE


def _level_from_env() -> int:
    name = os.environ.get(_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.DEBUG
    return level if isinstance(level, int) else logging.DEBUG


def get_logger() -> logging.Logger:
    """Return the shared application logger, creating its file handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    path = log_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(_level_from_env())
    logger.propagate = False
    if not logger.handlers:
        handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
        )
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(message)s", "%Y-%m-%dT%H:%M:%S")
        )
        logger.addHandler(handler)

    _logger = logger
    return _logger

"""File logger for the CLI and the library modules under ``flowtask``.

Everything goes to one rotating file in the platform log directory; nothing
is written to the terminal, so ``--json`` output stays machine-readable.
``FLOWTASK_LOG_LEVEL`` (DEBUG, INFO, ...) raises the threshold.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "flowtask"
_LOG_FILE = "flowtask.log"
_LEVEL_ENV = "FLOWTASK_LOG_LEVEL"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def log_file_path() -> Path:
    """Where the log file lives on this machine."""
    return Path(user_log_dir(_APP_NAME)) / _LOG_FILE


def _level_from_env() -> int:
    name = os.environ.get(_LEVEL_ENV, "DEBUG").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.DEBUG


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def get_logger() -> logging.Logger:
    """Return the ``flowtask`` logger, attaching the file handler on first use.

    Module loggers (``logging.getLogger(__name__)``) are its children and end
    up in the same file.
    """
    global _logger
    if _logger is not None:
        return _logger

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(_level_from_env())
    # other handlers (test capture, embedding apps) may already be attached
    if not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers):
        logger.addHandler(_file_handler(log_file_path()))
    logger.propagate = False

    _logger = logger
    return _logger

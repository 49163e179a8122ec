"""Package logger for nicuvitals.

Modules log through ``get_logger(__name__)`` and never configure handlers.
The package logger carries only a NullHandler until a script or notebook calls
``configure_logging()``, which attaches one stderr handler to the
``nicuvitals`` logger and leaves the root logger alone. Nothing is written to
files.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "nicuvitals"
LOG_LEVEL_ENV = "NICUVITALS_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def _stderr_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    return next(
        (h for h in logger.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr),
        None,
    )


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """Attach a stderr handler to the nicuvitals logger.

    level falls back to $NICUVITALS_LOG_LEVEL, then INFO. A second call only
    updates the level unless force=True, which first removes every existing
    handler.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    elif _stderr_handler(logger) is not None:
        return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """The named logger, or the package logger when name is None."""
    return logging.getLogger(name or LOGGER_NAME)

"""Logging helpers with color output to stderr."""

from __future__ import annotations

import logging
from typing import Optional

from colorlog import ColoredFormatter

LOGGER_NAME = "clipboard_ocr"

_LOGGER: Optional[logging.Logger] = None


def get_logger(level: Optional[str] = None) -> logging.Logger:
    """Return a configured logger that writes human-readable logs to stderr.

    ``level`` updates the level of the shared logger; omitted, the current
    level is kept (INFO on first use).
    """
    global _LOGGER
    if _LOGGER is None:
        logger = logging.getLogger(LOGGER_NAME)
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                ColoredFormatter("%(log_color)s[%(levelname)s] %(message)s")
            )
            logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
        _LOGGER = logger

    if level:
        _LOGGER.setLevel(getattr(logging, level.upper(), logging.INFO))
    return _LOGGER

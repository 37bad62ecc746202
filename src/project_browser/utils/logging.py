"""Logging helpers for the project browser."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def get_logger(level: int = logging.INFO) -> logging.Logger:
    """Return the package logger, installing a stream handler on first use."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("project_browser")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
    _LOGGER.setLevel(level)
    return _LOGGER

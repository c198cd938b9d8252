"""Logging setup for the planner package.

Records from ``attendance_planner.*`` modules go to stdout through a single
package-level handler; the root logger is left to uvicorn and streamlit.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from attendance_planner.utils.config import get_settings


PACKAGE_LOGGER = "attendance_planner"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Attach the package handler once; later calls only adjust the level."""
    global _configured

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel((level or get_settings().log_level).upper())
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, nested under the package logger when it isn't already."""
    if not _configured:
        configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)

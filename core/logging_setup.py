"""Logging setup for the school administration console."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
ROOT_LOGGER = "school_admin"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Install a single stderr handler on the root logger.

    Safe to call on every Streamlit rerun; a second call only adjusts the level.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if not any(getattr(h, "_school_admin", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._school_admin = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return logging.getLogger(ROOT_LOGGER)

from __future__ import annotations

import logging

from core.logging_setup import configure_logging


def test_configure_logging_installs_one_handler():
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        log = configure_logging(logging.DEBUG)
        configure_logging(logging.WARNING)
        ours = [h for h in root.handlers if getattr(h, "_school_admin", False)]
        assert len(ours) == 1
        assert root.level == logging.WARNING
        assert log.name == "school_admin"
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)

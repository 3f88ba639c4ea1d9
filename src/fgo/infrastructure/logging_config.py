"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Send ``fgo`` log records to stderr at ``level``.

    Safe to call more than once; the handler is only installed the first time.
    """
    logger = logging.getLogger("fgo")
    logger.setLevel(level)
    if not any(getattr(h, "_fgo_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._fgo_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

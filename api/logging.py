"""Logging configuration for the badge service."""
from __future__ import annotations

import logging

from .middleware.correlation import RequestIdFilter

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(request_id)s): %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stderr, tagged with the current request ID.

    Safe to call more than once; the handler is only installed the first time.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root.handlers:
        if any(isinstance(f, RequestIdFilter) for f in handler.filters):
            return

    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)

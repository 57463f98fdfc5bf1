"""Logging setup for PaceKeeper.

Modules log through ``logging.getLogger(__name__)``; ``configure_logging``
attaches one console handler to the ``pacekeeper`` logger at start-up.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "pacekeeper"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach (or re-level) the console handler.  Safe to call repeatedly."""
    global _handler
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(_handler)
    _handler.setLevel(level)
    return root

"""Logging setup shared by the CLI and the API server.

Engine modules log through ``logging.getLogger(__name__)`` and narrate combat
at INFO, so ``--log-level WARNING`` leaves only problems on screen.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_FORMAT = "%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s"

# Third-party loggers that drown out narration at INFO
_NOISY = ("uvicorn.access",)


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> logging.Handler:
    """Route every logger to one stream handler at *level*.

    Unknown level names fall back to INFO.  Returns the installed handler.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
    return handler

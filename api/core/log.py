"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only installs the
handler once at startup.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO") -> None:
    global _handler
    root = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)

    try:
        root.setLevel(level)
    except ValueError:
        root.setLevel(logging.INFO)

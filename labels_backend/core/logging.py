"""
Labels backend — logging configuration.

``configure_logging()`` is called once from ``labels_backend.app`` at import
time.  Library modules only ever do ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from labels_backend import config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Capped at WARNING.
_QUIET_LOGGERS = ("pymongo", "httpx", "httpcore", "uvicorn.access")

_configured = False


def _resolve_level(name: Optional[str]) -> int:
    level = logging.getLevelName((name or config.LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None) -> None:
    """Install a stdout handler on the root logger.

    ``level`` overrides ``config.LOG_LEVEL``.  Repeated calls are no-ops, and
    handlers already installed by uvicorn are left in place.
    """
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True

"""Package logger for shared_preferences (standard library `logging`).

Only the ``shared_preferences`` logger is configured; the root logger and
any handlers the host application installs are left alone.

Env:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL (default: INFO)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

PACKAGE_LOGGER_NAME = "shared_preferences"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

_configured = False


def level_from_env(default: int = logging.INFO) -> int:
    raw = (os.getenv("LOG_LEVEL") or "").upper().strip()
    level = logging.getLevelName(raw) if raw else default
    return level if isinstance(level, int) else default


def _configure_package_logger() -> logging.Logger:
    global _configured
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if _configured:
        return package_logger
    package_logger.setLevel(level_from_env())
    # Records still propagate to the root logger; the stream handler is only
    # a fallback for hosts that never configured logging.
    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    _configured = True
    return package_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``shared_preferences`` namespace.

    Module names inside the package (``__name__``) are used as-is; any other
    name becomes a child of the package logger. The package logger is set
    up on first use and left to the host afterwards.
    """
    package_logger = _configure_package_logger()
    if not name or name == PACKAGE_LOGGER_NAME:
        return package_logger
    if name.startswith(PACKAGE_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return package_logger.getChild(name)

"""Logging for the ``spending_tracker`` package.

Modules obtain loggers with ``get_logger("spending_tracker.<module>")`` and
never install handlers themselves. Until an entrypoint calls
``configure_logging`` the package logger only carries a ``NullHandler``, so
importing the package from a host application prints nothing.

Level resolution, first match wins: the ``level`` argument, the
``SPENDING_TRACKER_LOG_LEVEL`` environment variable, ``INFO``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "spending_tracker"
LEVEL_ENV_VAR = "SPENDING_TRACKER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def resolve_level(level: int | str | None = None) -> int:
    """Turn an int, a level name or a numeric string into a logging level.

    Unknown names fall back to ``INFO`` rather than failing startup.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    value = logging.getLevelNamesMapping().get(name)
    return value if value is not None else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach one stream handler to the package logger; later calls are no-ops.

    ``stream`` defaults to ``sys.stderr`` at call time. Records do not
    propagate to the root logger once configured.
    """

    global _configured
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured:
        return pkg_logger

    for h in list(pkg_logger.handlers):
        if isinstance(h, logging.NullHandler):
            pkg_logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    pkg_logger.setLevel(resolved)
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False
    _configured = True
    return pkg_logger


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "DEFAULT_FORMAT",
    "LEVEL_ENV_VAR",
    "PACKAGE_LOGGER",
    "configure_logging",
    "get_logger",
    "resolve_level",
]

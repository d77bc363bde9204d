"""Package-wide logging setup for ``tencents``.

Two helpers are exposed:

- ``configure_logging(...)`` installs one ``StreamHandler`` on the ``"tencents"``
  logger. Entrypoints (the CLI, a host application) call it once at startup.
- ``get_logger(name)`` returns a child logger and makes sure the package logger
  carries a ``NullHandler`` until somebody configures it, so importing the
  library never prints "No handler could be found" noise.

Modules under ``tencents`` only ever call ``get_logger("tencents.<module>")``;
handler wiring belongs to the entrypoint.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "tencents"
LOG_LEVEL_ENV = "TENCENTS_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def resolve_level(level: int | str | None) -> int:
    """Turn ``level`` (int, name or numeric string) into a logging level.

    ``None`` falls back to ``TENCENTS_LOG_LEVEL`` and then to ``INFO``. Unknown
    names also resolve to ``INFO``.
    """

    if level is None:
        level = os.getenv(LOG_LEVEL_ENV)
        if not level:
            return logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Attach the package handler once; later calls are no-ops."""

    global _configured
    if _configured:
        return

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _configured and not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "resolve_level"]

"""Logging for ``monthly_recap``.

The ``recap`` CLI calls :func:`configure_logging` once at startup; everything
else only asks :func:`get_logger` for ``"monthly_recap.<module>"`` loggers and
stays silent when no application has configured output.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "monthly_recap"
_LEVEL_ENV = "RECAP_LOG_LEVEL"
# SQL statements are only worth reading when debugging an import.
_SQL_LOGGER_NAME = "sqlalchemy.engine"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def parse_level(level: int | str | None) -> int:
    """Numeric level for an int, a digit string or a level name.

    ``None`` reads ``RECAP_LOG_LEVEL``; anything unrecognised is ``INFO``.
    """

    if level is None:
        level = os.getenv(_LEVEL_ENV)
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = getattr(logging, name, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Send package logs to ``stream``; later calls are no-ops.

    At ``DEBUG`` the SQLAlchemy engine logger shares the handler, so the
    statements behind an import show up next to the import's own messages.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    targets = [logging.getLogger(_PKG_LOGGER_NAME)]
    if resolved <= logging.DEBUG:
        targets.append(logging.getLogger(_SQL_LOGGER_NAME))
    for logger in targets:
        for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
            logger.removeHandler(h)
        logger.setLevel(resolved)
        logger.addHandler(handler)
        logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["DEFAULT_FORMAT", "configure_logging", "get_logger", "parse_level"]

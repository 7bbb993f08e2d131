"""Logging for ``expense_analysis``.

All module loggers hang off ``"expense_analysis"``. Until an entry point calls
:func:`configure_logging`, that logger only carries a ``NullHandler``, so
importing the package never prints anything. The CLI configures it once per
process; the level comes from ``--log-level`` or ``EXPENSE_ANALYSIS_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "expense_analysis"
LOG_LEVEL_ENV = "EXPENSE_ANALYSIS_LOG_LEVEL"
DEFAULT_LEVEL = logging.WARNING
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_CONFIGURED = False


def resolve_level(level: int | str | None = None) -> int:
    """Numeric level for ``level``, the environment, or :data:`DEFAULT_LEVEL`.

    Names are case-insensitive; unknown names raise ``ValueError``.
    """

    if level is None:
        level = os.getenv(LOG_LEVEL_ENV) or DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    try:
        return logging.getLevelNamesMapping()[name]
    except KeyError:
        raise ValueError(f"unknown log level: {level!r}") from None


def _package_logger() -> logging.Logger:
    return logging.getLogger(_PKG_LOGGER_NAME)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Send package log records to ``stream`` (stderr by default).

    Only the first call has an effect. ``fmt`` overrides
    :data:`DEFAULT_FORMAT`.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = resolve_level(level)
    pkg = _package_logger()
    pkg.handlers = [h for h in pkg.handlers if not isinstance(h, logging.NullHandler)]

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    pkg.addHandler(handler)
    pkg.setLevel(resolved)
    pkg.propagate = False

    _CONFIGURED = True


def reset_logging() -> None:
    """Drop handlers and level so the next :func:`configure_logging` applies."""

    global _CONFIGURED
    pkg = _package_logger()
    pkg.handlers = []
    pkg.setLevel(logging.NOTSET)
    pkg.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    pkg = _package_logger()
    if not _CONFIGURED and not pkg.handlers:
        pkg.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "reset_logging", "resolve_level"]

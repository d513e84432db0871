"""Logging configuration helpers for Family Vault."""

from __future__ import annotations

import logging
import os
from typing import Final


_DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ACCESS_FORMAT: Final[str] = '%(client_addr)s - "%(request_line)s" %(status_code)s'
_DEFAULT_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Loggers that should never be noisier than WARNING unless debugging.
_QUIET_LOGGERS: Final[tuple[str, ...]] = ("sqlalchemy.engine", "aiosqlite")


def _resolve_level(level_name: str) -> int:
    """Translate a log level string or number into a logging level."""

    value = level_name.strip()
    if value.isdigit():
        return int(value)

    numeric = getattr(logging, value.upper(), None)
    if isinstance(numeric, int):
        return numeric

    return logging.INFO


def _attach_console(name: str, fmt: str, datefmt: str | None, level: int) -> None:
    target = logging.getLogger(name)
    if not target.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt, datefmt))
        target.addHandler(handler)
    target.setLevel(level)
    target.propagate = False


def configure_logging(*, debug: bool = False) -> None:
    """Route vault and HTTP access logs to the console.

    ``LOG_LEVEL`` wins over the ``debug`` flag when set.
    """

    env_level = os.getenv("LOG_LEVEL")
    level = _resolve_level(env_level or ("DEBUG" if debug else "INFO"))

    _attach_console("familyvault", _DEFAULT_FORMAT, _DEFAULT_DATEFMT, level)
    _attach_console("uvicorn.access", _ACCESS_FORMAT, None, max(level, logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else logging.WARNING)

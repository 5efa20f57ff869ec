"""Logging setup shared by the CLI and the server."""

from __future__ import annotations

import logging
import sys

from langref.config import LANGREF_LOG_LEVEL

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ExtraFormatter(logging.Formatter):
    """Append ``extra={...}`` fields to each line as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = {key: value for key, value in vars(record).items() if key not in _RESERVED_ATTRS}
        if not extras:
            return line
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{line} {pairs}"


def configure_logging(level: str | int = LANGREF_LOG_LEVEL) -> None:
    """Install a stderr handler on the ``langref`` and ``server`` loggers."""
    if isinstance(level, str):
        level = level.upper()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ExtraFormatter(_FORMAT))
    for name in ("langref", "server"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.setLevel(level)
        logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

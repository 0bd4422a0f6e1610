"""Logging setup for the restaurant API."""

import logging
import sys
from typing import Optional

from app.config import settings

_configured = False


class KeyValueFormatter(logging.Formatter):
    """Render records as ``ts level logger message key=value ...``.

    Extra fields passed through ``logger.info(..., extra={...})`` are appended
    in sorted order so log lines stay grep-friendly.
    """

    _RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        base = f"{self.formatTime(record)} {record.levelname} {record.name} {record.getMessage()}"
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in self._RESERVED and not key.startswith("_")
        }
        if extras:
            base += " " + " ".join(f"{key}={extras[key]}" for key in sorted(extras))
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a single stream handler to the ``app`` logger tree."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(KeyValueFormatter())

    root = logging.getLogger("app")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.propagate = False
    _configured = True


def reset_logging() -> None:
    global _configured
    logging.getLogger("app").handlers.clear()
    _configured = False

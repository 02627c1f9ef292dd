"""Logging setup for posledger.

Every module logs through ``get_logger(__name__)`` and passes structured
fields with ``extra=``. Nothing is emitted until ``configure_logging`` installs
a handler, which the CLI does on startup.
"""

import json
import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

_LOGGER_PREFIX = "posledger"

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


class _JSONEncoder(json.JSONEncoder):
    """Handle Decimal, dates and enums in log payloads."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, cls=_JSONEncoder, default=str)


class _KeyValueFormatter(logging.Formatter):
    """Human-readable formatter that appends extra fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = [
            f"{key}={val}"
            for key, val in vars(record).items()
            if key not in _STDLIB_KEYS
        ]
        if extras:
            return f"{base} {' '.join(extras)}"
        return base


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the posledger namespace."""
    if name == _LOGGER_PREFIX or name.startswith(f"{_LOGGER_PREFIX}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(level: str | int = "WARNING", json_output: bool = False) -> None:
    """Install a stderr handler on the posledger root logger.

    Calling this again replaces the previously installed handler, so the CLI
    can be invoked repeatedly in one process (as the tests do).
    """
    root = logging.getLogger(_LOGGER_PREFIX)
    for handler in list(root.handlers):
        if getattr(handler, "_posledger_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._posledger_handler = True  # type: ignore[attr-defined]
    if json_output:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(_KeyValueFormatter("%(levelname)s %(name)s: %(message)s"))

    if isinstance(level, str):
        level = level.upper()
    root.setLevel(level)
    root.addHandler(handler)

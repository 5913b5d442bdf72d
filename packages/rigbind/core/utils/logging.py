"""Logging setup for rigbind.

Everything logs through the standard library. ``configure_logging`` installs
one root handler (stdout or a file) with either a text format or
``StructuredJSONFormatter`` JSON lines. ``get_logger`` hands out a
``ContextLoggerAdapter`` when context such as a session id is given, so the
context shows up in every structured record.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import MutableMapping
from datetime import UTC, datetime
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

_QUIET_LOGGERS = ("asyncio",)


class StructuredJSONFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    Shape::

        {"level": "INFO", "message": "...", "timestamp": "<ISO-8601 UTC>",
         "context": {"logger_name": ..., "module": ..., "function": ...,
                     "line": ..., <extra fields>}}
    """

    def format(self, record: logging.LogRecord) -> str:
        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        context.update(_extra_fields(record))

        if record.exc_info:
            exc_type, exc, _ = record.exc_info
            context["error_type"] = exc_type.__name__ if exc_type else None
            context["error_message"] = str(exc) if exc else None
            context["stack_trace"] = record.exc_text or self.formatException(record.exc_info)

        return json.dumps(
            {
                "level": record.levelname,
                "message": record.getMessage(),
                "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "context": context,
            },
            default=str,
        )


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose fixed context merges with per-call ``extra``.

    Per-call keys win over the adapter's context on conflict.

    Example:
        >>> log = ContextLoggerAdapter(logging.getLogger("rigbind"), {"session_id": "s1"})
        >>> log.info("Dispatched", extra={"control": "pan"})
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Configure root logging; safe to call again to reconfigure.

    Args:
        level: Level name, case-insensitive (DEBUG, INFO, WARNING, ...)
        format_string: Text format; ignored when ``structured`` is True
        filename: Log file path; stdout when None
        structured: Emit JSON lines through ``StructuredJSONFormatter``

    Examples:
        >>> configure_logging(level="INFO")
        >>> configure_logging(level="DEBUG", structured=True, filename="rig.jsonl")
    """
    handler: logging.Handler = (
        logging.FileHandler(filename) if filename else logging.StreamHandler(sys.stdout)
    )
    handler.setFormatter(
        StructuredJSONFormatter() if structured else logging.Formatter(format_string or DEFAULT_FORMAT)
    )

    logging.basicConfig(level=getattr(logging, level.upper()), handlers=[handler], force=True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)


def get_logger(name: str, **context: Any) -> logging.Logger | ContextLoggerAdapter:
    """Get a logger, wrapped with ``context`` when any is given.

    Args:
        name: Logger name (usually ``__name__``)
        **context: Fields attached to every record (e.g. ``session_id``)

    Returns:
        Plain logger, or ContextLoggerAdapter when context is given
    """
    base = logging.getLogger(name)
    if context:
        return ContextLoggerAdapter(base, context)
    return base

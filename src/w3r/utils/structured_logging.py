r"""Structured logging utilities for machine-readable log output.

Diagnostics of the engine (attempts, retry decisions, waits, skipped
headers and cookies) are emitted through the standard ``logging`` module
under the ``w3r`` logger hierarchy. This module adds:

* ``log_structured`` to attach named fields to a record,
* ``StructuredFormatter`` to render records as JSON lines,
* a context-local correlation id included in every JSON record,
* ``configure_logging`` used by the command-line front end.

Example:
    ```python
    import logging
    from w3r.utils.structured_logging import StructuredFormatter, set_correlation_id

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("w3r")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    set_correlation_id("nightly-healthcheck")
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import sys
import time
from typing import Any, TextIO

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "w3r_correlation_id", default=None
)

# Attributes every LogRecord carries; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_correlation_id() -> str | None:
    """Get the correlation id of the current context.

    Example:
        ```pycon
        >>> from w3r.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("run-42")
        >>> get_correlation_id()
        'run-42'
        >>> clear_correlation_id()
        >>> get_correlation_id()

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation id of the current context.

    Args:
        correlation_id: Identifier attached to every JSON log record.
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Remove the correlation id of the current context."""
    _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    Standard fields: ``timestamp`` (ISO 8601, UTC), ``level``, ``logger``,
    ``message``, ``module``, ``function``, ``line``. The correlation id
    and the exception text are added when present, followed by every field
    passed through ``extra``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from io import StringIO
        >>> from w3r.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("w3r.doctest")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("attempt finished", extra={"status_code": 503})
        >>> json.loads(stream.getvalue())["status_code"]
        503

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        """Format the record time as ISO 8601 with millisecond precision
        (``datefmt`` is ignored)."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log a message with named fields.

    The fields are attached to the record and rendered by
    ``StructuredFormatter``.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.DEBUG).
        message: Log message.
        **extra: Named fields to include in the record.
    """
    logger.log(level, message, extra=extra)


def configure_logging(
    level: int | str = logging.WARNING,
    *,
    json_format: bool = False,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install a single handler on the ``w3r`` logger.

    Args:
        level: The log level of the ``w3r`` logger.
        json_format: If ``True`` use ``StructuredFormatter``, otherwise a
            plain text format.
        stream: The stream receiving the records. Defaults to stderr.

    Returns:
        The installed handler.
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(StructuredFormatter() if json_format else logging.Formatter(PLAIN_FORMAT))
    logger = logging.getLogger("w3r")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return handler

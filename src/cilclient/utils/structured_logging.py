r"""Opt-in JSON logging with per-call identifiers.

Every logical call made through ``AsyncCilClient`` runs with a call id
stored in a context variable, so that the records of one call (retries
and token exchange included) can be grouped by a log aggregator.

Example:
    ```python
    import logging

    from cilclient.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("cilclient")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "call_scope",
    "get_call_id",
    "log_structured",
    "new_call_id",
]

import contextvars
import json
import logging
import time
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator

_call_id: contextvars.ContextVar[str | None] = contextvars.ContextVar("call_id", default=None)

# Attributes every LogRecord has; anything else was passed through ``extra``.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def new_call_id() -> str:
    """Return a fresh call id."""
    return uuid.uuid4().hex[:16]


def get_call_id() -> str | None:
    """Return the id of the call running in the current context.

    Example:
        ```pycon
        >>> from cilclient.utils.structured_logging import call_scope, get_call_id
        >>> get_call_id() is None
        True
        >>> with call_scope("abc"):
        ...     get_call_id()
        ...
        'abc'

        ```
    """
    return _call_id.get()


@contextmanager
def call_scope(call_id: str | None = None) -> Generator[str, None, None]:
    """Run the enclosed block with ``call_id`` as the current call id.

    Args:
        call_id: The id to use. A new one is generated if ``None``.

    Yields:
        The call id.
    """
    call_id = call_id or new_call_id()
    token = _call_id.set(call_id)
    try:
        yield call_id
    finally:
        _call_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    The object holds the timestamp, level, logger name, message and
    source location, the current call id when one is set, and every
    field passed through ``extra``.
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
        call_id = get_call_id()
        if call_id is not None:
            log_data["call_id"] = call_id
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED:
                log_data[key] = value
        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002, N802
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Log ``message`` with ``fields`` attached as structured data.

    Args:
        logger: The logger to use.
        level: The log level.
        message: The log message.
        **fields: Extra fields emitted by ``StructuredFormatter``.
    """
    logger.log(level, message, extra=fields)

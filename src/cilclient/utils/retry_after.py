r"""Parsing of the ``Retry-After`` header (RFC 7231)."""

from __future__ import annotations

__all__ = ["parse_retry_after"]

import logging
from contextlib import suppress
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(value: str | None) -> float | None:
    """Return the delay in seconds requested by a ``Retry-After``
    header.

    Both the delay-seconds form (``"120"``) and the HTTP-date form
    (``"Wed, 21 Oct 2015 07:28:00 GMT"``) are accepted. Dates in the past
    yield ``0.0``.

    Args:
        value: The header value, or ``None`` if absent.

    Returns:
        The delay in seconds, or ``None`` if the header is absent or
        cannot be parsed.

    Example:
        ```pycon
        >>> from cilclient.utils.retry_after import parse_retry_after
        >>> parse_retry_after("15")
        15.0
        >>> parse_retry_after(None) is None
        True
        >>> parse_retry_after("soon") is None
        True

        ```
    """
    if value is None:
        return None

    with suppress(ValueError):
        return max(0.0, float(value))

    try:
        retry_date: datetime = parsedate_to_datetime(value)
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Ignoring unparsable Retry-After header: {value!r}")
        return None
    if retry_date.tzinfo is None:
        retry_date = retry_date.replace(tzinfo=timezone.utc)
    return max(0.0, (retry_date - datetime.now(timezone.utc)).total_seconds())

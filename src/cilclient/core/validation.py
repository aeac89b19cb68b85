r"""Validation helpers for client and retry settings."""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate a timeout value.

    Args:
        timeout: Seconds to wait for the server, or an ``httpx.Timeout``.

    Raises:
        ValueError: If ``timeout`` is a number <= 0.

    Example:
        ```pycon
        >>> from cilclient.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_retries: int,
    backoff_factor: float = 0.0,
    jitter_factor: float = 0.0,
    max_wait_time: float | None = None,
) -> None:
    """Validate retry settings.

    Args:
        max_retries: Maximum number of re-executions. Must be >= 0.
        backoff_factor: Base delay of the default exponential backoff.
            Must be >= 0.
        jitter_factor: Random jitter factor. Must be >= 0.
        max_wait_time: Optional cap on a single backoff delay. Must be
            > 0 if provided.

    Raises:
        ValueError: If one of the values is out of range.

    Example:
        ```pycon
        >>> from cilclient.core.validation import validate_retry_params
        >>> validate_retry_params(max_retries=3, backoff_factor=0.3)
        >>> validate_retry_params(max_retries=-1)
        Traceback (most recent call last):
        ...
        ValueError: max_retries must be >= 0, got -1

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if backoff_factor < 0:
        msg = f"backoff_factor must be >= 0, got {backoff_factor}"
        raise ValueError(msg)
    if jitter_factor < 0:
        msg = f"jitter_factor must be >= 0, got {jitter_factor}"
        raise ValueError(msg)
    if max_wait_time is not None and max_wait_time <= 0:
        msg = f"max_wait_time must be > 0, got {max_wait_time}"
        raise ValueError(msg)

r"""Delay calculation between retried calls."""

from __future__ import annotations

__all__ = ["calculate_sleep_time"]

import logging
import random
from typing import TYPE_CHECKING

from cilclient.backoff.exponential import ExponentialBackoff
from cilclient.utils.retry_after import parse_retry_after

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cilclient.backoff.base import BackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_sleep_time(
    attempt: int,
    jitter_factor: float,
    headers: Mapping[str, str] | None = None,
    backoff_strategy: BackoffStrategy | None = None,
    max_wait_time: float | None = None,
) -> float:
    """Calculate the delay before the next attempt.

    The delay is the ``Retry-After`` value of the failing reply when it
    has one, the backoff strategy's delay otherwise. It is then capped at
    ``max_wait_time`` and finally increased by
    ``random.uniform(0, jitter_factor) * delay``.

    Args:
        attempt: The number of the failed attempt (0-indexed).
        jitter_factor: Jitter factor, ``0`` disables jitter.
        headers: Headers of the failing reply, if any.
        backoff_strategy: The backoff strategy. Defaults to
            ``ExponentialBackoff()``.
        max_wait_time: Optional cap in seconds.

    Returns:
        The delay in seconds.

    Example:
        ```pycon
        >>> from cilclient.utils.sleep import calculate_sleep_time
        >>> calculate_sleep_time(attempt=1, jitter_factor=0.0)
        0.6
        >>> calculate_sleep_time(attempt=0, jitter_factor=0.0, headers={"Retry-After": "4"})
        4.0
        >>> calculate_sleep_time(attempt=6, jitter_factor=0.0, max_wait_time=2.0)
        2.0

        ```
    """
    retry_after = parse_retry_after(_retry_after_header(headers))
    if retry_after is not None:
        sleep_time = retry_after
        logger.debug(f"Using Retry-After header value: {sleep_time:.2f}s")
    else:
        if backoff_strategy is None:
            backoff_strategy = ExponentialBackoff()
        sleep_time = backoff_strategy.calculate(attempt)

    if max_wait_time is not None and sleep_time > max_wait_time:
        logger.debug(f"Capping sleep time from {sleep_time:.2f}s to {max_wait_time:.2f}s")
        sleep_time = max_wait_time

    if jitter_factor > 0:
        sleep_time += random.uniform(0, jitter_factor) * sleep_time  # noqa: S311
    logger.debug(f"Waiting {sleep_time:.2f}s before retry")
    return sleep_time


def _retry_after_header(headers: Mapping[str, str] | None) -> str | None:
    # Header names are case-insensitive and stored lowercased by httpx.
    for name, value in (headers or {}).items():
        if name.lower() == "retry-after":
            return value
    return None

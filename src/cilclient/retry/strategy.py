r"""Delay calculation of the retry loop."""

from __future__ import annotations

__all__ = ["RetryStrategy"]

from typing import TYPE_CHECKING

from cilclient.backoff import ExponentialBackoff
from cilclient.utils.sleep import calculate_sleep_time

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cilclient.backoff import BackoffStrategy


class RetryStrategy:
    """Compute the delay before each retry.

    Args:
        jitter_factor: Random jitter factor.
        backoff_strategy: Backoff strategy. Defaults to
            ``ExponentialBackoff()``.
        max_wait_time: Optional cap on a single delay.
    """

    def __init__(
        self,
        jitter_factor: float = 0.0,
        backoff_strategy: BackoffStrategy | None = None,
        max_wait_time: float | None = None,
    ) -> None:
        self.jitter_factor = jitter_factor
        self.backoff_strategy: BackoffStrategy = (
            backoff_strategy if backoff_strategy is not None else ExponentialBackoff()
        )
        self.max_wait_time = max_wait_time

    def calculate_delay(self, attempt: int, headers: Mapping[str, str] | None = None) -> float:
        """Return the delay in seconds after the failed ``attempt``.

        A ``Retry-After`` header in ``headers`` takes precedence over the
        backoff strategy.
        """
        return calculate_sleep_time(
            attempt=attempt,
            jitter_factor=self.jitter_factor,
            headers=headers,
            backoff_strategy=self.backoff_strategy,
            max_wait_time=self.max_wait_time,
        )

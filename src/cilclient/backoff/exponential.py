r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from cilclient.backoff.base import BackoffStrategy, check_delays


class ExponentialBackoff(BackoffStrategy):
    """Double the delay after every failed attempt.

    The delay is ``base_delay * 2 ** attempt``, capped at ``max_delay``
    when one is given. This is the strategy used when the client config
    does not name one.

    Args:
        base_delay: Delay before the first retry, in seconds.
        max_delay: Optional cap in seconds.

    Example:
        ```pycon
        >>> from cilclient.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5)
        >>> [backoff.calculate(attempt) for attempt in range(3)]
        [0.5, 1.0, 2.0]
        >>> ExponentialBackoff(base_delay=1.0, max_delay=3.0).calculate(5)
        3.0

        ```
    """

    def __init__(self, base_delay: float = 0.3, max_delay: float | None = None) -> None:
        check_delays(base_delay, max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def calculate(self, attempt: int) -> float:
        delay = self.base_delay * (2**attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay

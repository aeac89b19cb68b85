r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from cilclient.backoff.base import BackoffStrategy, check_delays


class ConstantBackoff(BackoffStrategy):
    """Wait the same delay before every retry.

    Args:
        delay: The delay in seconds.

    Example:
        ```pycon
        >>> from cilclient.backoff import ConstantBackoff
        >>> ConstantBackoff(delay=2.0).calculate(7)
        2.0

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        check_delays(delay, None)
        self.delay = delay

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay

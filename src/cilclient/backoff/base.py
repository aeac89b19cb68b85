r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BackoffStrategy"]

from abc import ABC, abstractmethod


class BackoffStrategy(ABC):
    """Compute how long to wait before re-executing a failed call."""

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Return the delay in seconds before the next attempt.

        Args:
            attempt: The number of the failed attempt (0-indexed), so
                ``attempt=0`` is the delay before the first retry.

        Returns:
            The delay in seconds.
        """


def check_delays(base_delay: float, max_delay: float | None) -> None:
    if base_delay < 0:
        msg = f"base_delay must be non-negative, got {base_delay}"
        raise ValueError(msg)
    if max_delay is not None and max_delay <= 0:
        msg = f"max_delay must be positive if specified, got {max_delay}"
        raise ValueError(msg)

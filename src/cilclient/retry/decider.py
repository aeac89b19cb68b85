r"""Decision logic of the retry loop."""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decide whether a failed attempt is re-executed.

    Only calls that opted into retries are re-executed, and only when
    the failure carries a status code of ``status_forcelist``. Failures
    without status code (connection errors, timeouts) are never
    retried.

    Args:
        enabled: Whether the call opted into retries.
        status_forcelist: Retryable status codes.

    Example:
        ```pycon
        >>> from cilclient.retry import RetryDecider
        >>> decider = RetryDecider(enabled=True, status_forcelist=(503,))
        >>> decider.should_retry(503, attempt=0, max_retries=2)
        (True, 'status 503')
        >>> decider.should_retry(None, attempt=0, max_retries=2)
        (False, 'no status code')

        ```
    """

    def __init__(self, enabled: bool, status_forcelist: tuple[int, ...]) -> None:
        self.enabled = enabled
        self.status_forcelist = status_forcelist

    def is_retryable_status(self, status_code: int | None) -> bool:
        return status_code is not None and status_code in self.status_forcelist

    def should_retry(self, status_code: int | None, attempt: int, max_retries: int) -> tuple[bool, str]:
        """Return whether to retry, with the reason.

        Args:
            status_code: The status code of the failure, if any.
            attempt: The failed attempt (0-indexed).
            max_retries: The retry bound of the call.

        Returns:
            Tuple of (should_retry, reason).
        """
        if not self.enabled:
            return (False, "retries not requested")
        if status_code is None:
            return (False, "no status code")
        if not self.is_retryable_status(status_code):
            return (False, f"status {status_code} is not retryable")
        if attempt >= max_retries:
            return (False, "max retries exhausted")
        return (True, f"status {status_code}")

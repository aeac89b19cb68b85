r"""Observability hooks of the call lifecycle.

A client accepts four optional callbacks through ``ClientConfig``:

- on_request: called before each attempt is sent
- on_retry: called before sleeping ahead of a retry
- on_success: called once when a call delivers a result
- on_failure: called once when a call delivers an error

Example:
    ```pycon
    >>> from cilclient.callbacks import RetryInfo
    >>> from cilclient.core.config import ClientConfig
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"retry {info.attempt}/{info.max_retries + 1} in {info.wait_time}s")
    ...
    >>> config = ClientConfig(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = ["FailureInfo", "RequestInfo", "ResponseInfo", "RetryInfo"]

from dataclasses import dataclass


@dataclass
class RequestInfo:
    """Information passed to ``on_request``.

    Attributes:
        method: The HTTP method.
        url: The final URL of the attempt, query string included.
        attempt: The attempt number (1-indexed).
        max_retries: The retry bound of the call.
    """

    method: str
    url: str
    attempt: int
    max_retries: int


@dataclass
class RetryInfo:
    """Information passed to ``on_retry``.

    Attributes:
        method: The HTTP method.
        url: The URL of the failed attempt.
        attempt: The number of the upcoming attempt (1-indexed).
        max_retries: The retry bound of the call.
        wait_time: The delay in seconds before the upcoming attempt.
        status_code: The status code that triggered the retry.
    """

    method: str
    url: str
    attempt: int
    max_retries: int
    wait_time: float
    status_code: int | None


@dataclass
class ResponseInfo:
    """Information passed to ``on_success``.

    Attributes:
        method: The HTTP method.
        url: The URL of the successful attempt.
        attempt: The number of the successful attempt (1-indexed).
        max_retries: The retry bound of the call.
        status_code: The status code of the reply.
        total_time: Seconds spent on the call, retries included.
    """

    method: str
    url: str
    attempt: int
    max_retries: int
    status_code: int
    total_time: float


@dataclass
class FailureInfo:
    """Information passed to ``on_failure``.

    Attributes:
        method: The HTTP method.
        url: The URL of the last attempt, or the logical path when the
            call failed before a URL was built.
        attempt: The number of the last attempt (1-indexed).
        max_retries: The retry bound of the call.
        error: The error delivered to the caller.
        status_code: The status code carried by the error, if any.
        total_time: Seconds spent on the call, retries included.
    """

    method: str
    url: str
    attempt: int
    max_retries: int
    error: Exception
    status_code: int | None
    total_time: float

r"""Invocation of the observability callbacks."""

from __future__ import annotations

__all__ = ["CallbackManager"]

import time
from typing import TYPE_CHECKING

from cilclient.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo

if TYPE_CHECKING:
    from cilclient.retry.config import CallbackConfig


class CallbackManager:
    """Turn lifecycle events into callback invocations.

    Attempt numbers are 0-indexed internally and 1-indexed in the
    information passed to the callbacks.

    Args:
        callbacks: The configured callbacks.
    """

    def __init__(self, callbacks: CallbackConfig) -> None:
        self.callbacks = callbacks

    def on_request(self, method: str, url: str, attempt: int, max_retries: int) -> None:
        if self.callbacks.on_request:
            self.callbacks.on_request(
                RequestInfo(method=method, url=url, attempt=attempt + 1, max_retries=max_retries)
            )

    def on_retry(
        self,
        method: str,
        url: str,
        attempt: int,
        max_retries: int,
        wait_time: float,
        status_code: int | None,
    ) -> None:
        if self.callbacks.on_retry:
            self.callbacks.on_retry(
                RetryInfo(
                    method=method,
                    url=url,
                    attempt=attempt + 2,
                    max_retries=max_retries,
                    wait_time=wait_time,
                    status_code=status_code,
                )
            )

    def on_success(
        self,
        method: str,
        url: str,
        attempt: int,
        max_retries: int,
        status_code: int,
        start_time: float,
    ) -> None:
        if self.callbacks.on_success:
            self.callbacks.on_success(
                ResponseInfo(
                    method=method,
                    url=url,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    status_code=status_code,
                    total_time=time.time() - start_time,
                )
            )

    def on_failure(
        self,
        method: str,
        url: str,
        attempt: int,
        max_retries: int,
        error: Exception,
        start_time: float,
    ) -> None:
        if self.callbacks.on_failure:
            self.callbacks.on_failure(
                FailureInfo(
                    method=method,
                    url=url,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    error=error,
                    status_code=getattr(error, "status_code", None),
                    total_time=time.time() - start_time,
                )
            )

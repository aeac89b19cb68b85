r"""Retry loop around the build, send and complete pipeline.

This module provides the ``RetryExecutor`` class. One logical call runs
through the pipeline once; when the call opted into retries and the
reply status is listed in ``status_forcelist``, the whole pipeline is
re-run from the original parameters after a backoff delay.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from cilclient.exceptions import CilError, TransportError
from cilclient.retry.decider import RetryDecider
from cilclient.retry.manager import CallbackManager
from cilclient.retry.strategy import RetryStrategy
from cilclient.utils.exceptions import normalize_transport_error

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from cilclient.http.executor import HttpExecutor
    from cilclient.http.response import CilResponse
    from cilclient.request.descriptor import RequestDescriptor
    from cilclient.retry.config import CallbackConfig, RetryConfig

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Execute one logical call with bounded retries.

    The executor orchestrates the following components:
    - RetryStrategy: computes the delay between attempts
    - RetryDecider: decides whether a failed attempt is re-executed
    - CallbackManager: invokes the lifecycle callbacks

    Failures raised while building the request (missing path parameter,
    bearer token exchange) are never retried. Connection failures have
    no status code and are never retried either; they surface as a
    normalized ``TransportError``. A reply with a retryable status that
    is not retried is classified like any other reply.

    Args:
        retry_config: Retry settings of the call.
        callback_config: Lifecycle callbacks of the call.

    Example:
        ```pycon
        >>> from cilclient.retry import CallbackConfig, RetryConfig, RetryExecutor
        >>> executor = RetryExecutor(
        ...     RetryConfig(enabled=True, max_retries=2, status_forcelist=(503,)),
        ...     CallbackConfig(),
        ... )
        >>> executor.config.max_retries
        2

        ```
    """

    def __init__(self, retry_config: RetryConfig, callback_config: CallbackConfig) -> None:
        self.config = retry_config
        self.strategy: RetryStrategy = RetryStrategy(
            retry_config.jitter_factor,
            retry_config.backoff_strategy,
            retry_config.max_wait_time,
        )
        self.decider: RetryDecider = RetryDecider(retry_config.enabled, retry_config.status_forcelist)
        self.callbacks: CallbackManager = CallbackManager(callback_config)

    async def _wait(
        self,
        descriptor: RequestDescriptor,
        attempt: int,
        status_code: int | None,
        headers: dict[str, str] | None,
    ) -> None:
        sleep_time = self.strategy.calculate_delay(attempt, headers)
        self.callbacks.on_retry(
            descriptor.method,
            descriptor.url,
            attempt,
            self.config.max_retries,
            sleep_time,
            status_code,
        )
        logger.debug(
            f"{descriptor.method} request to {descriptor.url} failed with status {status_code} "
            f"(attempt {attempt + 1}/{self.config.max_retries + 1}), "
            f"retrying in {sleep_time:.2f}s"
        )
        await asyncio.sleep(sleep_time)

    async def execute(
        self,
        method: str,
        path: str,
        build: Callable[[], Awaitable[RequestDescriptor]],
        http: HttpExecutor,
    ) -> CilResponse:
        """Run the pipeline until it succeeds or fails for good.

        Args:
            method: The HTTP method. Used for callbacks and logging.
            path: The logical path. Used until a URL is known.
            build: Coroutine function building a fresh, authenticated
                descriptor. Called once per attempt.
            http: The executor sending the descriptors.

        Returns:
            The successful result.

        Raises:
            MissingParameterError: If a path placeholder has no parameter.
            AuthAcquisitionError: If the bearer token could not be
                obtained.
            TransportError: If the connection failed.
            DecodeError: If the final reply body is not valid JSON.
            ApiError: If the final reply carries an error payload.
        """
        start_time = time.time()
        max_retries = self.config.max_retries
        url = path
        for attempt in range(max_retries + 1):
            try:
                descriptor = await build()
                url = descriptor.url
                self.callbacks.on_request(method, url, attempt, max_retries)
                exchange = await http.send(descriptor)
            except TransportError as exc:
                error = normalize_transport_error(exc, method=method, url=url)
                self.callbacks.on_failure(method, url, attempt, max_retries, error, start_time)
                raise error from exc.__cause__
            except CilError as exc:
                self.callbacks.on_failure(method, url, attempt, max_retries, exc, start_time)
                raise

            should_retry, reason = self.decider.should_retry(exchange.status_code, attempt, max_retries)
            if should_retry:
                await self._wait(descriptor, attempt, exchange.status_code, exchange.headers)
                continue
            if self.decider.is_retryable_status(exchange.status_code):
                logger.debug(f"{method} request to {url}: not retrying ({reason})")

            try:
                result = http.complete(exchange)
            except CilError as exc:
                self.callbacks.on_failure(method, url, attempt, max_retries, exc, start_time)
                raise
            self.callbacks.on_success(method, url, attempt, max_retries, result.status_code, start_time)
            return result

        # The last attempt never retries, so the loop always returns or raises.
        msg = "retry loop exited without a result"  # pragma: no cover
        raise RuntimeError(msg)  # pragma: no cover

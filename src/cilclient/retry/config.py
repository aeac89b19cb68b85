r"""Configuration dataclasses of the retry loop."""

from __future__ import annotations

__all__ = ["CallbackConfig", "RetryConfig"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cilclient.backoff import ExponentialBackoff

if TYPE_CHECKING:
    from collections.abc import Callable

    from cilclient.backoff import BackoffStrategy
    from cilclient.core.config import ClientConfig
    from cilclient.request.params import CilOptions


@dataclass
class RetryConfig:
    """Retry settings of one logical call.

    Attributes:
        enabled: Whether the call opted into retries.
        max_retries: Maximum number of re-executions.
        status_forcelist: Status codes treated as retryable transport
            failures.
        jitter_factor: Random jitter factor.
        backoff_strategy: Strategy computing the delay between attempts.
        max_wait_time: Optional cap on a single delay.
    """

    enabled: bool
    max_retries: int
    status_forcelist: tuple[int, ...]
    jitter_factor: float = 0.0
    backoff_strategy: BackoffStrategy | None = None
    max_wait_time: float | None = None

    @classmethod
    def for_call(cls, config: ClientConfig, options: CilOptions) -> RetryConfig:
        """Combine the client configuration with the call options.

        Example:
            ```pycon
            >>> from cilclient.core.config import ClientConfig
            >>> from cilclient.request.params import CilOptions
            >>> from cilclient.retry import RetryConfig
            >>> retry_config = RetryConfig.for_call(
            ...     ClientConfig(max_retries=3), CilOptions(retry=True, max_retries=1)
            ... )
            >>> retry_config.enabled, retry_config.max_retries
            (True, 1)

            ```
        """
        config = config.merge(max_retries=options.max_retries)
        return cls(
            enabled=options.retry,
            max_retries=config.max_retries,
            status_forcelist=tuple(config.status_forcelist),
            jitter_factor=config.jitter_factor,
            backoff_strategy=config.backoff_strategy or ExponentialBackoff(config.backoff_factor),
            max_wait_time=config.max_wait_time,
        )


@dataclass
class CallbackConfig:
    """Observability callbacks of one logical call.

    Attributes:
        on_request: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each retry.
        on_success: Optional callback invoked when the call succeeds.
        on_failure: Optional callback invoked when the call fails.
    """

    on_request: Callable | None = None
    on_retry: Callable | None = None
    on_success: Callable | None = None
    on_failure: Callable | None = None

    @classmethod
    def from_client_config(cls, config: ClientConfig) -> CallbackConfig:
        return cls(
            on_request=config.on_request,
            on_retry=config.on_retry,
            on_success=config.on_success,
            on_failure=config.on_failure,
        )

r"""Credentials and client configuration.

This module holds the two configuration objects of the client: the
immutable ``Credentials`` selecting the authentication mode, and the
``ClientConfig`` dataclass driving the retry policy and the
observability callbacks.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "ClientConfig",
    "Credentials",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from cilclient.core.validation import validate_retry_params

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from cilclient.backoff import BackoffStrategy
    from cilclient.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo


# Default timeout in seconds for a single HTTP exchange
DEFAULT_TIMEOUT = 10.0

# Default maximum number of re-executions of a retryable call
# Total attempts = max_retries + 1
DEFAULT_MAX_RETRIES = 3

# Base delay of the default exponential backoff
# 1st retry waits 0.3s, 2nd waits 0.6s, 3rd waits 1.2s
DEFAULT_BACKOFF_FACTOR = 0.3

# Status codes treated as transient transport failures
# 429: Too Many Requests
# 500: Internal Server Error
# 502: Bad Gateway
# 503: Service Unavailable
# 504: Gateway Timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


@dataclass(frozen=True)
class Credentials:
    """Authentication settings of a client.

    Exactly one mode is active: request signing (the default) or
    app-only bearer authentication when ``app_only_auth`` is ``True``.

    Args:
        consumer_key: The application key.
        consumer_secret: The application secret.
        access_token: The user access token (signing mode only).
        access_token_secret: The user access token secret (signing mode
            only).
        app_only_auth: Whether to authenticate with a bearer token
            obtained from the consumer key and secret.

    Raises:
        ValueError: If a value required by the selected mode is missing.

    Example:
        ```pycon
        >>> from cilclient.core.config import Credentials
        >>> creds = Credentials(consumer_key="ck", consumer_secret="cs", app_only_auth=True)
        >>> creds.app_only_auth
        True
        >>> Credentials(consumer_key="ck", consumer_secret="cs")
        Traceback (most recent call last):
        ...
        ValueError: access_token is required for signing authentication

        ```
    """

    consumer_key: str
    consumer_secret: str = field(repr=False)
    access_token: str | None = None
    access_token_secret: str | None = field(default=None, repr=False)
    app_only_auth: bool = False

    def __post_init__(self) -> None:
        required = ["consumer_key", "consumer_secret"]
        if not self.app_only_auth:
            required += ["access_token", "access_token_secret"]
        mode = "app-only" if self.app_only_auth else "signing"
        for name in required:
            if not getattr(self, name):
                msg = f"{name} is required for {mode} authentication"
                raise ValueError(msg)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> Credentials:
        """Create credentials from a plain configuration mapping.

        Args:
            config: A mapping with the keys ``consumer_key``,
                ``consumer_secret``, ``access_token``,
                ``access_token_secret`` and ``app_only_auth``.

        Returns:
            The credentials.

        Example:
            ```pycon
            >>> from cilclient.core.config import Credentials
            >>> creds = Credentials.from_mapping(
            ...     {
            ...         "consumer_key": "ck",
            ...         "consumer_secret": "cs",
            ...         "access_token": "at",
            ...         "access_token_secret": "ats",
            ...     }
            ... )
            >>> creds.app_only_auth
            False

            ```
        """
        return cls(
            consumer_key=config.get("consumer_key", ""),
            consumer_secret=config.get("consumer_secret", ""),
            access_token=config.get("access_token"),
            access_token_secret=config.get("access_token_secret"),
            app_only_auth=bool(config.get("app_only_auth", False)),
        )


@dataclass
class ClientConfig:
    """Retry and observability configuration of a client.

    Args:
        max_retries: Maximum number of re-executions of a call that
            opted into retries. Must be >= 0.
        backoff_factor: Base delay of the default exponential backoff.
            Must be >= 0.
        status_forcelist: Status codes treated as retryable transport
            failures.
        jitter_factor: Factor for random jitter added to each delay.
            Must be >= 0.
        backoff_strategy: Optional custom backoff strategy. Overrides
            ``backoff_factor``.
        max_wait_time: Optional cap on a single delay in seconds.
        on_request: Optional callback called before each attempt.
        on_retry: Optional callback called before each retry sleep.
        on_success: Optional callback called when a call succeeds.
        on_failure: Optional callback called when a call fails.

    Example:
        ```pycon
        >>> from cilclient.core.config import ClientConfig
        >>> config = ClientConfig(max_retries=5)
        >>> config.merge(max_retries=1).max_retries
        1
        >>> config.max_retries
        5

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    status_forcelist: tuple[int, ...] = field(default_factory=lambda: RETRY_STATUS_CODES)
    jitter_factor: float = 0.0
    backoff_strategy: BackoffStrategy | None = None
    max_wait_time: float | None = None
    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[ResponseInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    def __post_init__(self) -> None:
        validate_retry_params(
            max_retries=self.max_retries,
            backoff_factor=self.backoff_factor,
            jitter_factor=self.jitter_factor,
            max_wait_time=self.max_wait_time,
        )

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a copy with the non-``None`` overrides applied.

        Args:
            **overrides: Fields to override.

        Returns:
            A new ``ClientConfig``.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

r"""Configuration and validation shared by the client components."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "ClientConfig",
    "Credentials",
    "validate_retry_params",
    "validate_timeout",
]

from cilclient.core.config import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    ClientConfig,
    Credentials,
)
from cilclient.core.validation import validate_retry_params, validate_timeout

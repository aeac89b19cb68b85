r"""Bounded retry of logical calls.

Components:
    - RetryConfig, CallbackConfig: settings of one call
    - RetryStrategy: delay calculation
    - RetryDecider: retry decisions
    - CallbackManager: callback invocation
    - RetryExecutor: the retry loop
"""

from __future__ import annotations

__all__ = [
    "CallbackConfig",
    "CallbackManager",
    "RetryConfig",
    "RetryDecider",
    "RetryExecutor",
    "RetryStrategy",
]

from cilclient.retry.config import CallbackConfig, RetryConfig
from cilclient.retry.decider import RetryDecider
from cilclient.retry.executor import RetryExecutor
from cilclient.retry.manager import CallbackManager
from cilclient.retry.strategy import RetryStrategy

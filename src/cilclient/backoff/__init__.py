r"""Backoff strategies for the delay between retried calls."""

from __future__ import annotations

__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff"]

from cilclient.backoff.base import BackoffStrategy
from cilclient.backoff.constant import ConstantBackoff
from cilclient.backoff.exponential import ExponentialBackoff

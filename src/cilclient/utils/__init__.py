r"""Utility functions of the request pipeline.

This package provides the error factory functions, the delay
calculation between retried calls, Retry-After header parsing, and the
structured logging helpers.
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "attach_body_info",
    "calculate_sleep_time",
    "call_scope",
    "log_structured",
    "make_acquisition_error",
    "make_api_error",
    "make_decode_error",
    "make_error",
    "normalize_transport_error",
    "parse_retry_after",
]

from cilclient.utils.exceptions import (
    attach_body_info,
    make_acquisition_error,
    make_api_error,
    make_decode_error,
    make_error,
    normalize_transport_error,
)
from cilclient.utils.retry_after import parse_retry_after
from cilclient.utils.sleep import calculate_sleep_time
from cilclient.utils.structured_logging import StructuredFormatter, call_scope, log_structured

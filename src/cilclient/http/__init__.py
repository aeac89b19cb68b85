r"""Execution of requests and classification of replies."""

from __future__ import annotations

__all__ = [
    "CilResponse",
    "ErrorEnvelope",
    "Exchange",
    "ExchangeState",
    "ExchangeStateError",
    "HttpExecutor",
    "SuccessEnvelope",
    "parse_envelope",
]

from cilclient.http.exchange import Exchange, ExchangeState, ExchangeStateError
from cilclient.http.executor import HttpExecutor
from cilclient.http.response import CilResponse, ErrorEnvelope, SuccessEnvelope, parse_envelope

r"""Result types and the reply envelope of the service."""

from __future__ import annotations

__all__ = ["CilResponse", "ErrorEnvelope", "SuccessEnvelope", "parse_envelope"]

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class CilResponse:
    """Successful result of a call.

    Attributes:
        data: The decoded JSON body.
        status_code: The status code of the reply.
        headers: The reply headers.
        url: The URL of the request that produced the reply.
    """

    data: Any
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""


@dataclass(frozen=True)
class SuccessEnvelope:
    """A decoded body that carries a result."""

    data: Any


@dataclass(frozen=True)
class ErrorEnvelope:
    """A decoded body that carries an ``error`` or ``errors`` field."""

    data: dict[str, Any]


Envelope = Union[SuccessEnvelope, ErrorEnvelope]


def parse_envelope(data: Any) -> Envelope:
    """Classify a decoded reply body.

    An object with a truthy ``error`` or ``errors`` field is an error
    reply; anything else is a result.

    Example:
        ```pycon
        >>> from cilclient.http.response import parse_envelope
        >>> parse_envelope({"errors": [{"code": 34, "message": "Not found"}]})
        ErrorEnvelope(data={'errors': [{'code': 34, 'message': 'Not found'}]})
        >>> parse_envelope({"id": 1, "errors": []})
        SuccessEnvelope(data={'id': 1, 'errors': []})
        >>> parse_envelope([1, 2])
        SuccessEnvelope(data=[1, 2])

        ```
    """
    if isinstance(data, dict) and (data.get("error") or data.get("errors")):
        return ErrorEnvelope(data)
    return SuccessEnvelope(data)

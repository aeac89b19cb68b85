r"""Factory functions building the normalized error shape.

Each failure stratum has one constructor here, so that every error the
client hands out is built in exactly one place and never touched again
afterwards.
"""

from __future__ import annotations

__all__ = [
    "attach_body_info",
    "make_acquisition_error",
    "make_api_error",
    "make_decode_error",
    "make_error",
    "normalize_transport_error",
]

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from cilclient.exceptions import (
    ApiError,
    AuthAcquisitionError,
    CilError,
    DecodeError,
    TransportError,
)

if TYPE_CHECKING:
    import httpx

    from cilclient.http.response import CilResponse

logger: logging.Logger = logging.getLogger(__name__)

E = TypeVar("E", bound=CilError)


def make_error(
    error_cls: type[E],
    message: str,
    *,
    status_code: int | None = None,
) -> E:
    """Create an error with empty code, sub-errors and body.

    Args:
        error_cls: The ``CilError`` subclass to instantiate.
        message: The error message.
        status_code: Optional HTTP status code.

    Returns:
        The new error instance.

    Example:
        ```pycon
        >>> from cilclient.exceptions import ApiError
        >>> from cilclient.utils.exceptions import make_error
        >>> error = make_error(ApiError, "API error", status_code=400)
        >>> error.status_code, error.code, error.all_errors, error.raw_body
        (400, None, [], None)

        ```
    """
    return error_cls(message, status_code=status_code)


def attach_body_info(error: CilError, body: Any) -> CilError:
    """Copy the error details found in a reply body onto ``error``.

    A body with an ``error`` field contributes its value as the message
    and the whole body as the single sub-error. A body with a non-empty
    ``errors`` list contributes the first entry's message and code and
    every entry as sub-errors. The body itself is always kept as
    ``raw_body``.

    Args:
        error: The error being built.
        body: The decoded reply body, or ``None``.

    Returns:
        The same error, for chaining.
    """
    error.raw_body = body
    if not isinstance(body, dict):
        return error
    if body.get("error"):
        error.message = str(body["error"])
        error.args = (error.message,)
        error.all_errors = [*error.all_errors, body]
        return error
    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict):
            error.message = str(first.get("message", error.message))
            error.args = (error.message,)
            error.code = first.get("code")
        error.all_errors = [
            *error.all_errors,
            *(item if isinstance(item, dict) else {"message": str(item)} for item in errors),
        ]
    elif errors:
        # A scalar ``errors`` value still marks the reply as failed.
        error.message = str(errors)
        error.args = (error.message,)
        error.all_errors = [*error.all_errors, {"message": str(errors)}]
    return error


def make_decode_error(
    exc: Exception,
    *,
    status_code: int | None,
    text: str,
    response: CilResponse | None = None,
) -> DecodeError:
    """Create the error for a reply body that is not valid JSON.

    Args:
        exc: The parse failure.
        status_code: The status code of the reply.
        text: The undecoded body.
        response: Optional metadata of the reply.

    Returns:
        The ``DecodeError``.
    """
    error = make_error(
        DecodeError,
        "JSON decode error: HTTP response body was not valid JSON",
        status_code=status_code,
    )
    error.all_errors = [{"error": str(exc)}]
    error.raw_body = text
    error.response = response
    return error


def make_api_error(
    body: Any,
    *,
    status_code: int | None,
    response: CilResponse | None = None,
) -> ApiError:
    """Create the error for a reply carrying an error payload.

    Args:
        body: The decoded reply body.
        status_code: The status code of the reply.
        response: Optional metadata of the reply, kept so callers can
            read headers such as the rate-limit ones.

    Returns:
        The ``ApiError`` with the body details attached.
    """
    error = make_error(ApiError, "API Error", status_code=status_code)
    error.response = response
    attach_body_info(error, body)
    return error


def normalize_transport_error(
    exc: BaseException,
    *,
    method: str,
    url: str,
) -> TransportError:
    """Create the caller-facing error for a socket-level failure.

    The status code, code, sub-errors and body are cleared: a transport
    failure has no reply to describe.

    Args:
        exc: The underlying failure.
        method: The HTTP method of the request.
        url: The requested URL.

    Returns:
        The normalized ``TransportError``.
    """
    if isinstance(exc, TransportError):
        message = exc.message
    else:
        message = f"{method} request to {url} failed: {type(exc).__name__}: {exc}"
    return make_error(TransportError, message)


def make_acquisition_error(
    message: str,
    *,
    response: httpx.Response | None = None,
) -> AuthAcquisitionError:
    """Create the error for a failed bearer token exchange.

    Args:
        message: The error message.
        response: The token endpoint reply, if one was received.

    Returns:
        The ``AuthAcquisitionError``.
    """
    error = make_error(
        AuthAcquisitionError,
        message,
        status_code=response.status_code if response is not None else None,
    )
    if response is None:
        return error
    try:
        body: Any = response.json()
    except ValueError:
        error.raw_body = response.text
    else:
        attach_body_info(error, body)
        if error.message != message:
            error.message = f"{message}: {error.message}"
            error.args = (error.message,)
    logger.debug(f"Token exchange failed with status {error.status_code}")
    return error

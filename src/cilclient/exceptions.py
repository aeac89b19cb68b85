r"""Exception types shared by every failure path of the client.

All failures reach the caller as a ``CilError`` subclass. Every instance
carries the same normalized fields (message, status code, code, the list
of sub-errors reported by the service, and the raw body) regardless of
the stratum the failure came from.
"""

from __future__ import annotations

__all__ = [
    "ApiError",
    "AuthAcquisitionError",
    "CilError",
    "DecodeError",
    "MissingParameterError",
    "TransportError",
]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cilclient.http.response import CilResponse


class CilError(Exception):
    """Base class of every error surfaced by the client.

    Args:
        message: Human readable description of the failure.
        status_code: The HTTP status code of the reply, if a reply was
            received and the stratum keeps it.
        code: The service-specific error code, if the service sent one.
        all_errors: Every sub-error record attached to the failure, in
            the order the service reported them.
        raw_body: The reply body (decoded JSON when available, text
            otherwise), or ``None``.
        response: The reply metadata when a reply was received, or
            ``None``.

    Example:
        ```pycon
        >>> from cilclient.exceptions import CilError
        >>> error = CilError("boom", status_code=500)
        >>> error.message
        'boom'
        >>> error.status_code
        500
        >>> error.all_errors
        []

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: Any = None,
        all_errors: list[dict[str, Any]] | None = None,
        raw_body: Any = None,
        response: CilResponse | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.all_errors: list[dict[str, Any]] = list(all_errors) if all_errors else []
        self.raw_body = raw_body
        self.response = response

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(message={self.message!r}, "
            f"status_code={self.status_code}, code={self.code!r})"
        )


class MissingParameterError(CilError):
    """Raised when a path placeholder has no matching parameter.

    The error is raised while the request is being built, so no network
    I/O has happened.
    """

    def __init__(self, name: str, path: str) -> None:
        super().__init__(
            f"Params object is missing a required parameter for this request: `{name}`"
            f" (path: {path})"
        )
        self.name = name
        self.path = path


class AuthAcquisitionError(CilError):
    """Raised when the bearer token exchange fails."""


class TransportError(CilError):
    """Raised for socket-level failures (connection, timeout, dropped
    body)."""


class DecodeError(CilError):
    """Raised when a reply body is not valid JSON."""


class ApiError(CilError):
    """Raised when the service replies with an ``error`` or ``errors``
    payload."""

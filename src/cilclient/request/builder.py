r"""Construction of complete request descriptors.

The builder chains parameter normalization, path substitution, endpoint
selection, query string or form attachment, and authentication. Every
failure raised here happens before any request is sent.
"""

from __future__ import annotations

__all__ = ["SUPPORTED_METHODS", "RequestBuilder", "make_query_string"]

import logging
from typing import TYPE_CHECKING, Any

from cilclient.endpoints import DEFAULT_ENDPOINTS
from cilclient.request.descriptor import RequestDescriptor
from cilclient.request.endpoint import BodyMode, resolve_endpoint
from cilclient.request.params import normalize_params
from cilclient.request.path import percent_encode, resolve_path

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from cilclient.auth.base import AuthProvider
    from cilclient.endpoints import Endpoints
    from cilclient.request.params import Params

logger: logging.Logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST")


def make_query_string(params: Mapping[str, Any]) -> str:
    """Serialize parameters as ``key=value`` pairs joined by ``&``.

    Keys and values are percent-encoded with the RFC 3986 unreserved
    set, in insertion order.

    Example:
        ```pycon
        >>> from cilclient.request.builder import make_query_string
        >>> make_query_string({"q": "a b&c", "count": 5, "trim": True})
        'q=a%20b%26c&count=5&trim=true'

        ```
    """
    return "&".join(f"{percent_encode(key)}={percent_encode(value)}" for key, value in params.items())


class RequestBuilder:
    """Build ready-to-send ``RequestDescriptor`` objects.

    Args:
        auth_provider: The authentication strategy of the client.
        endpoints: The endpoint table.
    """

    def __init__(self, auth_provider: AuthProvider, endpoints: Endpoints = DEFAULT_ENDPOINTS) -> None:
        self.auth_provider = auth_provider
        self.endpoints = endpoints

    def prepare(
        self,
        method: str,
        path: str,
        params: Params | None = None,
        *,
        streaming: bool = False,
        timeout: float | httpx.Timeout | None = None,
    ) -> RequestDescriptor:
        """Build an unauthenticated descriptor. No I/O is performed.

        Args:
            method: ``"GET"`` or ``"POST"``.
            path: The logical path, possibly with ``/:name`` placeholders.
            params: The caller parameters. Not mutated.
            streaming: Whether the request targets the streaming API.
            timeout: Optional per-call timeout.

        Returns:
            The descriptor, without credentials.

        Raises:
            MissingParameterError: If a path placeholder has no parameter.
            ValueError: If ``method`` is not supported.
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            msg = f"method must be one of {SUPPORTED_METHODS}, got {method!r}"
            raise ValueError(msg)

        resolved = resolve_path(path, normalize_params(params))
        selection = resolve_endpoint(streaming, resolved.path, self.endpoints)

        url = selection.url
        form: dict[str, Any] | None = None
        headers: dict[str, str] = {}
        if selection.body_mode is BodyMode.FORM:
            form = resolved.remaining
        else:
            headers["Content-Type"] = selection.content_type
            if resolved.remaining:
                url = f"{url}?{make_query_string(resolved.remaining)}"

        logger.debug(f"Prepared {method} {url} ({selection.body_mode.value} body)")
        return RequestDescriptor(
            method=method,
            url=url,
            headers=headers,
            body_mode=selection.body_mode,
            content_type=selection.content_type,
            form=form,
            timeout=timeout,
            path=resolved.path,
            streaming=streaming,
        )

    async def authorize(self, descriptor: RequestDescriptor, client: httpx.AsyncClient) -> RequestDescriptor:
        """Attach credentials to ``descriptor``.

        Raises:
            AuthAcquisitionError: If the bearer token could not be
                obtained.
        """
        await self.auth_provider.authorize(descriptor, client)
        return descriptor

    async def build(
        self,
        method: str,
        path: str,
        params: Params | None,
        client: httpx.AsyncClient,
        *,
        streaming: bool = False,
        timeout: float | httpx.Timeout | None = None,
    ) -> RequestDescriptor:
        """Build a complete, authenticated descriptor.

        Returns:
            The descriptor.

        Raises:
            MissingParameterError: If a path placeholder has no parameter.
            AuthAcquisitionError: If the bearer token could not be
                obtained.
        """
        descriptor = self.prepare(method, path, params, streaming=streaming, timeout=timeout)
        return await self.authorize(descriptor, client)

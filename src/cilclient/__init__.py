r"""cilclient - Request pipeline of an asynchronous API client.

This package builds, authenticates, sends and classifies calls to a web
API exposing REST, streaming and media-upload endpoints. Built on top of
the httpx library, it normalizes every failure into one error shape and
re-executes opted-in calls with bounded backoff.

Key Features:
    - Parameter normalization and ``/:name`` path placeholder substitution
    - Endpoint selection between REST, streaming and media-upload hosts
    - OAuth 1.0a request signing or app-only bearer authentication with
      single-flight token acquisition
    - One error family for transport, decode, API and parameter failures
    - Opt-in bounded retry with backoff, jitter and Retry-After support
    - Future and callback based call submission with deferred start
    - Callback/Event system and structured logging for observability

Example:
    ```pycon
    >>> import asyncio
    >>> from cilclient import AsyncCilClient, Credentials
    >>> async def main():  # doctest: +SKIP
    ...     credentials = Credentials(consumer_key="ck", consumer_secret="cs", app_only_auth=True)
    ...     async with AsyncCilClient(credentials) as client:
    ...         response = await client.get(
    ...             "statuses/user_timeline", {"screen_name": "x", "cil_options": {"retry": True}}
    ...         )
    ...     return response.data
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_ENDPOINTS",
    "ApiError",
    "AsyncCilClient",
    "AuthAcquisitionError",
    "CilError",
    "CilOptions",
    "CilResponse",
    "ClientConfig",
    "Credentials",
    "DecodeError",
    "Endpoints",
    "MissingParameterError",
    "TransportError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from cilclient.client import AsyncCilClient
from cilclient.core.config import ClientConfig, Credentials
from cilclient.endpoints import DEFAULT_ENDPOINTS, Endpoints
from cilclient.exceptions import (
    ApiError,
    AuthAcquisitionError,
    CilError,
    DecodeError,
    MissingParameterError,
    TransportError,
)
from cilclient.http.response import CilResponse
from cilclient.request.params import CilOptions

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"

r"""App-only authentication with a cached bearer token.

The token is obtained once through the client-credentials exchange and
kept by the provider until it is explicitly invalidated. Concurrent
requests issued while no token is cached share a single exchange.
"""

from __future__ import annotations

__all__ = ["AppOnlyAuthProvider"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from cilclient.auth.base import AuthProvider
from cilclient.utils.exceptions import make_acquisition_error

if TYPE_CHECKING:
    from cilclient.core.config import Credentials
    from cilclient.request.descriptor import RequestDescriptor

logger: logging.Logger = logging.getLogger(__name__)


class AppOnlyAuthProvider(AuthProvider):
    """Attach ``Authorization: Bearer <token>`` to every request.

    Token lifecycle: absent until the first successful exchange, then
    reused for every request until ``invalidate()`` is called. There is
    no expiry. A failed exchange leaves the cache empty, so the next
    request tries again.

    Args:
        credentials: App-only credentials (consumer key and secret).
        token_url: URL of the token exchange.
        token: Optional token to start with.

    Example:
        ```pycon
        >>> from cilclient.auth.app_only import AppOnlyAuthProvider
        >>> from cilclient.core.config import Credentials
        >>> provider = AppOnlyAuthProvider(
        ...     Credentials(consumer_key="ck", consumer_secret="cs", app_only_auth=True),
        ...     token_url="https://api.example.com/oauth2/token",
        ... )
        >>> provider.token is None
        True
        >>> provider.set_token("abc")
        >>> provider.token
        'abc'

        ```
    """

    def __init__(self, credentials: Credentials, token_url: str, *, token: str | None = None) -> None:
        self._credentials = credentials
        self._token_url = token_url
        self._token = token
        self._inflight: asyncio.Task[str] | None = None

    @property
    def token(self) -> str | None:
        """The cached bearer token, or ``None``."""
        return self._token

    def set_token(self, token: str) -> None:
        """Replace the cached bearer token."""
        self._token = token

    def invalidate(self) -> None:
        """Drop the cached bearer token.

        The next request performs a new exchange.
        """
        logger.debug("Bearer token invalidated")
        self._token = None

    async def authorize(self, descriptor: RequestDescriptor, client: httpx.AsyncClient) -> None:
        token = self._token
        if token is None:
            token = await self.acquire(client, timeout=descriptor.timeout)
        descriptor.headers["Authorization"] = f"Bearer {token}"

    async def acquire(
        self,
        client: httpx.AsyncClient,
        timeout: float | httpx.Timeout | None = None,
    ) -> str:
        """Return the cached token, running the exchange if needed.

        Callers arriving while an exchange is in flight wait for it
        instead of starting their own. Cancelling one waiter does not
        cancel the shared exchange.

        Args:
            client: The HTTP client used for the exchange.
            timeout: Optional timeout of the exchange.

        Returns:
            The bearer token.

        Raises:
            AuthAcquisitionError: If the exchange fails. Every waiter
                receives the same error.
        """
        if self._token is not None:
            return self._token
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._exchange(client, timeout))
            self._inflight.add_done_callback(_consume_result)
        return await asyncio.shield(self._inflight)

    async def _exchange(self, client: httpx.AsyncClient, timeout: float | httpx.Timeout | None) -> str:
        try:
            token = await self._request_token(client, timeout)
        finally:
            self._inflight = None
        self._token = token
        logger.debug("Bearer token acquired and cached")
        return token

    async def _request_token(self, client: httpx.AsyncClient, timeout: float | httpx.Timeout | None) -> str:
        logger.debug(f"Requesting bearer token from {self._token_url}")
        auth = httpx.BasicAuth(
            quote(self._credentials.consumer_key, safe=""),
            quote(self._credentials.consumer_secret, safe=""),
        )
        try:
            response = await client.post(
                self._token_url,
                data={"grant_type": "client_credentials"},
                auth=auth,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.RequestError as exc:
            msg = f"Bearer token request to {self._token_url} failed: {type(exc).__name__}: {exc}"
            raise make_acquisition_error(msg) from exc

        if response.status_code != 200:
            msg = f"Bearer token request failed with status {response.status_code}"
            raise make_acquisition_error(msg, response=response)
        try:
            body: Any = response.json()
        except ValueError as exc:
            msg = "Bearer token reply was not valid JSON"
            raise make_acquisition_error(msg, response=response) from exc
        if (
            not isinstance(body, dict)
            or str(body.get("token_type", "")).lower() != "bearer"
            or not body.get("access_token")
        ):
            msg = "Bearer token reply did not contain a bearer access token"
            raise make_acquisition_error(msg, response=response)
        return str(body["access_token"])


def _consume_result(task: asyncio.Task[str]) -> None:
    # Mark the exception as retrieved when every waiter went away.
    if not task.cancelled():
        task.exception()

r"""Asynchronous client of the API.

This module provides ``AsyncCilClient``, the caller-facing surface of
the request pipeline. The client owns (or wraps) an
``httpx.AsyncClient``, the authentication strategy selected by the
credentials, and the retry configuration shared by every call.
"""

from __future__ import annotations

__all__ = ["AsyncCilClient"]

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Any

import httpx

from cilclient.auth import AppOnlyAuthProvider, create_auth_provider
from cilclient.core.config import DEFAULT_TIMEOUT, ClientConfig
from cilclient.core.validation import validate_timeout
from cilclient.endpoints import DEFAULT_ENDPOINTS
from cilclient.exceptions import CilError, TransportError
from cilclient.http.executor import HttpExecutor
from cilclient.request.builder import RequestBuilder
from cilclient.request.params import extract_cil_options
from cilclient.retry import CallbackConfig, RetryConfig, RetryExecutor
from cilclient.utils.exceptions import make_error
from cilclient.utils.structured_logging import call_scope

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable
    from types import TracebackType
    from typing import Self

    from cilclient.core.config import Credentials
    from cilclient.endpoints import Endpoints
    from cilclient.http.response import CilResponse
    from cilclient.request.descriptor import RequestDescriptor
    from cilclient.request.params import Params

    ResultCallback = Callable[[CilError | None, Any, CilResponse | None], None]

logger: logging.Logger = logging.getLogger(__name__)


class AsyncCilClient:
    r"""Asynchronous context manager sending API calls.

    Every call runs through the same pipeline: parameter normalization,
    path substitution, endpoint selection, authentication, execution and
    classification of the reply. Calls whose parameters carry
    ``cil_options={"retry": True}`` are re-executed when the reply status
    is retryable, up to the configured bound.

    Args:
        credentials: The credentials. Their mode (signing or app-only)
            selects the authentication strategy.
        endpoints: The endpoint table.
        config: Optional retry and callback configuration. If ``None``,
            a default ``ClientConfig`` is used.
        timeout: Default timeout in seconds of the underlying client.
            Must be > 0.
        client: Optional ``httpx.AsyncClient`` to use. A supplied client
            is not closed when the context exits.

    Example:
        ```pycon
        >>> import asyncio
        >>> from cilclient import AsyncCilClient
        >>> from cilclient.core.config import Credentials
        >>> async def main():  # doctest: +SKIP
        ...     credentials = Credentials(
        ...         consumer_key="ck",
        ...         consumer_secret="cs",
        ...         access_token="at",
        ...         access_token_secret="ats",
        ...     )
        ...     async with AsyncCilClient(credentials) as client:
        ...         response = await client.get("statuses/show/:id", {"id": 123})
        ...     return response.data
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        endpoints: Endpoints = DEFAULT_ENDPOINTS,
        config: ClientConfig | None = None,
        timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._timeout = timeout
        self._config = config if config is not None else ClientConfig()
        self._endpoints = endpoints
        self._auth = create_auth_provider(credentials, endpoints)
        self._builder = RequestBuilder(self._auth, endpoints)

        self._client = client
        self._owns_client = client is None
        self._entered = False

    async def __aenter__(self) -> Self:
        """Enter the async context manager and create the underlying
        httpx client if none was supplied.

        Returns:
            The AsyncCilClient instance for making calls.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        self._entered = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
        self._entered = False

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure the client is available for use.

        Raises:
            RuntimeError: If the client is used outside of a context manager.
        """
        if not self._entered or self._client is None:
            msg = "AsyncCilClient must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._client

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def _call(
        self,
        method: str,
        path: str,
        params: Params | None,
        *,
        timeout: float | httpx.Timeout | None,
        prepared: RequestDescriptor | None = None,
    ) -> CilResponse:
        client = self._ensure_client()
        options = extract_cil_options(params)
        executor = RetryExecutor(
            RetryConfig.for_call(self._config, options),
            CallbackConfig.from_client_config(self._config),
        )
        pending = prepared

        async def build() -> RequestDescriptor:
            # Every retry starts again from the caller's parameters.
            nonlocal pending
            if pending is not None:
                descriptor, pending = pending, None
            else:
                descriptor = self._builder.prepare(method, path, params, timeout=timeout)
            return await self._builder.authorize(descriptor, client)

        with call_scope() as call_id:
            logger.debug(f"[{call_id}] {method.upper()} {path} (retry={options.retry})")
            return await executor.execute(method.upper(), path, build, HttpExecutor(client))

    async def request(
        self,
        method: str,
        path: str,
        params: Params | None = None,
        *,
        timeout: float | httpx.Timeout | None = None,
    ) -> CilResponse:
        r"""Send one API call.

        Args:
            method: ``"GET"`` or ``"POST"``.
            path: The logical path, e.g. ``"statuses/show/:id"``.
            params: The call parameters. Values used by path placeholders
                are consumed; the others become the query string or the
                form fields. Not mutated.
            timeout: Optional timeout overriding the client default.

        Returns:
            The decoded body with the reply metadata.

        Raises:
            RuntimeError: If called outside of a context manager.
            MissingParameterError: If a path placeholder has no parameter.
            AuthAcquisitionError: If the bearer token could not be
                obtained.
            TransportError: If the connection failed.
            DecodeError: If the reply body is not valid JSON.
            ApiError: If the reply carries an error payload.
        """
        return await self._call(method, path, params, timeout=timeout)

    async def get(
        self,
        path: str,
        params: Params | None = None,
        *,
        timeout: float | httpx.Timeout | None = None,
    ) -> CilResponse:
        r"""Send a GET call.

        Example:
            ```pycon
            >>> import asyncio
            >>> from cilclient import AsyncCilClient
            >>> async def main(credentials):  # doctest: +SKIP
            ...     async with AsyncCilClient(credentials) as client:
            ...         return await client.get("statuses/show/:id", {"id": 123})
            ...

            ```
        """
        return await self.request("GET", path, params, timeout=timeout)

    async def post(
        self,
        path: str,
        params: Params | None = None,
        *,
        timeout: float | httpx.Timeout | None = None,
    ) -> CilResponse:
        r"""Send a POST call."""
        return await self.request("POST", path, params, timeout=timeout)

    def submit(
        self,
        method: str,
        path: str,
        params: Params | None = None,
        callback: ResultCallback | None = None,
        *,
        timeout: float | httpx.Timeout | None = None,
    ) -> asyncio.Future[CilResponse]:
        r"""Schedule one API call and return its future.

        The request is built synchronously. Execution starts after the
        current turn of the event loop, so nothing is sent before the
        caller holds the future. ``callback(error, data, response)`` is
        invoked exactly once when the call is over, retries included.
        Cancelling the future cancels the call; the callback then
        receives a ``TransportError``.

        Args:
            method: ``"GET"`` or ``"POST"``.
            path: The logical path.
            params: The call parameters. Not mutated.
            callback: Optional completion callback. On failure it
                receives the error, the error body and the reply
                metadata (``None`` when no reply was received). On
                success it receives ``None``, the decoded body and the
                response.
            timeout: Optional timeout overriding the client default.

        Returns:
            The future of the result. Build failures (e.g. a missing path
            parameter) are set on it without any request being sent.

        Raises:
            RuntimeError: If called outside of a context manager or
                without a running event loop.
            ValueError: If ``method`` is not supported.
        """
        self._ensure_client()
        loop = asyncio.get_running_loop()
        future: asyncio.Future[CilResponse] = loop.create_future()
        if callback is not None:
            future.add_done_callback(functools.partial(_deliver, callback, method, path))

        try:
            descriptor = self._builder.prepare(method, path, params, timeout=timeout)
        except CilError as exc:
            logger.debug(f"{method} {path}: request could not be built ({exc})")
            future.set_exception(exc)
            return future

        def start() -> None:
            if future.done():
                return
            task = loop.create_task(self._call(method, path, params, timeout=timeout, prepared=descriptor))
            task.add_done_callback(functools.partial(_resolve, future))
            future.add_done_callback(functools.partial(_cancel, task))

        loop.call_soon(start)
        return future

    async def stream(
        self,
        path: str,
        params: Params | None = None,
        *,
        method: str = "GET",
        timeout: float | httpx.Timeout | None = None,
    ) -> AsyncIterator[str]:
        r"""Open a streaming call and yield its body as text chunks.

        Streaming calls are never retried.

        Args:
            path: The logical stream path, e.g. ``"user"`` or
                ``"statuses/filter"``.
            params: The call parameters. Not mutated.
            method: ``"GET"`` or ``"POST"``.
            timeout: Optional timeout overriding the client default.

        Yields:
            Text chunks, as received.

        Raises:
            RuntimeError: If called outside of a context manager.
            MissingParameterError: If a path placeholder has no parameter.
            AuthAcquisitionError: If the bearer token could not be
                obtained.
            TransportError: If the connection failed.
            ApiError: If the service rejected the stream.
        """
        client = self._ensure_client()
        descriptor = await self._builder.build(method, path, params, client, streaming=True, timeout=timeout)
        logger.debug(f"Opening stream {descriptor.method} {descriptor.url}")
        async for chunk in HttpExecutor(client).stream(descriptor):
            yield chunk

    @property
    def bearer_token(self) -> str | None:
        """The cached bearer token in app-only mode, ``None`` otherwise."""
        if isinstance(self._auth, AppOnlyAuthProvider):
            return self._auth.token
        return None

    def set_bearer_token(self, token: str) -> None:
        """Replace the cached bearer token.

        Raises:
            RuntimeError: If the client does not use app-only
                authentication.
        """
        self._app_only_provider().set_token(token)

    def invalidate_bearer_token(self) -> None:
        """Drop the cached bearer token so that the next call acquires a
        new one.

        Raises:
            RuntimeError: If the client does not use app-only
                authentication.
        """
        self._app_only_provider().invalidate()

    async def acquire_bearer_token(self) -> str:
        """Return the bearer token, acquiring it if none is cached.

        Raises:
            RuntimeError: If the client does not use app-only
                authentication, or is used outside of a context manager.
            AuthAcquisitionError: If the token exchange fails.
        """
        provider = self._app_only_provider()
        return await provider.acquire(self._ensure_client(), timeout=self._timeout)

    def _app_only_provider(self) -> AppOnlyAuthProvider:
        if not isinstance(self._auth, AppOnlyAuthProvider):
            msg = "bearer tokens are only used with app-only authentication"
            raise RuntimeError(msg)
        return self._auth


def _resolve(future: asyncio.Future[CilResponse], task: asyncio.Task[CilResponse]) -> None:
    if future.done():
        return
    if task.cancelled():
        future.cancel()
    elif task.exception() is not None:
        future.set_exception(task.exception())
    else:
        future.set_result(task.result())


def _cancel(task: asyncio.Task[CilResponse], future: asyncio.Future[CilResponse]) -> None:
    if future.cancelled() and not task.done():
        task.cancel()


def _deliver(
    callback: ResultCallback,
    method: str,
    path: str,
    future: asyncio.Future[CilResponse],
) -> None:
    if future.cancelled():
        callback(make_error(TransportError, f"{method} request to {path} was cancelled"), None, None)
        return
    error = future.exception()
    if error is None:
        response = future.result()
        callback(None, response.data, response)
    elif isinstance(error, CilError):
        callback(error, error.raw_body, error.response)
    else:
        callback(make_error(TransportError, f"{method} request to {path} failed: {error}"), None, None)

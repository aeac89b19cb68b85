r"""Execution of request descriptors and classification of replies.

``HttpExecutor.send`` performs one exchange and returns the accumulated
reply, raising ``TransportError`` on socket failures. ``complete`` turns
an accumulated reply into a result or into a ``DecodeError`` /
``ApiError``. Retry decisions are taken by the caller between the two.
"""

from __future__ import annotations

__all__ = ["HttpExecutor"]

import codecs
import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from cilclient.exceptions import ApiError, TransportError
from cilclient.http.exchange import Exchange
from cilclient.http.response import CilResponse, ErrorEnvelope, parse_envelope
from cilclient.utils.exceptions import make_api_error, make_decode_error, make_error
from cilclient.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from cilclient.request.descriptor import RequestDescriptor

logger: logging.Logger = logging.getLogger(__name__)


class HttpExecutor:
    """Send request descriptors with an ``httpx.AsyncClient``.

    Args:
        client: The HTTP client. Its lifecycle is managed by the caller.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def _open(self, descriptor: RequestDescriptor, exchange: Exchange) -> httpx.Response:
        request = descriptor.to_httpx(self.client)
        auth = descriptor.auth if descriptor.auth is not None else httpx.USE_CLIENT_DEFAULT
        try:
            response = await self.client.send(request, auth=auth, stream=True)
        except httpx.RequestError as exc:
            exchange.fail(exc)
            raise _transport_error(exchange, exc) from exc
        exchange.receive(response.status_code, response.headers)
        return response

    async def send(self, descriptor: RequestDescriptor) -> Exchange:
        """Send ``descriptor`` and accumulate the whole reply body.

        Args:
            descriptor: The request to send.

        Returns:
            The exchange in state ``COMPLETE``.

        Raises:
            TransportError: If no complete reply could be read. This
                covers redirect loops and undecodable content encodings.
                Its status code is ``None``.
        """
        exchange = Exchange(descriptor.method, descriptor.url)
        response = await self._open(descriptor, exchange)
        try:
            exchange.begin_body()
            async for chunk in response.aiter_bytes():
                exchange.feed(chunk)
            exchange.finish()
        except httpx.RequestError as exc:
            exchange.fail(exc)
            raise _transport_error(exchange, exc) from exc
        finally:
            await response.aclose()
        log_structured(
            logger,
            logging.DEBUG,
            f"{exchange.method} {exchange.url} completed with status {exchange.status_code}",
            http_method=exchange.method,
            http_url=exchange.url,
            status_code=exchange.status_code,
        )
        return exchange

    def complete(self, exchange: Exchange) -> CilResponse:
        """Classify a completed exchange.

        Args:
            exchange: An exchange in state ``COMPLETE``.

        Returns:
            The decoded body with the reply metadata.

        Raises:
            DecodeError: If the body is not valid JSON.
            ApiError: If the decoded body carries an ``error`` or
                ``errors`` field.

            Both errors keep the reply metadata in ``response``.
        """
        try:
            data: Any = json.loads(exchange.body)
        except ValueError as exc:
            logger.debug(f"{exchange.method} {exchange.url}: body is not valid JSON ({exc})")
            raise make_decode_error(
                exc,
                status_code=exchange.status_code,
                text=exchange.body,
                response=_reply(exchange, exchange.body),
            ) from exc

        if isinstance(parse_envelope(data), ErrorEnvelope):
            logger.debug(f"{exchange.method} {exchange.url}: API error payload received")
            raise make_api_error(
                data, status_code=exchange.status_code, response=_reply(exchange, data)
            )

        return _reply(exchange, data)

    async def stream(self, descriptor: RequestDescriptor) -> AsyncIterator[str]:
        """Yield the body of a streaming reply as text chunks.

        A reply with status >= 400 is read completely and classified with
        ``complete``. Chunks are not parsed.

        Args:
            descriptor: The streaming request.

        Yields:
            Decoded text chunks, as received.

        Raises:
            TransportError: If the connection fails or the body cannot be
                read.
            DecodeError: If an error reply is not valid JSON.
            ApiError: If the service rejects the stream.
        """
        exchange = Exchange(descriptor.method, descriptor.url)
        response = await self._open(descriptor, exchange)
        try:
            if response.status_code >= 400:
                exchange.begin_body()
                exchange.feed(await response.aread())
                exchange.finish()
                self.complete(exchange)
                error = make_error(
                    ApiError,
                    f"Stream request failed with status {response.status_code}",
                    status_code=response.status_code,
                )
                error.raw_body = exchange.body
                error.response = _reply(exchange, exchange.body)
                raise error
            exchange.begin_body()
            decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
            async for chunk in response.aiter_bytes():
                text = decoder.decode(chunk)
                if text:
                    yield text
            tail = decoder.decode(b"", final=True)
            if tail:
                yield tail
            exchange.finish()
        except httpx.RequestError as exc:
            exchange.fail(exc)
            raise _transport_error(exchange, exc) from exc
        finally:
            await response.aclose()


def _reply(exchange: Exchange, data: Any) -> CilResponse:
    return CilResponse(
        data=data,
        status_code=exchange.status_code or 0,
        headers=exchange.headers,
        url=exchange.url,
    )


def _transport_error(exchange: Exchange, exc: httpx.RequestError) -> TransportError:
    logger.debug(f"{exchange.method} {exchange.url}: transport error {type(exc).__name__}: {exc}")
    return make_error(
        TransportError,
        f"{exchange.method} request to {exchange.url} failed: {type(exc).__name__}: {exc}",
    )

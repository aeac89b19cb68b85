r"""Shared test helpers.

This module contains a scripted fake of the remote service built on
``httpx.MockTransport``, so tests can count transport invocations and
inspect the requests that reached the wire.
"""

from __future__ import annotations

__all__ = ["TOKEN_REPLY", "FakeService", "corrupt_gzip_response", "json_response", "streamed_response"]

from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterable

TOKEN_REPLY = {"token_type": "bearer", "access_token": "TOKEN"}


def json_response(status_code: int = 200, data: Any = None, **kwargs: Any) -> httpx.Response:
    """Create a reply with a JSON body."""
    return httpx.Response(status_code, json=data if data is not None else {}, **kwargs)


def streamed_response(status_code: int, *chunks: bytes, **kwargs: Any) -> httpx.Response:
    """Create a reply whose body is only read when the client streams
    it."""

    async def body() -> AsyncIterator[bytes]:
        for chunk in chunks:
            yield chunk

    return httpx.Response(status_code, content=body(), **kwargs)


def corrupt_gzip_response(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
    """Create a reply announcing a gzip body that is not gzip data."""
    return streamed_response(200, b"not gzip at all", headers={"Content-Encoding": "gzip"})


class FakeService:
    """Replay scripted replies and record the requests received.

    Each item of ``replies`` is an ``httpx.Response``, an exception
    instance raised by the transport, or a callable taking the request.
    The last item is repeated once the script is exhausted. Requests to
    ``token_url`` are answered with ``token_reply`` and recorded
    separately.

    Args:
        replies: The scripted replies of the API.
        token_url: The URL of the bearer token exchange.
        token_reply: The reply of the token exchange.
    """

    def __init__(
        self,
        replies: Iterable[httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]],
        token_url: str = "https://api.test/oauth2/token",
        token_reply: httpx.Response | None = None,
    ) -> None:
        self.replies = list(replies)
        self.token_url = token_url
        self.token_reply = token_reply if token_reply is not None else json_response(200, TOKEN_REPLY)
        self.requests: list[httpx.Request] = []
        self.token_requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == self.token_url:
            self.token_requests.append(request)
            return _clone(self.token_reply)
        index = min(len(self.requests), len(self.replies) - 1)
        self.requests.append(request)
        reply = self.replies[index]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply) and not isinstance(reply, httpx.Response):
            return reply(request)
        return _clone(reply)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def _clone(response: httpx.Response) -> httpx.Response:
    # A response body can only be streamed once.
    return httpx.Response(response.status_code, headers=response.headers, content=response.content)

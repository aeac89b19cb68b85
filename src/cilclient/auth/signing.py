r"""Request signing with the consumer and access key pairs (OAuth
1.0a, HMAC-SHA1)."""

from __future__ import annotations

__all__ = ["OAuth1Signer", "SigningAuthProvider"]

import base64
import hashlib
import hmac
import logging
import secrets
import time
from typing import TYPE_CHECKING

import httpx

from cilclient.auth.base import AuthProvider
from cilclient.request.path import percent_encode

if TYPE_CHECKING:
    from collections.abc import Generator

    from cilclient.core.config import Credentials
    from cilclient.request.descriptor import RequestDescriptor

logger: logging.Logger = logging.getLogger(__name__)


class OAuth1Signer(httpx.Auth):
    """Sign every request with an OAuth 1.0a ``Authorization`` header.

    The signature covers the method, the URL without query string, the
    query parameters and the protocol parameters. Multipart bodies are
    not part of the signature.

    Args:
        consumer_key: The application key.
        consumer_secret: The application secret.
        token: The user access token.
        token_secret: The user access token secret.

    Example:
        ```pycon
        >>> import httpx
        >>> from cilclient.auth.signing import OAuth1Signer
        >>> signer = OAuth1Signer("ck", "cs", "at", "ats")
        >>> header = signer.authorization_header(
        ...     "GET", httpx.URL("https://api.example.com/1.1/a.json?q=1"), nonce="n", timestamp=1
        ... )
        >>> header.startswith('OAuth oauth_consumer_key="ck", oauth_nonce="n"')
        True

        ```
    """

    def __init__(self, consumer_key: str, consumer_secret: str, token: str, token_secret: str) -> None:
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.token = token
        self.token_secret = token_secret

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = self.authorization_header(request.method, request.url)
        yield request

    def authorization_header(
        self,
        method: str,
        url: httpx.URL,
        *,
        nonce: str | None = None,
        timestamp: int | None = None,
    ) -> str:
        """Return the ``Authorization`` header value for a request.

        Args:
            method: The HTTP method.
            url: The full request URL.
            nonce: Optional fixed nonce.
            timestamp: Optional fixed timestamp.

        Returns:
            The header value.
        """
        oauth_params = {
            "oauth_consumer_key": self.consumer_key,
            "oauth_nonce": nonce or secrets.token_hex(16),
            "oauth_signature_method": "HMAC-SHA1",
            "oauth_timestamp": str(timestamp if timestamp is not None else int(time.time())),
            "oauth_token": self.token,
            "oauth_version": "1.0",
        }
        oauth_params["oauth_signature"] = self.signature(method, url, oauth_params)
        return "OAuth " + ", ".join(
            f'{percent_encode(key)}="{percent_encode(value)}"'
            for key, value in sorted(oauth_params.items())
        )

    def signature(self, method: str, url: httpx.URL, oauth_params: dict[str, str]) -> str:
        """Compute the HMAC-SHA1 signature of a request.

        Args:
            method: The HTTP method.
            url: The full request URL.
            oauth_params: The protocol parameters, without signature.

        Returns:
            The base64 encoded signature.
        """
        pairs = sorted(
            (percent_encode(key), percent_encode(value))
            for key, value in [*url.params.multi_items(), *oauth_params.items()]
        )
        normalized = "&".join(f"{key}={value}" for key, value in pairs)
        base_string = "&".join(
            [method.upper(), percent_encode(base_string_uri(url)), percent_encode(normalized)]
        )
        key = f"{percent_encode(self.consumer_secret)}&{percent_encode(self.token_secret)}"
        digest = hmac.new(key.encode(), base_string.encode(), hashlib.sha1).digest()
        return base64.b64encode(digest).decode("ascii")


def base_string_uri(url: httpx.URL) -> str:
    """Return the URL as used in the signature base string.

    Example:
        ```pycon
        >>> import httpx
        >>> from cilclient.auth.signing import base_string_uri
        >>> base_string_uri(httpx.URL("HTTPS://Api.Example.com:443/a%20b.json?x=1"))
        'https://api.example.com/a%20b.json'

        ```
    """
    port = f":{url.port}" if url.port is not None else ""
    path = url.raw_path.split(b"?", 1)[0].decode("ascii")
    return f"{url.scheme.lower()}://{url.host.lower()}{port}{path}"


class SigningAuthProvider(AuthProvider):
    """Attach an ``OAuth1Signer`` to every request.

    No network exchange is needed: the signature is computed by httpx
    when the request is sent.
    """

    def __init__(self, credentials: Credentials) -> None:
        self._signer = OAuth1Signer(
            consumer_key=credentials.consumer_key,
            consumer_secret=credentials.consumer_secret,
            token=credentials.access_token or "",
            token_secret=credentials.access_token_secret or "",
        )

    @property
    def signer(self) -> OAuth1Signer:
        return self._signer

    async def authorize(self, descriptor: RequestDescriptor, client: httpx.AsyncClient) -> None:  # noqa: ARG002
        descriptor.auth = self._signer

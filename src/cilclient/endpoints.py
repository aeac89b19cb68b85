r"""Base URLs of the remote service."""

from __future__ import annotations

__all__ = ["DEFAULT_ENDPOINTS", "Endpoints"]

from dataclasses import dataclass


@dataclass(frozen=True)
class Endpoints:
    """Table of physical base URLs.

    Every base URL must end with ``/`` since logical paths are appended
    to it verbatim.

    Args:
        rest_root: Base URL of the REST resources.
        user_stream: Base URL of the user-timeline stream.
        site_stream: Base URL of the site stream.
        public_stream: Base URL of the public streams.
        media_upload: Base URL of the media upload resource.
        token_url: Full URL of the bearer token exchange.

    Example:
        ```pycon
        >>> from cilclient.endpoints import Endpoints
        >>> endpoints = Endpoints(rest_root="http://localhost:8080/1.1/")
        >>> endpoints.rest_root
        'http://localhost:8080/1.1/'

        ```
    """

    rest_root: str = "https://api.coveritlive.com/1.1/"
    user_stream: str = "https://userstream.coveritlive.com/1.1/"
    site_stream: str = "https://sitestream.coveritlive.com/1.1/"
    public_stream: str = "https://stream.coveritlive.com/1.1/"
    media_upload: str = "https://upload.coveritlive.com/1.1/"
    token_url: str = "https://api.coveritlive.com/oauth2/token"

    def __post_init__(self) -> None:
        for name in ("rest_root", "user_stream", "site_stream", "public_stream", "media_upload"):
            value = getattr(self, name)
            if not value.endswith("/"):
                msg = f"{name} must end with '/', got {value!r}"
                raise ValueError(msg)


DEFAULT_ENDPOINTS = Endpoints()

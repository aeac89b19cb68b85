r"""Selection of the physical endpoint of a request."""

from __future__ import annotations

__all__ = [
    "JSON_CONTENT_TYPE",
    "MEDIA_UPLOAD_PATH",
    "MULTIPART_CONTENT_TYPE",
    "BodyMode",
    "EndpointSelection",
    "resolve_endpoint",
]

from dataclasses import dataclass
from enum import Enum

from cilclient.endpoints import DEFAULT_ENDPOINTS, Endpoints

JSON_CONTENT_TYPE = "application/json"
MULTIPART_CONTENT_TYPE = "multipart/form-data"
MEDIA_UPLOAD_PATH = "media/upload"


class BodyMode(Enum):
    """Where the leftover parameters of a request go.

    Attributes:
        QUERY: Appended to the URL as a query string.
        FORM: Sent as multipart form fields; no query string.
    """

    QUERY = "query"
    FORM = "form"


@dataclass(frozen=True)
class EndpointSelection:
    """The physical target of a request.

    Attributes:
        url: The full URL without query string.
        content_type: The content type of the request.
        body_mode: Where the leftover parameters go.
    """

    url: str
    content_type: str
    body_mode: BodyMode


def resolve_endpoint(
    streaming: bool,
    path: str,
    endpoints: Endpoints = DEFAULT_ENDPOINTS,
) -> EndpointSelection:
    """Pick the base URL, content type and body mode of a request.

    Rules, first match wins:

    1. streaming ``user`` goes to the user stream;
    2. streaming ``site`` goes to the site stream;
    3. any other streaming path goes to the public stream;
    4. ``media/upload`` goes to the media endpoint as a multipart form;
    5. anything else goes to the REST root.

    Every URL is the base URL followed by the path and
    ``.json``.

    Args:
        streaming: Whether the request targets the streaming API.
        path: The logical path with placeholders already substituted.
        endpoints: The endpoint table.

    Returns:
        The endpoint selection.

    Example:
        ```pycon
        >>> from cilclient.request.endpoint import resolve_endpoint
        >>> resolve_endpoint(False, "statuses/show").url
        'https://api.coveritlive.com/1.1/statuses/show.json'
        >>> resolve_endpoint(True, "user").url
        'https://userstream.coveritlive.com/1.1/user.json'
        >>> resolve_endpoint(False, "media/upload").body_mode
        <BodyMode.FORM: 'form'>

        ```
    """
    if streaming:
        if path == "user":
            base = endpoints.user_stream
        elif path == "site":
            base = endpoints.site_stream
        else:
            base = endpoints.public_stream
        return EndpointSelection(
            url=f"{base}{path}.json",
            content_type=JSON_CONTENT_TYPE,
            body_mode=BodyMode.QUERY,
        )
    if path == MEDIA_UPLOAD_PATH:
        return EndpointSelection(
            url=f"{endpoints.media_upload}{MEDIA_UPLOAD_PATH}.json",
            content_type=MULTIPART_CONTENT_TYPE,
            body_mode=BodyMode.FORM,
        )
    return EndpointSelection(
        url=f"{endpoints.rest_root}{path}.json",
        content_type=JSON_CONTENT_TYPE,
        body_mode=BodyMode.QUERY,
    )

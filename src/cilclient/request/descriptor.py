r"""The ready-to-send description of one HTTP request."""

from __future__ import annotations

__all__ = ["RequestDescriptor"]

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cilclient.request.endpoint import BodyMode
from cilclient.request.params import format_value

if TYPE_CHECKING:
    import httpx


@dataclass
class RequestDescriptor:
    """Everything the executor needs to send one request.

    In ``BodyMode.QUERY`` the leftover parameters are already part of
    ``url`` and ``form`` is ``None``. In ``BodyMode.FORM`` the URL has no
    query string and every leftover parameter is in ``form``.

    Attributes:
        method: ``"GET"`` or ``"POST"``.
        url: The final URL.
        headers: Extra request headers. The multipart content type is not
            listed here since httpx writes it together with the boundary.
        body_mode: Where the leftover parameters went.
        content_type: The content type of the request.
        form: The multipart fields, or ``None``.
        auth: The ``httpx.Auth`` signing the request, if any.
        timeout: Optional per-call timeout.
        path: The logical path the request was built from.
        streaming: Whether the request targets the streaming API.
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body_mode: BodyMode = BodyMode.QUERY
    content_type: str = "application/json"
    form: dict[str, Any] | None = None
    auth: httpx.Auth | None = None
    timeout: float | httpx.Timeout | None = None
    path: str = ""
    streaming: bool = False

    def __post_init__(self) -> None:
        if self.body_mode is BodyMode.FORM and "?" in self.url:
            msg = f"multipart request must not carry a query string: {self.url}"
            raise ValueError(msg)
        if self.body_mode is BodyMode.QUERY and self.form is not None:
            msg = "query request must not carry form fields"
            raise ValueError(msg)

    def to_httpx(self, client: httpx.AsyncClient) -> httpx.Request:
        """Build the ``httpx.Request`` for this descriptor.

        Args:
            client: The client that will send the request.

        Returns:
            The request.
        """
        kwargs: dict[str, Any] = {"headers": self.headers}
        if self.form is not None:
            kwargs["files"] = {key: _form_field(key, value) for key, value in self.form.items()}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return client.build_request(self.method, self.url, **kwargs)


def _form_field(name: str, value: Any) -> Any:
    if isinstance(value, tuple):
        return value
    if isinstance(value, (bytes, bytearray)) or hasattr(value, "read"):
        return (name, value)
    # A ``None`` file name renders a plain form field.
    return (None, format_value(value))

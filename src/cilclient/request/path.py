r"""Substitution of path placeholders."""

from __future__ import annotations

__all__ = ["ResolvedPath", "percent_encode", "resolve_path"]

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from cilclient.exceptions import MissingParameterError
from cilclient.request.params import format_value

_PLACEHOLDER = re.compile(r"/:(\w+)")


@dataclass(frozen=True)
class ResolvedPath:
    """A logical path with its placeholders substituted.

    Attributes:
        path: The final path.
        remaining: The parameters not consumed by the path.
    """

    path: str
    remaining: dict[str, Any]


def percent_encode(value: Any) -> str:
    """Percent-encode a value with the RFC 3986 unreserved set.

    Example:
        ```pycon
        >>> from cilclient.request.path import percent_encode
        >>> percent_encode("a b/c!")
        'a%20b%2Fc%21'

        ```
    """
    return quote(format_value(value), safe="~")


def resolve_path(template: str, params: dict[str, Any]) -> ResolvedPath:
    """Substitute every ``/:name`` placeholder of ``template``.

    Args:
        template: The logical path, e.g. ``"statuses/destroy/:id"``.
        params: The normalized parameters. Not mutated.

    Returns:
        The final path and the parameters left for the query string or
        form body.

    Raises:
        MissingParameterError: If a placeholder has no parameter (or a
            ``None`` one).

    Example:
        ```pycon
        >>> from cilclient.request.path import resolve_path
        >>> resolved = resolve_path("statuses/show/:id", {"id": "12 3", "trim": "true"})
        >>> resolved.path
        'statuses/show/12%203'
        >>> resolved.remaining
        {'trim': 'true'}

        ```
    """
    remaining = dict(params)

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if remaining.get(name) is None:
            raise MissingParameterError(name, template)
        return "/" + percent_encode(remaining.pop(name))

    return ResolvedPath(path=_PLACEHOLDER.sub(substitute, template), remaining=remaining)

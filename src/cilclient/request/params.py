r"""Normalization of caller parameters.

Callers pass a flat mapping of parameters. Before it is used to build a
request, the mapping is cloned, list values are flattened into
comma-separated strings, and the pipeline options stored under
``cil_options`` are taken out so they never reach the wire.
"""

from __future__ import annotations

__all__ = [
    "CIL_OPTIONS_KEY",
    "CilOptions",
    "ParamValue",
    "Params",
    "extract_cil_options",
    "format_value",
    "normalize_params",
]

from collections.abc import Mapping
from dataclasses import dataclass
from typing import IO, Any, Union

# Scalars go to the query string or form fields, binary values to form files.
Scalar = Union[str, int, float, bool]
ParamValue = Union[Scalar, list[Scalar], tuple[Scalar, ...], bytes, IO[bytes], tuple[Any, ...]]
Params = Mapping[str, Any]

CIL_OPTIONS_KEY = "cil_options"


@dataclass(frozen=True)
class CilOptions:
    """Per-call pipeline options.

    Args:
        retry: Whether the call may be re-executed after a transport
            failure with a retryable status code.
        max_retries: Optional per-call override of the client's retry
            bound.

    Example:
        ```pycon
        >>> from cilclient.request.params import CilOptions
        >>> CilOptions(retry=True)
        CilOptions(retry=True, max_retries=None)

        ```
    """

    retry: bool = False
    max_retries: int | None = None

    def __post_init__(self) -> None:
        if self.max_retries is not None and self.max_retries < 0:
            msg = f"max_retries must be >= 0, got {self.max_retries}"
            raise ValueError(msg)


def extract_cil_options(params: Params | None) -> CilOptions:
    """Read the pipeline options of a call.

    Args:
        params: The caller parameters. The options are read from the
            ``cil_options`` key, given either as ``CilOptions`` or as a
            mapping of its fields.

    Returns:
        The options, defaults if absent.

    Example:
        ```pycon
        >>> from cilclient.request.params import extract_cil_options
        >>> extract_cil_options({"q": "x", "cil_options": {"retry": True}})
        CilOptions(retry=True, max_retries=None)
        >>> extract_cil_options(None)
        CilOptions(retry=False, max_retries=None)

        ```
    """
    options = (params or {}).get(CIL_OPTIONS_KEY)
    if options is None:
        return CilOptions()
    if isinstance(options, CilOptions):
        return options
    if isinstance(options, Mapping):
        return CilOptions(
            retry=bool(options.get("retry", False)),
            max_retries=options.get("max_retries"),
        )
    msg = f"{CIL_OPTIONS_KEY} must be a mapping or CilOptions, got {type(options).__name__}"
    raise TypeError(msg)


def format_value(value: Any) -> str:
    """Render a scalar parameter the way the service expects it.

    Example:
        ```pycon
        >>> from cilclient.request.params import format_value
        >>> format_value(True), format_value(12), format_value("a b")
        ('true', '12', 'a b')

        ```
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_params(params: Params | None) -> dict[str, Any]:
    """Return the canonical form of the caller parameters.

    The input is never mutated. Lists and tuples of scalars are joined
    with ``,``; every other value is kept as is. Tuples whose first item
    is a file name (the httpx file tuple form) are not joined. ``None``
    values are dropped, so they never reach the wire. The
    ``cil_options`` key is removed.

    Args:
        params: The caller parameters, or ``None``.

    Returns:
        A new dict with the normalized parameters.

    Raises:
        TypeError: If a value is a nested mapping.

    Example:
        ```pycon
        >>> from cilclient.request.params import normalize_params
        >>> params = {"ids": [1, 2, 3], "q": "news", "cil_options": {"retry": True}}
        >>> normalize_params(params)
        {'ids': '1,2,3', 'q': 'news'}
        >>> params["ids"]
        [1, 2, 3]
        >>> normalize_params({"since_id": None, "count": 5})
        {'count': 5}

        ```
    """
    normalized: dict[str, Any] = {}
    for key, value in (params or {}).items():
        if key == CIL_OPTIONS_KEY or value is None:
            continue
        if isinstance(value, Mapping):
            msg = f"parameter {key!r} must not be a mapping"
            raise TypeError(msg)
        if isinstance(value, list) or (isinstance(value, tuple) and not _is_file_tuple(value)):
            normalized[key] = ",".join(format_value(item) for item in value)
        else:
            normalized[key] = value
    return normalized


def _is_file_tuple(value: tuple[Any, ...]) -> bool:
    # ("name.png", b"...") or ("name.png", fh, "image/png")
    return 2 <= len(value) <= 4 and not isinstance(value[1], (str, int, float, bool))

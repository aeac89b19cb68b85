r"""Request construction: parameters, paths, endpoints and descriptors."""

from __future__ import annotations

__all__ = [
    "BodyMode",
    "CilOptions",
    "EndpointSelection",
    "RequestBuilder",
    "RequestDescriptor",
    "ResolvedPath",
    "extract_cil_options",
    "make_query_string",
    "normalize_params",
    "resolve_endpoint",
    "resolve_path",
]

from cilclient.request.builder import RequestBuilder, make_query_string
from cilclient.request.descriptor import RequestDescriptor
from cilclient.request.endpoint import BodyMode, EndpointSelection, resolve_endpoint
from cilclient.request.params import CilOptions, extract_cil_options, normalize_params
from cilclient.request.path import ResolvedPath, resolve_path

from __future__ import annotations

import pytest

from cilclient.exceptions import (
    ApiError,
    AuthAcquisitionError,
    CilError,
    DecodeError,
    MissingParameterError,
    TransportError,
)

##############################
#     Tests for CilError     #
##############################


def test_cil_error_fields() -> None:
    error = CilError(
        "Rate limit exceeded",
        status_code=429,
        code=88,
        all_errors=[{"code": 88, "message": "Rate limit exceeded"}],
        raw_body={"errors": []},
    )
    assert str(error) == "Rate limit exceeded"
    assert error.message == "Rate limit exceeded"
    assert error.status_code == 429
    assert error.code == 88
    assert error.all_errors == [{"code": 88, "message": "Rate limit exceeded"}]
    assert error.raw_body == {"errors": []}
    assert error.response is None


def test_cil_error_copies_all_errors() -> None:
    all_errors = [{"message": "x"}]
    error = CilError("x", all_errors=all_errors)
    error.all_errors.append({"message": "y"})
    assert all_errors == [{"message": "x"}]


def test_cil_error_repr() -> None:
    assert repr(ApiError("Not found", status_code=404, code=34)) == (
        "ApiError(message='Not found', status_code=404, code=34)"
    )


@pytest.mark.parametrize(
    "error_cls", [ApiError, AuthAcquisitionError, DecodeError, MissingParameterError, TransportError]
)
def test_error_hierarchy(error_cls: type[CilError]) -> None:
    assert issubclass(error_cls, CilError)


###########################################
#     Tests for MissingParameterError     #
###########################################


def test_missing_parameter_error() -> None:
    error = MissingParameterError("id", "statuses/show/:id")
    assert error.message == (
        "Params object is missing a required parameter for this request: `id` "
        "(path: statuses/show/:id)"
    )
    assert error.name == "id"
    assert error.path == "statuses/show/:id"
    assert error.status_code is None
    assert error.all_errors == []

from __future__ import annotations

import pytest

from cilclient.http.response import CilResponse, ErrorEnvelope, SuccessEnvelope, parse_envelope

####################################
#     Tests for parse_envelope     #
####################################


@pytest.mark.parametrize(
    "data",
    [
        {"error": "Not authorized"},
        {"errors": [{"code": 34, "message": "Sorry, that page does not exist"}]},
        {"errors": "Rate limit"},
    ],
)
def test_parse_envelope_error(data: dict) -> None:
    assert parse_envelope(data) == ErrorEnvelope(data)


@pytest.mark.parametrize(
    "data",
    [
        {"id": 1},
        {"id": 1, "errors": []},
        {"error": None},
        {"error": ""},
        [{"errors": "inside a list"}],
        "text",
        None,
        3,
    ],
)
def test_parse_envelope_success(data: object) -> None:
    assert parse_envelope(data) == SuccessEnvelope(data)


#################################
#     Tests for CilResponse     #
#################################


def test_cil_response_defaults() -> None:
    response = CilResponse(data={"a": 1}, status_code=200)
    assert response.headers == {}
    assert response.url == ""

from __future__ import annotations

import httpx
import pytest

from cilclient.request.descriptor import RequestDescriptor
from cilclient.request.endpoint import BodyMode

#######################################
#     Tests for RequestDescriptor     #
#######################################


def test_request_descriptor_defaults() -> None:
    descriptor = RequestDescriptor(method="GET", url="https://api.test/1.1/a.json")
    assert descriptor.body_mode is BodyMode.QUERY
    assert descriptor.headers == {}
    assert descriptor.form is None
    assert descriptor.auth is None


def test_request_descriptor_form_with_query_string() -> None:
    with pytest.raises(ValueError, match=r"multipart request must not carry a query string"):
        RequestDescriptor(
            method="POST",
            url="https://upload.test/1.1/media/upload.json?x=1",
            body_mode=BodyMode.FORM,
            form={},
        )


def test_request_descriptor_query_with_form() -> None:
    with pytest.raises(ValueError, match=r"query request must not carry form fields"):
        RequestDescriptor(method="POST", url="https://api.test/1.1/a.json", form={"a": "b"})


def test_request_descriptor_to_httpx_query() -> None:
    descriptor = RequestDescriptor(
        method="GET",
        url="https://api.test/1.1/a.json?q=x",
        headers={"Content-Type": "application/json"},
        timeout=5.0,
    )
    with httpx.Client() as client:
        request = descriptor.to_httpx(client)
    assert request.method == "GET"
    assert str(request.url) == "https://api.test/1.1/a.json?q=x"
    assert request.headers["Content-Type"] == "application/json"
    assert request.extensions["timeout"] == httpx.Timeout(5.0).as_dict()


def test_request_descriptor_to_httpx_form() -> None:
    descriptor = RequestDescriptor(
        method="POST",
        url="https://upload.test/1.1/media/upload.json",
        body_mode=BodyMode.FORM,
        content_type="multipart/form-data",
        form={"media": b"\x89PNG", "additional_owners": "1,2", "shared": True},
    )
    with httpx.Client() as client:
        request = descriptor.to_httpx(client)
    content = request.read()
    assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    assert b'name="media"; filename="media"' in content
    assert b"\x89PNG" in content
    assert b'name="additional_owners"\r\n\r\n1,2' in content
    assert b'name="shared"\r\n\r\ntrue' in content
    assert request.url.query == b""

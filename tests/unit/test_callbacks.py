from __future__ import annotations

from cilclient.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo
from cilclient.exceptions import TransportError

URL = "https://api.test/1.1/a.json"


def test_request_info() -> None:
    info = RequestInfo(method="GET", url=URL, attempt=1, max_retries=3)
    assert info.attempt == 1
    assert info.max_retries == 3


def test_retry_info() -> None:
    info = RetryInfo(method="GET", url=URL, attempt=2, max_retries=3, wait_time=0.6, status_code=503)
    assert info.wait_time == 0.6
    assert info.status_code == 503


def test_response_info() -> None:
    info = ResponseInfo(method="POST", url=URL, attempt=1, max_retries=0, status_code=200, total_time=0.1)
    assert info.status_code == 200


def test_failure_info() -> None:
    error = TransportError("socket hang up")
    info = FailureInfo(
        method="GET", url=URL, attempt=1, max_retries=3, error=error, status_code=None, total_time=0.2
    )
    assert info.error is error
    assert info.status_code is None

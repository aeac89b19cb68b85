r"""Unit tests for the retry loop around the request pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from cilclient.backoff import ConstantBackoff
from cilclient.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo
from cilclient.exceptions import ApiError, AuthAcquisitionError, DecodeError, TransportError
from cilclient.http.executor import HttpExecutor
from cilclient.request.descriptor import RequestDescriptor
from cilclient.retry import CallbackConfig, RetryConfig, RetryExecutor
from tests.helpers import FakeService, json_response

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

URL = "https://api.test/1.1/statuses/show.json"


def make_build() -> Callable[[], Awaitable[RequestDescriptor]]:
    return AsyncMock(side_effect=lambda: RequestDescriptor(method="GET", url=URL))


def make_executor(
    enabled: bool = True, max_retries: int = 3, callbacks: CallbackConfig | None = None
) -> RetryExecutor:
    return RetryExecutor(
        RetryConfig(
            enabled=enabled,
            max_retries=max_retries,
            status_forcelist=(429, 500, 502, 503, 504),
            backoff_strategy=ConstantBackoff(delay=1.0),
        ),
        callbacks or CallbackConfig(),
    )


###################################
#     Tests for RetryExecutor     #
###################################


@pytest.mark.asyncio
async def test_retry_executor_success_first_attempt(mock_asleep: Mock) -> None:
    service = FakeService([json_response(200, {"id": 1})])
    build = make_build()
    async with service.client() as client:
        response = await make_executor().execute("GET", "statuses/show", build, HttpExecutor(client))

    assert response.data == {"id": 1}
    assert service.calls == 1
    build.assert_awaited_once()
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_retry_executor_retries_retryable_status(mock_asleep: Mock) -> None:
    service = FakeService(
        [json_response(503, {"errors": [{"message": "Over capacity", "code": 130}]}), json_response(200, {"id": 1})]
    )
    build = make_build()
    async with service.client() as client:
        response = await make_executor().execute("GET", "statuses/show", build, HttpExecutor(client))

    assert response.data == {"id": 1}
    assert service.calls == 2
    assert build.await_count == 2
    mock_asleep.assert_called_once_with(1.0)


@pytest.mark.asyncio
async def test_retry_executor_disabled(mock_asleep: Mock) -> None:
    service = FakeService([json_response(503, {"errors": [{"message": "Over capacity", "code": 130}]})])
    async with service.client() as client:
        with pytest.raises(ApiError, match=r"Over capacity") as exc_info:
            await make_executor(enabled=False).execute(
                "GET", "statuses/show", make_build(), HttpExecutor(client)
            )

    assert exc_info.value.status_code == 503
    assert exc_info.value.code == 130
    assert service.calls == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_retry_executor_bounded(mock_asleep: Mock) -> None:
    service = FakeService([httpx.Response(503, text="Service Unavailable")])
    async with service.client() as client:
        with pytest.raises(DecodeError) as exc_info:
            await make_executor(max_retries=2).execute(
                "GET", "statuses/show", make_build(), HttpExecutor(client)
            )

    assert exc_info.value.status_code == 503
    assert exc_info.value.raw_body == "Service Unavailable"
    assert service.calls == 3
    assert mock_asleep.call_count == 2


@pytest.mark.asyncio
async def test_retry_executor_non_retryable_status(mock_asleep: Mock) -> None:
    service = FakeService([json_response(404, {"errors": [{"message": "Not found", "code": 34}]})])
    async with service.client() as client:
        with pytest.raises(ApiError, match=r"Not found"):
            await make_executor().execute("GET", "statuses/show", make_build(), HttpExecutor(client))

    assert service.calls == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_retry_executor_network_failure_not_retried(mock_asleep: Mock) -> None:
    service = FakeService([httpx.ConnectError("connection refused")])
    async with service.client() as client:
        with pytest.raises(TransportError, match=r"ConnectError: connection refused") as exc_info:
            await make_executor().execute("GET", "statuses/show", make_build(), HttpExecutor(client))

    error = exc_info.value
    assert error.status_code is None
    assert error.code is None
    assert error.raw_body is None
    assert isinstance(error.__cause__, httpx.ConnectError)
    assert service.calls == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_retry_executor_retry_after(mock_asleep: Mock) -> None:
    service = FakeService(
        [json_response(429, {"errors": []}, headers={"Retry-After": "7"}), json_response(200, {"id": 1})]
    )
    async with service.client() as client:
        await make_executor().execute("GET", "statuses/show", make_build(), HttpExecutor(client))
    mock_asleep.assert_called_once_with(7.0)


@pytest.mark.asyncio
async def test_retry_executor_build_failure_not_retried(mock_asleep: Mock) -> None:
    service = FakeService([json_response(200)])
    build = AsyncMock(side_effect=AuthAcquisitionError("Bearer token request failed with status 500"))
    async with service.client() as client:
        with pytest.raises(AuthAcquisitionError):
            await make_executor().execute("GET", "statuses/show", build, HttpExecutor(client))

    build.assert_awaited_once()
    assert service.calls == 0
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_retry_executor_callbacks_on_success(mock_asleep: Mock) -> None:  # noqa: ARG001
    callbacks = CallbackConfig(on_request=Mock(), on_retry=Mock(), on_success=Mock(), on_failure=Mock())
    service = FakeService([json_response(500, {}), json_response(200, {"id": 1})])
    async with service.client() as client:
        await make_executor(callbacks=callbacks).execute(
            "GET", "statuses/show", make_build(), HttpExecutor(client)
        )

    assert callbacks.on_request.call_args_list[0].args[0] == RequestInfo(
        method="GET", url=URL, attempt=1, max_retries=3
    )
    assert callbacks.on_request.call_count == 2
    callbacks.on_retry.assert_called_once_with(
        RetryInfo(method="GET", url=URL, attempt=2, max_retries=3, wait_time=1.0, status_code=500)
    )
    info = callbacks.on_success.call_args.args[0]
    assert isinstance(info, ResponseInfo)
    assert info.attempt == 2
    assert info.status_code == 200
    callbacks.on_failure.assert_not_called()


@pytest.mark.asyncio
async def test_retry_executor_callbacks_on_failure(mock_asleep: Mock) -> None:  # noqa: ARG001
    callbacks = CallbackConfig(on_success=Mock(), on_failure=Mock())
    service = FakeService([json_response(400, {"error": "Bad request"})])
    async with service.client() as client:
        with pytest.raises(ApiError):
            await make_executor(callbacks=callbacks).execute(
                "GET", "statuses/show", make_build(), HttpExecutor(client)
            )

    info = callbacks.on_failure.call_args.args[0]
    assert isinstance(info, FailureInfo)
    assert isinstance(info.error, ApiError)
    assert info.status_code == 400
    assert info.url == URL
    callbacks.on_success.assert_not_called()


@pytest.mark.asyncio
async def test_retry_executor_failure_before_url(mock_asleep: Mock) -> None:  # noqa: ARG001
    callbacks = CallbackConfig(on_failure=Mock())
    build = AsyncMock(side_effect=AuthAcquisitionError("no token"))
    async with FakeService([json_response(200)]).client() as client:
        with pytest.raises(AuthAcquisitionError):
            await make_executor(callbacks=callbacks).execute(
                "GET", "statuses/show", build, HttpExecutor(client)
            )
    assert callbacks.on_failure.call_args.args[0].url == "statuses/show"

from __future__ import annotations

import pytest

from cilclient.http.exchange import Exchange, ExchangeState, ExchangeStateError

URL = "https://api.test/1.1/a.json"

##############################
#     Tests for Exchange     #
##############################


def test_exchange_initial_state() -> None:
    exchange = Exchange("GET", URL)
    assert exchange.state is ExchangeState.SENDING
    assert exchange.status_code is None
    assert exchange.headers == {}
    assert exchange.body == ""


def test_exchange_full_lifecycle() -> None:
    exchange = Exchange("GET", URL)
    exchange.receive(200, {"content-type": "application/json"})
    assert exchange.state is ExchangeState.RESPONSE_RECEIVED
    assert exchange.status_code == 200
    assert exchange.headers == {"content-type": "application/json"}

    exchange.begin_body()
    assert exchange.state is ExchangeState.ACCUMULATING_BODY
    exchange.feed(b'{"a"')
    exchange.feed(b": 1}")
    exchange.finish()
    assert exchange.state is ExchangeState.COMPLETE
    assert exchange.body == '{"a": 1}'


def test_exchange_multibyte_character_split_across_chunks() -> None:
    exchange = Exchange("GET", URL)
    exchange.receive(200, {})
    exchange.begin_body()
    exchange.feed("café".encode()[:-1])
    exchange.feed("café".encode()[-1:])
    exchange.finish()
    assert exchange.body == "café"


def test_exchange_empty_body() -> None:
    exchange = Exchange("GET", URL)
    exchange.receive(204, {})
    exchange.begin_body()
    exchange.finish()
    assert exchange.body == ""


@pytest.mark.parametrize("steps", [0, 1, 2])
def test_exchange_transport_error_reachable(steps: int) -> None:
    exchange = Exchange("GET", URL)
    if steps >= 1:
        exchange.receive(200, {})
    if steps >= 2:
        exchange.begin_body()
    error = ConnectionResetError("reset")
    exchange.fail(error)
    assert exchange.state is ExchangeState.TRANSPORT_ERROR
    assert exchange.error is error


def test_exchange_complete_is_terminal() -> None:
    exchange = Exchange("GET", URL)
    exchange.receive(200, {})
    exchange.begin_body()
    exchange.finish()
    with pytest.raises(ExchangeStateError, match=r"COMPLETE -> TRANSPORT_ERROR"):
        exchange.fail(RuntimeError("late"))


def test_exchange_body_before_response() -> None:
    exchange = Exchange("GET", URL)
    with pytest.raises(ExchangeStateError, match=r"SENDING -> ACCUMULATING_BODY") as exc_info:
        exchange.begin_body()
    assert exc_info.value.from_state is ExchangeState.SENDING
    assert exc_info.value.to_state is ExchangeState.ACCUMULATING_BODY


def test_exchange_feed_outside_body() -> None:
    exchange = Exchange("GET", URL)
    exchange.receive(200, {})
    with pytest.raises(ExchangeStateError):
        exchange.feed(b"x")


def test_exchange_receive_twice() -> None:
    exchange = Exchange("GET", URL)
    exchange.receive(200, {})
    with pytest.raises(ExchangeStateError, match=r"RESPONSE_RECEIVED -> RESPONSE_RECEIVED"):
        exchange.receive(200, {})

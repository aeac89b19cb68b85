r"""State machine of a single HTTP exchange.

State transitions:
    SENDING -> RESPONSE_RECEIVED: status line and headers received
    RESPONSE_RECEIVED -> ACCUMULATING_BODY: body reading started
    ACCUMULATING_BODY -> COMPLETE: end of body
    SENDING/RESPONSE_RECEIVED/ACCUMULATING_BODY -> TRANSPORT_ERROR: socket failure
"""

from __future__ import annotations

__all__ = ["Exchange", "ExchangeState", "ExchangeStateError"]

import codecs
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)


class ExchangeState(Enum):
    """Lifecycle states of an exchange."""

    SENDING = auto()
    RESPONSE_RECEIVED = auto()
    ACCUMULATING_BODY = auto()
    COMPLETE = auto()
    TRANSPORT_ERROR = auto()


class ExchangeStateError(RuntimeError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: ExchangeState, to_state: ExchangeState) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid exchange state transition: {from_state.name} -> {to_state.name}")


class Exchange:
    """Track one request/response exchange and accumulate its body.

    Body chunks are decoded incrementally as UTF-8, so multi-byte
    characters split across chunks are decoded correctly.

    Args:
        method: The HTTP method.
        url: The requested URL.

    Example:
        ```pycon
        >>> from cilclient.http.exchange import Exchange, ExchangeState
        >>> exchange = Exchange("GET", "https://api.example.com/1.1/a.json")
        >>> exchange.receive(200, {"content-type": "application/json"})
        >>> exchange.begin_body()
        >>> exchange.feed(b'{"ok": ')
        >>> exchange.feed(b"true}")
        >>> exchange.finish()
        >>> exchange.state is ExchangeState.COMPLETE
        True
        >>> exchange.body
        '{"ok": true}'

        ```
    """

    VALID_TRANSITIONS: ClassVar[dict[ExchangeState, set[ExchangeState]]] = {
        ExchangeState.SENDING: {ExchangeState.RESPONSE_RECEIVED, ExchangeState.TRANSPORT_ERROR},
        ExchangeState.RESPONSE_RECEIVED: {
            ExchangeState.ACCUMULATING_BODY,
            ExchangeState.TRANSPORT_ERROR,
        },
        ExchangeState.ACCUMULATING_BODY: {ExchangeState.COMPLETE, ExchangeState.TRANSPORT_ERROR},
        ExchangeState.COMPLETE: set(),
        ExchangeState.TRANSPORT_ERROR: set(),
    }

    def __init__(self, method: str, url: str) -> None:
        self.method = method
        self.url = url
        self.status_code: int | None = None
        self.headers: dict[str, str] = {}
        self.error: BaseException | None = None
        self._state = ExchangeState.SENDING
        self._chunks: list[str] = []
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def state(self) -> ExchangeState:
        return self._state

    @property
    def body(self) -> str:
        """The body text accumulated so far."""
        return "".join(self._chunks)

    def transition(self, to_state: ExchangeState) -> None:
        """Move to ``to_state``.

        Raises:
            ExchangeStateError: If the transition is not allowed.
        """
        if to_state not in self.VALID_TRANSITIONS[self._state]:
            raise ExchangeStateError(self._state, to_state)
        logger.debug(f"{self.method} {self.url}: {self._state.name} -> {to_state.name}")
        self._state = to_state

    def receive(self, status_code: int, headers: Mapping[str, str]) -> None:
        self.transition(ExchangeState.RESPONSE_RECEIVED)
        self.status_code = status_code
        self.headers = dict(headers)

    def begin_body(self) -> None:
        self.transition(ExchangeState.ACCUMULATING_BODY)

    def feed(self, chunk: bytes) -> None:
        if self._state is not ExchangeState.ACCUMULATING_BODY:
            raise ExchangeStateError(self._state, ExchangeState.ACCUMULATING_BODY)
        self._chunks.append(self._decoder.decode(chunk))

    def finish(self) -> None:
        self._chunks.append(self._decoder.decode(b"", final=True))
        self.transition(ExchangeState.COMPLETE)

    def fail(self, error: BaseException) -> None:
        self.transition(ExchangeState.TRANSPORT_ERROR)
        self.error = error

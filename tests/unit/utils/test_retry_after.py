from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from cilclient.utils.retry_after import parse_retry_after

#######################################
#     Tests for parse_retry_after     #
#######################################


@pytest.mark.parametrize(("value", "expected"), [("0", 0.0), ("15", 15.0), ("2.5", 2.5), ("-3", 0.0)])
def test_parse_retry_after_seconds(value: str, expected: float) -> None:
    assert parse_retry_after(value) == expected


def test_parse_retry_after_none() -> None:
    assert parse_retry_after(None) is None


@pytest.mark.parametrize("value", ["", "soon"])
def test_parse_retry_after_invalid(value: str) -> None:
    assert parse_retry_after(value) is None


def test_parse_retry_after_http_date_future() -> None:
    value = format_datetime(datetime.now(timezone.utc) + timedelta(seconds=60), usegmt=True)
    assert 55.0 <= parse_retry_after(value) <= 60.0


def test_parse_retry_after_http_date_past() -> None:
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0

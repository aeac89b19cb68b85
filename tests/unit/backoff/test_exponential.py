from __future__ import annotations

import pytest

from cilclient.backoff import ExponentialBackoff

########################################
#     Tests for ExponentialBackoff     #
########################################


def test_exponential_backoff_default() -> None:
    backoff = ExponentialBackoff()
    assert backoff.base_delay == 0.3
    assert backoff.max_delay is None


@pytest.mark.parametrize(("attempt", "expected"), [(0, 1.0), (1, 2.0), (2, 4.0), (3, 8.0)])
def test_exponential_backoff_calculate(attempt: int, expected: float) -> None:
    assert ExponentialBackoff(base_delay=1.0).calculate(attempt) == expected


def test_exponential_backoff_max_delay() -> None:
    backoff = ExponentialBackoff(base_delay=1.0, max_delay=5.0)
    assert backoff.calculate(2) == 4.0
    assert backoff.calculate(3) == 5.0
    assert backoff.calculate(10) == 5.0


def test_exponential_backoff_zero_base_delay() -> None:
    assert ExponentialBackoff(base_delay=0.0).calculate(4) == 0.0


def test_exponential_backoff_invalid() -> None:
    with pytest.raises(ValueError, match=r"base_delay must be non-negative"):
        ExponentialBackoff(base_delay=-0.5)

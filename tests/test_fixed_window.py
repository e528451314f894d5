"""Unit tests for the fixed-window limiter."""

import pytest

from ratekeeper.adapters.rate_limit.fixed_window import FixedWindowLimiter
from ratekeeper.core.errors import ConfigurationError


def test_allows_up_to_limit_then_resets_on_new_window() -> None:
    limiter = FixedWindowLimiter(window_size_ms=1000, max_requests=3)

    assert limiter.admit("user1", 0) is True
    assert limiter.admit("user1", 100) is True
    assert limiter.admit("user1", 200) is True
    assert limiter.admit("user1", 300) is False
    assert limiter.admit("user1", 900) is False

    assert limiter.admit("user1", 1000) is True
    assert limiter.admit("user1", 1100) is True
    assert limiter.admit("user1", 1200) is True
    assert limiter.admit("user1", 1300) is False


def test_isolated_by_key() -> None:
    limiter = FixedWindowLimiter(window_size_ms=1000, max_requests=2)

    assert [limiter.admit("user1", t) for t in (0, 100, 200)] == [True, True, False]
    assert [limiter.admit("user2", t) for t in (50, 150, 250)] == [True, True, False]


def test_window_boundaries_are_half_open() -> None:
    limiter = FixedWindowLimiter(window_size_ms=5000, max_requests=1)

    assert limiter.admit("user1", 0) is True
    assert limiter.admit("user1", 4999) is False
    assert limiter.admit("user1", 5000) is True
    assert limiter.admit("user1", 9999) is False
    assert limiter.admit("user1", 10000) is True


def test_long_gap_starts_fresh_window() -> None:
    limiter = FixedWindowLimiter(window_size_ms=1000, max_requests=2)

    assert limiter.admit("user1", 0) is True
    assert limiter.admit("user1", 100) is True

    assert limiter.admit("user1", 100000) is True
    assert limiter.admit("user1", 100100) is True
    assert limiter.admit("user1", 100200) is False


def test_burst_straddling_boundary_admits_twice_the_limit() -> None:
    limiter = FixedWindowLimiter(window_size_ms=1000, max_requests=3)

    before = [limiter.admit("k", t) for t in (997, 998, 999)]
    after = [limiter.admit("k", t) for t in (1000, 1001, 1002)]

    assert before == [True, True, True]
    assert after == [True, True, True]


def test_count_never_exceeds_limit_within_a_window() -> None:
    limiter = FixedWindowLimiter(window_size_ms=1000, max_requests=4)

    admitted = sum(limiter.admit("k", 2000 + i * 7) for i in range(100))

    assert admitted == 4
    state = limiter._state_by_key["k"]
    assert state.window_start == 2000
    assert state.count == 4


def test_earlier_timestamp_is_charged_to_current_window() -> None:
    limiter = FixedWindowLimiter(window_size_ms=1000, max_requests=2)

    assert limiter.admit("k", 1500) is True
    assert limiter.admit("k", 400) is True
    assert limiter.admit("k", 300) is False
    assert limiter._state_by_key["k"].window_start == 1000

    assert limiter.admit("k", 2000) is True


def test_prune_evicts_only_finished_windows() -> None:
    limiter = FixedWindowLimiter(window_size_ms=1000, max_requests=2)
    limiter.admit("a", 0)
    limiter.admit("b", 1500)

    assert limiter.prune(1999) == 1
    assert len(limiter) == 1
    assert limiter.prune(2000) == 1
    assert len(limiter) == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"window_size_ms": 0, "max_requests": 1},
        {"window_size_ms": 1000, "max_requests": 0},
        {"window_size_ms": -5, "max_requests": 1},
        {"window_size_ms": 1000, "max_requests": -1},
        {"window_size_ms": 1000.5, "max_requests": 1},
        {"window_size_ms": True, "max_requests": 1},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ConfigurationError):
        FixedWindowLimiter(**kwargs)

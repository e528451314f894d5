"""Sliding-window counter rate limiter.

Approximates the sliding-window log with two fixed-window counters per key:
the previous window's count is weighted by how much of it still overlaps the
trailing window. O(1) time and memory, but near boundaries it can admit
slightly more or fewer requests than the exact log variant.
"""

from __future__ import annotations

from dataclasses import dataclass

from ratekeeper.adapters.rate_limit.base import AbstractRateLimiter, require_positive_int


@dataclass
class _CounterState:
    current_window_start: int
    current_count: int = 0
    previous_count: int = 0


class SlidingWindowCounterLimiter(AbstractRateLimiter):
    """Rate limiter using a weighted estimate over two adjacent windows.

    ``estimate = previous_count * (1 - elapsed_fraction) + current_count``,
    where ``elapsed_fraction`` is how far the timestamp is into the current
    fixed window. Requests are admitted while the estimate is below
    ``max_requests``.
    """

    algorithm = "sliding_window_counter"

    def __init__(self, *, window_size_ms: int, max_requests: int) -> None:
        super().__init__()
        self._window_size_ms = require_positive_int(self.algorithm, "window_size_ms", window_size_ms)
        self._max_requests = require_positive_int(self.algorithm, "max_requests", max_requests)
        self._state_by_key: dict[str, _CounterState] = {}
        self._log_created(window_size_ms=window_size_ms, max_requests=max_requests)

    def _get_window_start(self, timestamp_ms: int) -> int:
        return (timestamp_ms // self._window_size_ms) * self._window_size_ms

    def _roll_window(self, state: _CounterState, window_start: int) -> None:
        """Advance ``state`` to ``window_start``, shifting or clearing counts."""
        if window_start - state.current_window_start == self._window_size_ms:
            state.previous_count = state.current_count
        else:
            # More than one window elapsed: the previous window saw nothing.
            state.previous_count = 0
        state.current_count = 0
        state.current_window_start = window_start

    def _estimate(self, state: _CounterState, timestamp_ms: int) -> float:
        elapsed_fraction = (timestamp_ms - state.current_window_start) / self._window_size_ms
        overlap_weight = 1 - elapsed_fraction
        return state.previous_count * overlap_weight + state.current_count

    def _admit_locked(self, key: str, timestamp_ms: int) -> bool:
        window_start = self._get_window_start(timestamp_ms)
        state = self._state_by_key.get(key)

        if state is None:
            state = _CounterState(current_window_start=window_start)
            self._state_by_key[key] = state
        elif window_start > state.current_window_start:
            self._roll_window(state, window_start)
        else:
            timestamp_ms = max(timestamp_ms, state.current_window_start)

        if self._estimate(state, timestamp_ms) < self._max_requests:
            state.current_count += 1
            return True

        return False

    def _is_decayed(self, state: _CounterState, timestamp_ms: int) -> bool:
        window_start = self._get_window_start(timestamp_ms)
        return window_start - state.current_window_start >= 2 * self._window_size_ms

"""Rate limiter interfaces.

Callers should depend on this abstraction (not a concrete algorithm) so the
strategy can be swapped through configuration without touching call sites.

Every limiter owns a private state table keyed by caller identity, guarded by
a single lock. Timestamps are supplied by the caller in milliseconds; the
limiters never read a clock.
"""

from __future__ import annotations

import logging
import math
import threading
from abc import ABC, abstractmethod
from typing import Any

from ratekeeper.core.errors import ConfigurationError
from ratekeeper.core.keys import hash_key

logger = logging.getLogger(__name__)

# Absorbs binary rounding in accumulated refill/leak amounts (e.g. ten
# refills of 0.1 tokens summing to 0.9999999999999999).
FLOAT_TOLERANCE = 1e-9


def require_positive_int(algorithm: str, name: str, value: Any) -> int:
    """Validate an integer configuration value that must be >= 1.

    Raises:
        ConfigurationError: If value is not an int (bools excluded) or < 1.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            code="limiter_invalid_config",
            message=f"{name} must be an integer",
            details={"algorithm": algorithm, "parameter": name, "actual_value": value},
        )
    if value < 1:
        raise ConfigurationError(
            code="limiter_invalid_config",
            message=f"{name} must be >= 1",
            details={"algorithm": algorithm, "parameter": name, "actual_value": value},
        )
    return value


def require_positive_number(algorithm: str, name: str, value: Any) -> float:
    """Validate a real configuration value that must be finite and > 0.

    Raises:
        ConfigurationError: If value is not a finite number (bools excluded) or <= 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(
            code="limiter_invalid_config",
            message=f"{name} must be a number",
            details={"algorithm": algorithm, "parameter": name, "actual_value": value},
        )
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(
            code="limiter_invalid_config",
            message=f"{name} must be a finite number > 0",
            details={"algorithm": algorithm, "parameter": name, "actual_value": value},
        )
    return float(value)


class AbstractRateLimiter(ABC):
    """Interface and shared bookkeeping for per-key rate limiters.

    Subclasses implement ``_admit_locked`` (the per-key read-modify-write) and
    ``_is_decayed`` (whether a key's state is back to its empty default). The
    base class serializes both behind one re-entrant lock, so concurrent
    ``admit`` calls for the same key can never both pass the admission check.

    Timestamp regression policy: a timestamp earlier than the key's stored
    reference point (window start, newest logged request, last refill or last
    leak) is clamped to that point, so elapsed time is never negative.
    """

    algorithm: str = "abstract"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._state_by_key: dict[str, Any] = {}
        self._admitted = 0
        self._rejected = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._state_by_key)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"{type(self).__name__}(keys={len(self)})"

    def admit(self, key: str, timestamp_ms: int) -> bool:
        """Decide whether an event for ``key`` at ``timestamp_ms`` is admitted.

        This method both checks the key's current usage and mutates its state
        when the event is admitted. It never raises.

        Args:
            key: Caller identity (e.g., user or client id).
            timestamp_ms: Event time in milliseconds, non-negative.

        Returns:
            True if admitted, False if throttled.
        """
        with self._lock:
            allowed = self._admit_locked(key, timestamp_ms)
            if allowed:
                self._admitted += 1
            else:
                self._rejected += 1

        if not allowed and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "rate_limit.rejected",
                extra={
                    "algorithm": self.algorithm,
                    "key_hash": hash_key(key),
                    "timestamp_ms": timestamp_ms,
                },
            )
        return allowed

    def prune(self, timestamp_ms: int) -> int:
        """Evict keys whose state has fully decayed as of ``timestamp_ms``.

        Tables otherwise grow with every distinct key ever seen. Callers with
        many short-lived identities should call this periodically.

        Returns:
            Number of keys evicted.
        """
        with self._lock:
            stale = [
                key
                for key, state in self._state_by_key.items()
                if self._is_decayed(state, timestamp_ms)
            ]
            for key in stale:
                del self._state_by_key[key]
            remaining = len(self._state_by_key)

        if stale:
            logger.debug(
                "rate_limit.pruned",
                extra={
                    "algorithm": self.algorithm,
                    "evicted": len(stale),
                    "entries": remaining,
                },
            )
        return len(stale)

    def reset(self, key: str) -> None:
        """Forget all state for ``key``; unknown keys are ignored."""
        with self._lock:
            self._state_by_key.pop(key, None)

    def stats(self) -> dict[str, int | str]:
        """Return lightweight limiter metrics without exposing keys."""
        with self._lock:
            return {
                "algorithm": self.algorithm,
                "keys": len(self._state_by_key),
                "admitted": self._admitted,
                "rejected": self._rejected,
            }

    def _log_created(self, **config: int | float) -> None:
        logger.info(
            "rate_limit.created",
            extra={"algorithm": self.algorithm, **config},
        )

    @abstractmethod
    def _admit_locked(self, key: str, timestamp_ms: int) -> bool:
        """Apply one admission decision; the caller holds the lock."""
        raise NotImplementedError

    @abstractmethod
    def _is_decayed(self, state: Any, timestamp_ms: int) -> bool:
        """Whether ``state`` is equivalent to an unseen key at ``timestamp_ms``."""
        raise NotImplementedError

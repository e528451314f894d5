"""Library-level exception types.

Limiters only fail at construction time; ``admit`` itself never raises. The
error types below keep those construction failures consistent and easy to log.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and callers.

    Fields are optional so each error can carry only what applies to it.
    """

    code: str
    message: str
    hint: str
    parameter: str
    actual_value: Any
    algorithm: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for ratekeeper failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ConfigurationError(AppError):
    """Raised when a limiter is constructed with invalid configuration."""

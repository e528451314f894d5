"""Library configuration using Pydantic Settings.

Nothing is read at import time. ``load_settings()`` resolves ``LIMITER_*`` and
``LOG_*`` environment variables (optionally merged with a dotenv file) when
called, so constructing a limiter directly never depends on the environment.
Only ``create_rate_limiter()`` and ``configure_logging()`` called without
arguments go through it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ratekeeper.core.errors import ConfigurationError

# Points at a dotenv file to merge under the process environment
ENV_FILE_VARIABLE = "RATEKEEPER_ENV_FILE"


class LimiterSettings(BaseSettings):
    """Which algorithm to build and how to size it.

    Only the fields relevant to the selected algorithm are used. Values are
    validated by the limiter constructors, which raise ConfigurationError.
    """

    algorithm: str = Field(
        "fixed_window",
        description=(
            "Algorithm name: fixed_window, sliding_window_log, "
            "sliding_window_counter, token_bucket, leaky_bucket"
        ),
    )
    window_size_ms: int = Field(
        60_000,
        description="Window length in milliseconds (window-based algorithms)",
    )
    max_requests: int = Field(
        60,
        description="Maximum admitted requests per window (window-based algorithms)",
    )
    capacity: float = Field(
        10.0,
        description="Bucket capacity (token and leaky bucket)",
    )
    refill_rate_per_second: float = Field(
        1.0,
        description="Tokens added per second (token bucket)",
    )
    leak_rate_per_second: float = Field(
        1.0,
        description="Queued requests drained per second (leaky bucket)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LIMITER_",
        case_sensitive=False,
        extra="ignore",
    )


class LogSettings(BaseSettings):
    """Output configuration for the ``ratekeeper`` logger."""

    level: str = Field("INFO", description="Level for the ratekeeper logger")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(
        None,
        description="Log file path when output=file",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Rotated log files to keep")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Settings container grouping limiter and logging configuration."""

    limiter: LimiterSettings = Field(default_factory=LimiterSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Resolve settings from the environment and an optional dotenv file.

    Nested BaseSettings don't inherit ``env_file`` from their container, so the
    file is handed to each section. Process environment variables win over
    values in the file, and ``os.environ`` is left untouched.

    Args:
        env_file: Dotenv file to read. Defaults to ``$RATEKEEPER_ENV_FILE``;
            when neither is set only the process environment is used.

    Returns:
        Settings: A freshly resolved settings object.

    Raises:
        ConfigurationError: If the file is missing or a value cannot be parsed.
    """
    env_file = env_file or os.getenv(ENV_FILE_VARIABLE) or None

    if env_file is not None and not Path(env_file).is_file():
        raise ConfigurationError(
            code="limiter_invalid_settings",
            message=f"Settings file not found: {env_file}",
            details={"parameter": "env_file", "actual_value": str(env_file)},
        )

    try:
        return Settings(
            limiter=LimiterSettings(_env_file=env_file),
            log=LogSettings(_env_file=env_file),
        )
    except ValidationError as exc:
        first = exc.errors()[0]
        raise ConfigurationError(
            code="limiter_invalid_settings",
            message=f"Invalid settings: {first['msg']}",
            details={
                "parameter": ".".join(str(part) for part in first["loc"]),
                "actual_value": first.get("input"),
                "context": {"error_count": exc.error_count()},
            },
        ) from exc

"""Tests for environment-driven settings."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from ratekeeper.core.config import LimiterSettings, LogSettings, Settings, load_settings
from ratekeeper.core.errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def test_limiter_defaults() -> None:
    cfg = LimiterSettings()

    assert cfg.algorithm == "fixed_window"
    assert cfg.window_size_ms == 60_000
    assert cfg.max_requests == 60


def test_limiter_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LIMITER_ALGORITHM", "leaky_bucket")
    monkeypatch.setenv("LIMITER_CAPACITY", "7")
    monkeypatch.setenv("limiter_leak_rate_per_second", "1.5")

    cfg = LimiterSettings()

    assert cfg.algorithm == "leaky_bucket"
    assert cfg.capacity == 7.0
    assert cfg.leak_rate_per_second == 1.5


def test_log_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "plain")

    cfg = load_settings()

    assert isinstance(cfg, Settings)
    assert cfg.log.level == "debug"
    assert cfg.log.format == "plain"
    assert isinstance(cfg.limiter, LimiterSettings)
    assert isinstance(LogSettings(), LogSettings)


def test_env_file_is_read_without_touching_os_environ(tmp_path: Path) -> None:
    env_file = tmp_path / "ratekeeper.env"
    env_file.write_text(
        "LIMITER_ALGORITHM=token_bucket\nLIMITER_CAPACITY=3\nLOG_LEVEL=WARNING\nUNRELATED=1\n",
        encoding="utf-8",
    )

    cfg = load_settings(env_file)

    assert cfg.limiter.algorithm == "token_bucket"
    assert cfg.limiter.capacity == 3.0
    assert cfg.log.level == "WARNING"
    assert "LIMITER_ALGORITHM" not in os.environ


def test_process_environment_overrides_env_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    env_file = tmp_path / "ratekeeper.env"
    env_file.write_text("LIMITER_MAX_REQUESTS=5\n", encoding="utf-8")
    monkeypatch.setenv("LIMITER_MAX_REQUESTS", "9")

    assert load_settings(env_file).limiter.max_requests == 9


def test_missing_env_file_raises_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(tmp_path / "absent.env")

    assert exc_info.value.code == "limiter_invalid_settings"


def test_unparseable_value_raises_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_BACKUP_COUNT", "several")

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings()

    assert exc_info.value.code == "limiter_invalid_settings"
    assert exc_info.value.details is not None
    assert exc_info.value.details["parameter"] == "backup_count"


def test_malformed_environment_does_not_affect_direct_construction() -> None:
    env = {**os.environ, "LIMITER_MAX_REQUESTS": "lots", "LIMITER_CAPACITY": "-1"}
    code = (
        "from ratekeeper.adapters.rate_limit.token_bucket import TokenBucketLimiter\n"
        "limiter = TokenBucketLimiter(capacity=1, refill_rate_per_second=1)\n"
        "assert limiter.admit('k', 0) is True\n"
        "assert limiter.admit('k', 0) is False\n"
    )

    result = subprocess.run(
        [sys.executable, "-c", code],
        cwd=PROJECT_ROOT,
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert result.returncode == 0, result.stderr

"""Structured output for limiter events.

Limiters log through ``logging.getLogger("ratekeeper...")`` and never install
handlers themselves. Applications that want the events opt in with
``configure_logging``, which attaches one handler to the ``ratekeeper`` logger:
JSON (or plain) lines on stdout or a rotating file.

Events carry ``algorithm`` plus, depending on the event, ``key_hash``,
``timestamp_ms``, the limiter's constructor parameters or prune counts. Raw
caller identities passed under an identity field are replaced by their hash.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ratekeeper.core.config import LogSettings, load_settings
from ratekeeper.core.keys import hash_key

LIBRARY_LOGGER = "ratekeeper"

# Fields that may hold a raw caller identity
IDENTITY_FIELDS = frozenset({"key", "limiter_key", "client_id", "user_id"})

EVENT_FIELDS = (
    "algorithm",
    "key_hash",
    "timestamp_ms",
    "window_size_ms",
    "max_requests",
    "capacity",
    "refill_rate_per_second",
    "leak_rate_per_second",
    "evicted",
    "entries",
)


class IdentityHashingFilter(logging.Filter):
    """Swap raw identities on the record for their ``hash_key`` digest."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for name in IDENTITY_FIELDS:
            value = record.__dict__.get(name)
            if value is not None:
                setattr(record, name, hash_key(str(value)))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per event with the known limiter fields."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in (*EVENT_FIELDS, *sorted(IDENTITY_FIELDS)):
            if name in record.__dict__:
                payload[name] = record.__dict__[name]
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def _build_handler(log_settings: LogSettings) -> logging.Handler:
    if log_settings.output.lower() != "file":
        return logging.StreamHandler(sys.stdout)

    file_path = Path(log_settings.file_path or "logs/ratekeeper.log")
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if not log_settings.max_bytes:
        return logging.FileHandler(file_path, encoding="utf-8")
    return RotatingFileHandler(
        file_path,
        maxBytes=log_settings.max_bytes,
        backupCount=log_settings.backup_count,
        encoding="utf-8",
    )


def configure_logging(log_settings: LogSettings | None = None) -> logging.Logger:
    """Route limiter events to the configured output.

    Only the ``ratekeeper`` logger is touched; the root logger and other
    libraries keep their configuration. Calling it again replaces the handler
    installed by the previous call.

    Args:
        log_settings: Output settings; resolved with ``load_settings()`` if omitted.

    Returns:
        logging.Logger: The configured ``ratekeeper`` logger.
    """
    cfg = log_settings or load_settings().log
    library_logger = logging.getLogger(LIBRARY_LOGGER)

    for handler in [h for h in library_logger.handlers if getattr(h, "_ratekeeper", False)]:
        library_logger.removeHandler(handler)
        handler.close()

    handler = _build_handler(cfg)
    handler._ratekeeper = True  # type: ignore[attr-defined]
    handler.addFilter(IdentityHashingFilter())
    if cfg.format.lower() == "plain":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())

    library_logger.addHandler(handler)
    library_logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))
    library_logger.propagate = False
    return library_logger

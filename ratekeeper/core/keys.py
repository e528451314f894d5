"""Helpers for referring to caller identities without exposing them."""

from __future__ import annotations

import hashlib


def hash_key(key: str) -> str:
    """Hash a rate limit key for logging without exposing the identity."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]

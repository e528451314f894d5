"""Pytest configuration shared across all test modules.

Settings are resolved from the environment on demand, so developer shells
exporting LIMITER_*/LOG_* variables or a settings file must not leak in.
"""

import os

for _name in list(os.environ):
    if _name.startswith(("LIMITER_", "LOG_")) or _name == "RATEKEEPER_ENV_FILE":
        del os.environ[_name]

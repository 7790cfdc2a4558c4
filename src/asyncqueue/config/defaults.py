"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default runner settings
DEFAULT_CONCURRENCY = 5
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_BACKOFF_BASE = 0.1  # seconds; waits are 1x, 2x, 3x ... this

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "concurrency": DEFAULT_CONCURRENCY,
        "retry_attempts": DEFAULT_RETRY_ATTEMPTS,
        "backoff_base": DEFAULT_BACKOFF_BASE,
        "log_level": DEFAULT_LOG_LEVEL,
    }

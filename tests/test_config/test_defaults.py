"""Tests for package defaults."""

from asyncqueue.config.defaults import (
    DEFAULT_BACKOFF_BASE,
    DEFAULT_CONCURRENCY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RETRY_ATTEMPTS,
    get_defaults,
)


class TestDefaults:
    def test_default_retry_attempts(self):
        assert DEFAULT_RETRY_ATTEMPTS == 3

    def test_default_backoff_base(self):
        assert DEFAULT_BACKOFF_BASE == 0.1

    def test_default_log_level(self):
        assert DEFAULT_LOG_LEVEL == "WARNING"

    def test_get_defaults_has_all_keys(self):
        d = get_defaults()
        assert set(d) == {"concurrency", "retry_attempts", "backoff_base", "log_level"}
        assert d["concurrency"] == DEFAULT_CONCURRENCY

import asyncio

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config files and ASYNCQUEUE_* env vars out of tests."""
    for key in (
        "ASYNCQUEUE_CONCURRENCY",
        "ASYNCQUEUE_RETRY_ATTEMPTS",
        "ASYNCQUEUE_BACKOFF_BASE",
        "ASYNCQUEUE_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(
        "asyncqueue.config.hierarchy._GLOBAL_CONFIG_PATH",
        tmp_path / "global" / "config.yaml",
    )
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def delayed():
    """Factory for tasks that sleep ``ms`` milliseconds then return ``value``."""

    def make(ms, value=None):
        async def task():
            await asyncio.sleep(ms / 1000)
            return value

        return task

    return make


@pytest.fixture
def flaky():
    """Factory for a task that fails ``failures`` times, then returns ``value``.

    The returned task exposes ``calls`` as an attribute.
    """

    def make(failures, value="ok", message="fail"):
        async def task():
            task.calls += 1
            if task.calls <= failures:
                raise RuntimeError(message)
            return value

        task.calls = 0
        return task

    return make

"""Tests for the cancellation token."""

import asyncio
import time

from asyncqueue.concurrency.cancellation import CancelToken


class TestCancelToken:
    async def test_starts_uncancelled(self):
        assert CancelToken().cancelled is False

    async def test_cancel_is_one_way(self):
        token = CancelToken()
        assert token.cancel() is True
        assert token.cancel() is False
        assert token.cancelled is True

    async def test_sleep_runs_to_timeout(self):
        token = CancelToken()
        assert await token.sleep(0.01) is False

    async def test_sleep_interrupted(self):
        token = CancelToken()
        asyncio.get_running_loop().call_later(0.02, token.cancel)
        started = time.monotonic()
        interrupted = await token.sleep(5.0)
        assert interrupted is True
        assert time.monotonic() - started < 1.0

    async def test_sleep_skipped_when_already_cancelled(self):
        token = CancelToken()
        token.cancel()
        assert await token.sleep(5.0) is True

    async def test_wait(self):
        token = CancelToken()
        asyncio.get_running_loop().call_soon(token.cancel)
        await asyncio.wait_for(token.wait(), timeout=1.0)
        assert token.cancelled is True

"""One-way cancellation signal shared by every dispatch chain of a run."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class CancelToken:
    """Broadcast cancellation flag backed by an asyncio.Event.

    Once cancelled it stays cancelled. Chains poll ``cancelled`` between
    steps; backoff waits use ``sleep`` so they end early on cancellation.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Set the flag. Returns True if this call flipped it."""
        if self._event.is_set():
            return False
        self._event.set()
        logger.debug("Cancellation token set")
        return True

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, seconds: float) -> bool:
        """Sleep up to ``seconds``, returning early if cancelled.

        Returns True if the sleep was cut short (or skipped) by cancellation.
        """
        if self._event.is_set():
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except TimeoutError:
            return False
        return True

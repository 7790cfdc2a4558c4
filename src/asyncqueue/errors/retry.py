"""Retry executor — runs one task with bounded retries and cancellation."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)

from asyncqueue.config.defaults import DEFAULT_BACKOFF_BASE
from asyncqueue.types import TaskResult

if TYPE_CHECKING:
    from asyncqueue.concurrency.cancellation import CancelToken

logger = logging.getLogger(__name__)


def compute_wait(attempt: int, backoff_base: float = DEFAULT_BACKOFF_BASE) -> float:
    """Wait before the retry that follows zero-based ``attempt``.

    Grows linearly with no jitter: 0.1s, 0.2s, 0.3s, ... at the default base.
    """
    return backoff_base * (attempt + 1)


class _TokenCancelled(Exception):
    """Raised inside the retry loop when the cancel token is seen set."""


def _is_retryable(exc: BaseException) -> bool:
    """Only ordinary task failures are retried; asyncio cancellation propagates."""
    return isinstance(exc, Exception) and not isinstance(exc, _TokenCancelled)


async def invoke(task: Callable[[], Any]) -> Any:
    """Call a zero-argument task and await its result if it returned an awaitable."""
    result = task()
    if inspect.isawaitable(result):
        result = await result
    return result


def _label(index: int | None) -> str:
    return "Task" if index is None else f"Task {index}"


def _log_before_retry(
    index: int | None, max_retries: int, token: CancelToken
) -> Callable[[RetryCallState], None]:
    label = _label(index)

    def _log(retry_state: RetryCallState) -> None:
        if token.cancelled:
            return
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "%s failed (attempt %d/%d): %s. Retrying in %.2fs",
            label,
            retry_state.attempt_number,
            max_retries + 1,
            exc,
            wait,
        )

    return _log


async def execute_with_retry(
    task: Callable[[], Any],
    max_retries: int,
    token: CancelToken,
    backoff_base: float = DEFAULT_BACKOFF_BASE,
    index: int | None = None,
) -> TaskResult:
    """Execute a task with up to ``max_retries`` retries after the first attempt.

    Cancellation is checked before every attempt, including the first, and
    backoff waits end early when the token fires; the following check then
    yields a cancelled result rather than another attempt.

    Never raises for task failures or cancellation. Every outcome comes back
    as a TaskResult: success with the value, or captured with the last error.
    """
    attempts = 0
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=lambda rs: compute_wait(rs.attempt_number - 1, backoff_base),
        retry=retry_if_exception(_is_retryable),
        sleep=token.sleep,
        before_sleep=_log_before_retry(index, max_retries, token),
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                if token.cancelled:
                    raise _TokenCancelled()
                attempts += 1
                value = await invoke(task)
    except _TokenCancelled:
        logger.debug("%s cancelled after %d attempt(s)", _label(index), attempts)
        return TaskResult.cancelled_result(attempts=attempts)
    except Exception as exc:
        logger.info("%s exhausted %d attempt(s): %s", _label(index), attempts, exc)
        return TaskResult.captured(exc, attempts=attempts)

    return TaskResult.success(value, attempts=attempts)

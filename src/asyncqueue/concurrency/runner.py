"""Bounded-concurrency task runner with retries and cooperative cancellation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from asyncqueue.concurrency.cancellation import CancelToken
from asyncqueue.config.defaults import DEFAULT_BACKOFF_BASE, DEFAULT_RETRY_ATTEMPTS
from asyncqueue.errors.exceptions import (
    ConfigurationError,
    InvalidTasksError,
    RunnerBusyError,
)
from asyncqueue.errors.retry import execute_with_retry
from asyncqueue.types import RunnerConfig, RunSummary, TaskResult

logger = logging.getLogger(__name__)

Task = Callable[[], Any]


class RunState:
    """Bookkeeping for a single run() call. Never reused across runs."""

    def __init__(self, tasks: tuple[Task, ...]) -> None:
        self.tasks = tasks
        self.results: list[TaskResult | None] = [None] * len(tasks)
        self.next_index = 0
        self.running = 0
        self.max_running = 0
        self.token = CancelToken()

    @property
    def exhausted(self) -> bool:
        return self.next_index >= len(self.tasks)

    def claim(self) -> int | None:
        """Reserve the next unstarted index, or None if exhausted or cancelled.

        Contains no await, so no two chains can claim the same index.
        """
        if self.exhausted or self.token.cancelled:
            return None
        index = self.next_index
        self.next_index += 1
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        return index

    def complete(self, index: int, result: TaskResult) -> None:
        if self.results[index] is not None:
            raise RuntimeError(f"Result slot {index} written twice")
        self.results[index] = result
        self.running -= 1

    def finalize(self) -> list[TaskResult]:
        """Fill unclaimed or undetermined slots with the cancellation outcome."""
        return [r if r is not None else TaskResult.cancelled_result() for r in self.results]


class BoundedTaskRunner:
    """Runs zero-argument tasks with at most ``concurrency`` in flight.

    Each task is retried up to ``retry_attempts`` times after its first
    attempt. Results come back in input order, one per task, and never raise:
    failures are captured into the task's slot.
    """

    def __init__(
        self,
        concurrency: int,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        backoff_base: float = DEFAULT_BACKOFF_BASE,
    ) -> None:
        _validate_int("concurrency", concurrency, minimum=1)
        _validate_int("retry_attempts", retry_attempts, minimum=0)
        numeric = isinstance(backoff_base, (int, float)) and not isinstance(backoff_base, bool)
        if not numeric or backoff_base <= 0:
            raise ConfigurationError(
                f"backoff_base must be a positive number, got {backoff_base!r}",
                field="backoff_base",
                value=backoff_base,
            )

        self._concurrency = concurrency
        self._retry_attempts = retry_attempts
        self._backoff_base = float(backoff_base)
        self._state: RunState | None = None
        self._last_max_running = 0

    @classmethod
    def from_config(cls, config: RunnerConfig) -> BoundedTaskRunner:
        return cls(
            concurrency=config.concurrency,
            retry_attempts=config.retry_attempts,
            backoff_base=config.backoff_base,
        )

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def retry_attempts(self) -> int:
        return self._retry_attempts

    @property
    def is_running(self) -> bool:
        return self._state is not None

    @property
    def last_max_running(self) -> int:
        """Peak number of tasks in flight during the most recent run."""
        return self._last_max_running

    async def run(self, tasks: Sequence[Task]) -> list[TaskResult]:
        """Execute all tasks and return their results in input order."""
        task_tuple = _validate_tasks(tasks)
        if self._state is not None:
            raise RunnerBusyError("A run is already in progress on this runner")

        if not task_tuple:
            self._last_max_running = 0
            return []

        state = RunState(task_tuple)
        self._state = state
        chains = min(self._concurrency, len(task_tuple))
        logger.info(
            "Running %d task(s) with concurrency %d (retries=%d)",
            len(task_tuple),
            self._concurrency,
            self._retry_attempts,
        )

        workers = [
            asyncio.ensure_future(self._dispatch_chain(state, n)) for n in range(chains)
        ]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            # Abort path: no chain may outlive this run.
            state.token.cancel()
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise
        finally:
            self._state = None
            self._last_max_running = state.max_running

        results = state.finalize()
        summary = RunSummary.from_results(results)
        logger.info(
            "Run finished: %d succeeded, %d failed, %d cancelled",
            summary.succeeded,
            summary.failed,
            summary.cancelled,
        )
        return results

    def cancel_all(self) -> None:
        """Stop claiming new tasks and stop further retries. Idempotent.

        Tasks already executing run to completion.
        """
        state = self._state
        if state is None:
            logger.debug("cancel_all() called with no run in progress")
            return
        if state.token.cancel():
            logger.info(
                "Cancelling run: %d task(s) in flight, %d never started",
                state.running,
                len(state.tasks) - state.next_index,
            )

    async def _dispatch_chain(self, state: RunState, chain_id: int) -> None:
        while (index := state.claim()) is not None:
            logger.debug("Chain %d claimed task %d", chain_id, index)
            try:
                result = await execute_with_retry(
                    state.tasks[index],
                    self._retry_attempts,
                    state.token,
                    backoff_base=self._backoff_base,
                    index=index,
                )
            except Exception as exc:
                logger.error("Task %d failed unexpectedly: %s", index, exc)
                result = TaskResult.captured(exc)
            state.complete(index, result)
        logger.debug("Chain %d finished", chain_id)


def _validate_int(name: str, value: object, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        qualifier = "positive" if minimum == 1 else "non-negative"
        raise ConfigurationError(
            f"{name} must be a {qualifier} whole number, got {value!r}",
            field=name,
            value=value,
        )


def _validate_tasks(tasks: object) -> tuple[Task, ...]:
    if not isinstance(tasks, (list, tuple)):
        raise InvalidTasksError(
            f"Tasks must be a list or tuple, got {type(tasks).__name__}"
        )
    for i, task in enumerate(tasks):
        if not callable(task):
            raise InvalidTasksError(
                f"Task {i} is not callable: {type(task).__name__}", index=i
            )
    return tuple(tasks)

"""Top-level entry points: run_tasks(), run_tasks_sync()."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from asyncqueue.concurrency.runner import BoundedTaskRunner, Task
from asyncqueue.config.hierarchy import load_runner_config
from asyncqueue.types import TaskResult


async def run_tasks(
    tasks: Sequence[Task],
    concurrency: int | None = None,
    retry_attempts: int | None = None,
    backoff_base: float | None = None,
) -> list[TaskResult]:
    """Run tasks on a fresh runner built from the resolved configuration.

    Arguments left as None fall back to env vars, config files, then
    package defaults.
    """
    config = load_runner_config(
        concurrency=concurrency,
        retry_attempts=retry_attempts,
        backoff_base=backoff_base,
    )
    runner = BoundedTaskRunner.from_config(config)
    return await runner.run(tasks)


def run_tasks_sync(
    tasks: Sequence[Task],
    concurrency: int | None = None,
    retry_attempts: int | None = None,
    backoff_base: float | None = None,
) -> list[TaskResult]:
    """Run tasks to completion (sync wrapper)."""
    return asyncio.run(
        run_tasks(
            tasks,
            concurrency=concurrency,
            retry_attempts=retry_attempts,
            backoff_base=backoff_base,
        )
    )

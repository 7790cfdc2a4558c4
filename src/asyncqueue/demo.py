"""Built-in demo scenarios exercising every runner feature."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from asyncqueue.concurrency.runner import BoundedTaskRunner, Task
from asyncqueue.config.defaults import DEFAULT_BACKOFF_BASE
from asyncqueue.types import RunSummary, TaskResult

logger = logging.getLogger(__name__)


class ScenarioReport(BaseModel):
    """What a demo scenario ran and what came back."""

    name: str
    description: str
    concurrency: int
    retry_attempts: int
    results: list[TaskResult] = Field(default_factory=list)
    max_in_flight: int = 0
    elapsed_seconds: float = 0.0

    @property
    def summary(self) -> RunSummary:
        return RunSummary.from_results(self.results)


class Scenario(BaseModel):
    name: str
    description: str
    concurrency: int
    retry_attempts: int
    build: Callable[[], list[Task]]
    # Seconds after start at which cancel_all() is called, if any.
    cancel_after: float | None = None


def _delayed(ms: int, value: Any) -> Task:
    async def task() -> Any:
        await asyncio.sleep(ms / 1000)
        return value

    return task


def _failing(message: str) -> Task:
    async def task() -> Any:
        raise RuntimeError(message)

    return task


def _basic_tasks() -> list[Task]:
    return [
        _delayed(100, "Task 1"),
        _delayed(150, "Task 2"),
        _delayed(50, "Task 3"),
        _delayed(80, "Task 4"),
    ]


def _retry_tasks() -> list[Task]:
    attempts = 0

    async def flaky() -> str:
        nonlocal attempts
        attempts += 1
        logger.info("Attempt %d...", attempts)
        if attempts < 3:
            raise RuntimeError("Temporary failure")
        return f"Succeeded on attempt {attempts}!"

    return [flaky]


def _capture_tasks() -> list[Task]:
    return [_failing("Always fails")]


def _mixed_tasks() -> list[Task]:
    return [
        _delayed(0, "OK-1"),
        _failing("Fail-2"),
        _delayed(0, "OK-3"),
        _delayed(0, "OK-4"),
    ]


def _cancel_tasks() -> list[Task]:
    return [
        _delayed(50, "Done 1"),
        _delayed(200, "Done 2"),
        _delayed(100, "Done 3"),
        _delayed(100, "Done 4"),
        _delayed(100, "Done 5"),
    ]


def _order_tasks() -> list[Task]:
    return [
        _delayed(200, "first"),
        _delayed(50, "second"),
        _delayed(100, "third"),
        _delayed(30, "fourth"),
        _delayed(150, "fifth"),
    ]


SCENARIOS: dict[str, Scenario] = {
    s.name: s
    for s in [
        Scenario(
            name="basic",
            description="Four tasks, at most two at a time",
            concurrency=2,
            retry_attempts=3,
            build=_basic_tasks,
        ),
        Scenario(
            name="retry",
            description="Fails twice, succeeds on the third attempt",
            concurrency=1,
            retry_attempts=3,
            build=_retry_tasks,
        ),
        Scenario(
            name="capture",
            description="Always fails; error captured after all retries",
            concurrency=1,
            retry_attempts=3,
            build=_capture_tasks,
        ),
        Scenario(
            name="mixed",
            description="Successes and a failure side by side",
            concurrency=2,
            retry_attempts=2,
            build=_mixed_tasks,
        ),
        Scenario(
            name="cancel",
            description="cancel_all() after 120ms stops unstarted work",
            concurrency=2,
            retry_attempts=3,
            build=_cancel_tasks,
            cancel_after=0.12,
        ),
        Scenario(
            name="order",
            description="Tasks finish out of order; results keep input order",
            concurrency=5,
            retry_attempts=3,
            build=_order_tasks,
        ),
    ]
}


async def run_scenario(
    scenario: Scenario,
    concurrency: int | None = None,
    retry_attempts: int | None = None,
    backoff_base: float = DEFAULT_BACKOFF_BASE,
) -> ScenarioReport:
    """Run one scenario, optionally overriding its runner settings."""
    runner = BoundedTaskRunner(
        concurrency=concurrency if concurrency is not None else scenario.concurrency,
        retry_attempts=retry_attempts if retry_attempts is not None else scenario.retry_attempts,
        backoff_base=backoff_base,
    )
    started = time.monotonic()
    pending = asyncio.create_task(runner.run(scenario.build()))

    if scenario.cancel_after is not None:
        await asyncio.sleep(scenario.cancel_after)
        logger.info("Calling cancel_all() after %.0fms", scenario.cancel_after * 1000)
        runner.cancel_all()

    results = await pending
    return ScenarioReport(
        name=scenario.name,
        description=scenario.description,
        concurrency=runner.concurrency,
        retry_attempts=runner.retry_attempts,
        results=results,
        max_in_flight=runner.last_max_running,
        elapsed_seconds=time.monotonic() - started,
    )


async def run_scenarios(
    names: list[str],
    concurrency: int | None = None,
    retry_attempts: int | None = None,
    backoff_base: float = DEFAULT_BACKOFF_BASE,
    on_report: Callable[[ScenarioReport], None] | None = None,
) -> list[ScenarioReport]:
    """Run the named scenarios one after another."""
    reports: list[ScenarioReport] = []
    for name in names:
        report = await run_scenario(
            SCENARIOS[name],
            concurrency=concurrency,
            retry_attempts=retry_attempts,
            backoff_base=backoff_base,
        )
        reports.append(report)
        if on_report is not None:
            on_report(report)
    return reports

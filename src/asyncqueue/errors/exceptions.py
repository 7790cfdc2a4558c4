"""Custom exception hierarchy for asyncqueue."""

from __future__ import annotations

from typing import Any


class AsyncQueueError(Exception):
    """Base exception for all asyncqueue errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(AsyncQueueError):
    """Invalid runner settings — raised at construction, before any run.

    Examples: concurrency of 0, a float concurrency, negative retry budget.
    """

    def __init__(
        self,
        message: str = "",
        field: str | None = None,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidTasksError(AsyncQueueError):
    """The task collection passed to run() has the wrong shape."""

    def __init__(self, message: str = "", index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class RunnerBusyError(AsyncQueueError):
    """run() was called while a previous run on the same runner is in flight."""


class TaskCancelledError(AsyncQueueError):
    """Recorded in a task's result when cancellation stopped it.

    Never raised out of BoundedTaskRunner.run(); it only appears as the
    exception behind a cancelled TaskError. A task that raises it itself is
    an ordinary failure: whether a result counts as cancelled is decided by
    the run's cancel token.
    """

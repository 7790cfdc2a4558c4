"""Error handling — the asyncqueue exception hierarchy."""

from asyncqueue.errors.exceptions import (
    AsyncQueueError,
    ConfigurationError,
    InvalidTasksError,
    RunnerBusyError,
    TaskCancelledError,
)

__all__ = [
    "AsyncQueueError",
    "ConfigurationError",
    "InvalidTasksError",
    "RunnerBusyError",
    "TaskCancelledError",
]

"""asyncqueue — bounded-concurrency async task runner with retries and cancellation."""

from asyncqueue.concurrency.cancellation import CancelToken
from asyncqueue.concurrency.runner import BoundedTaskRunner
from asyncqueue.core import run_tasks, run_tasks_sync
from asyncqueue.errors.exceptions import (
    AsyncQueueError,
    ConfigurationError,
    InvalidTasksError,
    RunnerBusyError,
    TaskCancelledError,
)
from asyncqueue.errors.retry import compute_wait, execute_with_retry
from asyncqueue.types import (
    CANCELLED_MESSAGE,
    ResultStatus,
    RunnerConfig,
    RunSummary,
    TaskError,
    TaskResult,
)

__all__ = [
    "CANCELLED_MESSAGE",
    "AsyncQueueError",
    "BoundedTaskRunner",
    "CancelToken",
    "ConfigurationError",
    "InvalidTasksError",
    "ResultStatus",
    "RunSummary",
    "RunnerBusyError",
    "RunnerConfig",
    "TaskCancelledError",
    "TaskError",
    "TaskResult",
    "compute_wait",
    "execute_with_retry",
    "run_tasks",
    "run_tasks_sync",
]

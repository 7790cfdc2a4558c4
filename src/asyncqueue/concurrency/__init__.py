"""Concurrency — bounded task runner and cancellation token."""

from asyncqueue.concurrency.cancellation import CancelToken
from asyncqueue.concurrency.runner import BoundedTaskRunner, RunState

__all__ = ["BoundedTaskRunner", "CancelToken", "RunState"]

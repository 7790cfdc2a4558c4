"""Shared Pydantic models for asyncqueue."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from asyncqueue.config.defaults import (
    DEFAULT_BACKOFF_BASE,
    DEFAULT_CONCURRENCY,
    DEFAULT_RETRY_ATTEMPTS,
)
from asyncqueue.errors.exceptions import TaskCancelledError

CANCELLED_MESSAGE = "Task cancelled via cancel_all()"

# ── Enums ──


class ResultStatus(StrEnum):
    SUCCESS = "success"
    CAPTURED = "captured"


# ── Config models ──


class RunnerConfig(BaseModel):
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, gt=0, strict=True)
    retry_attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=0, strict=True)
    backoff_base: float = Field(default=DEFAULT_BACKOFF_BASE, gt=0)


# ── Runtime models ──


class TaskError(BaseModel):
    """Normalized failure carried by a captured result."""

    message: str
    error_type: str = "Exception"
    cancelled: bool = False
    exception: BaseException | None = Field(default=None, exclude=True, repr=False)
    model_config = {"arbitrary_types_allowed": True}

    @classmethod
    def from_exception(cls, exc: BaseException, cancelled: bool = False) -> TaskError:
        return cls(
            message=str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
            cancelled=cancelled,
            exception=exc,
        )


class TaskResult(BaseModel):
    """Outcome of one task, including all of its retries."""

    status: ResultStatus
    value: Any = None
    error: TaskError | None = None
    attempts: int = 0

    @classmethod
    def success(cls, value: Any, attempts: int = 1) -> TaskResult:
        return cls(status=ResultStatus.SUCCESS, value=value, attempts=attempts)

    @classmethod
    def captured(
        cls, exc: BaseException, attempts: int = 0, cancelled: bool = False
    ) -> TaskResult:
        return cls(
            status=ResultStatus.CAPTURED,
            error=TaskError.from_exception(exc, cancelled=cancelled),
            attempts=attempts,
        )

    @classmethod
    def cancelled_result(cls, attempts: int = 0) -> TaskResult:
        return cls.captured(
            TaskCancelledError(CANCELLED_MESSAGE), attempts=attempts, cancelled=True
        )

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def cancelled(self) -> bool:
        return self.error is not None and self.error.cancelled


class RunSummary(BaseModel):
    """Aggregate counts over an ordered result list."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    cancelled: int = 0
    attempts: int = 0

    @classmethod
    def from_results(cls, results: list[TaskResult]) -> RunSummary:
        cancelled = sum(1 for r in results if r.cancelled)
        succeeded = sum(1 for r in results if r.ok)
        return cls(
            total=len(results),
            succeeded=succeeded,
            failed=len(results) - succeeded - cancelled,
            cancelled=cancelled,
            attempts=sum(r.attempts for r in results),
        )

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.total if self.total > 0 else 0.0

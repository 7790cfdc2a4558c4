"""Tests for the built-in demo scenarios."""

from asyncqueue.demo import SCENARIOS, run_scenario, run_scenarios
from asyncqueue.types import ResultStatus


class TestScenarios:
    def test_registry(self):
        assert list(SCENARIOS) == ["basic", "retry", "capture", "mixed", "cancel", "order"]

    async def test_basic(self):
        report = await run_scenario(SCENARIOS["basic"])
        assert [r.value for r in report.results] == ["Task 1", "Task 2", "Task 3", "Task 4"]
        assert report.max_in_flight == 2

    async def test_retry(self):
        report = await run_scenario(SCENARIOS["retry"], backoff_base=0.01)
        result = report.results[0]
        assert result.value == "Succeeded on attempt 3!"
        assert result.attempts == 3

    async def test_capture(self):
        report = await run_scenario(SCENARIOS["capture"], backoff_base=0.01)
        assert report.results[0].error.message == "Always fails"
        assert report.results[0].attempts == 4

    async def test_mixed(self):
        report = await run_scenario(SCENARIOS["mixed"], backoff_base=0.01)
        statuses = [r.status for r in report.results]
        assert statuses == [
            ResultStatus.SUCCESS,
            ResultStatus.CAPTURED,
            ResultStatus.SUCCESS,
            ResultStatus.SUCCESS,
        ]

    async def test_cancel(self):
        report = await run_scenario(SCENARIOS["cancel"])
        summary = report.summary
        assert summary.succeeded >= 1
        assert summary.cancelled >= 1
        assert report.results[0].value == "Done 1"
        assert report.results[-1].cancelled is True

    async def test_order(self):
        report = await run_scenario(SCENARIOS["order"])
        assert [r.value for r in report.results] == [
            "first", "second", "third", "fourth", "fifth",
        ]

    async def test_overrides(self):
        report = await run_scenario(SCENARIOS["basic"], concurrency=1, retry_attempts=0)
        assert report.concurrency == 1
        assert report.retry_attempts == 0
        assert report.max_in_flight == 1

    async def test_run_scenarios_reports(self):
        seen = []
        reports = await run_scenarios(
            ["mixed", "order"], backoff_base=0.01, on_report=seen.append,
        )
        assert [r.name for r in reports] == ["mixed", "order"]
        assert seen == reports

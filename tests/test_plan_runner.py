from __future__ import annotations

import io
import json
from unittest import mock

import pytest

from teststream.core import (
    AllowedFailure,
    Benchmarked,
    BenchmarkSummary,
    Failed,
    FailedWithMessage,
    Ignored,
    Passed,
    RunSummary,
)
from teststream.plan import PlannedTest, PlanOptions, RunPlan, run_plan, tally
from teststream.reporting import JsonFormatter, OutputFormatter, ReportManager, check_stream


def _plan() -> RunPlan:
    return RunPlan(
        tests=(
            PlannedTest("unit::a", Passed()),
            PlannedTest("unit::b", Failed(b"oops")),
            PlannedTest("unit::c", AllowedFailure()),
            PlannedTest("unit::d", timed_out=True),
            PlannedTest("it::e", Ignored()),
            PlannedTest("bench::f", Benchmarked(BenchmarkSummary(median=2, min=1, max=3))),
        )
    )


def test_run_plan_emits_contract_conforming_stream() -> None:
    sink = io.BytesIO()
    succeeded = run_plan(_plan(), JsonFormatter(sink, validate=True))
    assert succeeded is False
    report = check_stream(io.BytesIO(sink.getvalue()))
    assert report.ok, report.violations
    events = [json.loads(line) for line in sink.getvalue().decode("utf-8").splitlines()]
    assert events[0] == {"type": "suite", "event": "started", "test_count": 6}
    assert events[-1] == {
        "type": "suite",
        "event": "failed",
        "passed": 1,
        "failed": 2,
        "allowed_fail": 1,
        "ignored": 1,
        "measured": 1,
        "filtered_out": 0,
    }


def test_filters_count_filtered_out_tests() -> None:
    sink = io.BytesIO()
    succeeded = run_plan(_plan(), JsonFormatter(sink), PlanOptions(filters=("unit::a", "it::*")))
    assert succeeded is True
    events = [json.loads(line) for line in sink.getvalue().decode("utf-8").splitlines()]
    assert events[0]["test_count"] == 2
    assert events[-1]["filtered_out"] == 4
    assert [e["name"] for e in events if e.get("event") == "started" and e["type"] == "test"] == [
        "unit::a",
        "it::e",
    ]


def test_calls_reach_formatter_in_order() -> None:
    formatter = mock.Mock(spec=OutputFormatter)
    formatter.on_run_finish.return_value = True
    plan = RunPlan(tests=(PlannedTest("a", Passed()), PlannedTest("b", timed_out=True)))
    assert run_plan(plan, formatter) is True
    assert formatter.method_calls == [
        mock.call.on_run_start(2),
        mock.call.on_test_start("a"),
        mock.call.on_test_result("a", Passed()),
        mock.call.on_test_start("b"),
        mock.call.on_timeout("b"),
        mock.call.on_run_finish(RunSummary(passed=1)),
    ]


def test_report_manager_fans_out_and_combines_verdicts() -> None:
    first, second = io.BytesIO(), io.BytesIO()
    manager = ReportManager([JsonFormatter(first), JsonFormatter(second, legacy_bench_format=False)])
    assert run_plan(RunPlan(tests=(PlannedTest("a", Passed()),)), manager) is True
    assert first.getvalue() == second.getvalue()

    failing = mock.Mock(spec=OutputFormatter)
    failing.on_run_finish.return_value = False
    manager = ReportManager([JsonFormatter(io.BytesIO()), failing])
    assert manager.on_run_finish(RunSummary()) is False
    failing.on_run_finish.assert_called_once_with(RunSummary())


@pytest.mark.parametrize(
    "outcome, field",
    [
        (Passed(), "passed"),
        (Failed(), "failed"),
        (FailedWithMessage("m"), "failed"),
        (AllowedFailure(), "allowed_failures"),
        (Ignored(), "ignored"),
        (Benchmarked(BenchmarkSummary(median=1, min=1, max=1)), "measured"),
    ],
)
def test_tally_counts_outcome_bucket(outcome, field: str) -> None:
    summary = tally(RunSummary(), outcome)
    assert getattr(summary, field) == 1
    assert sum(getattr(summary, name) for name in ("passed", "failed", "allowed_failures", "ignored", "measured")) == 1

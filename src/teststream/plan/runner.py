"""Replays a run plan through a formatter."""
from __future__ import annotations

import fnmatch
import logging
from dataclasses import replace
from typing import Sequence

from teststream.core.models import RunSummary
from teststream.core.results import (
    AllowedFailure,
    Benchmarked,
    Failed,
    FailedWithMessage,
    Ignored,
    Passed,
    TestOutcome,
)
from teststream.reporting.base import OutputFormatter

from .models import PlannedTest, PlanOptions, RunPlan

logger = logging.getLogger(__name__)


def run_plan(plan: RunPlan, formatter: OutputFormatter, options: PlanOptions | None = None) -> bool:
    """Drive the formatter through the plan; returns the formatter's run verdict."""

    options = options or PlanOptions()
    selected = _select_tests(plan.tests, options)
    summary = RunSummary(filtered_out=len(plan.tests) - len(selected))
    formatter.on_run_start(len(selected))
    for test in selected:
        formatter.on_test_start(test.name)
        if test.timed_out:
            formatter.on_timeout(test.name)
            continue
        assert test.outcome is not None
        formatter.on_test_result(test.name, test.outcome)
        summary = tally(summary, test.outcome)
    logger.debug(
        "replayed %d test(s) of plan %r, %d filtered out", len(selected), plan.description, summary.filtered_out
    )
    return formatter.on_run_finish(summary)


def tally(summary: RunSummary, outcome: TestOutcome) -> RunSummary:
    """Return the summary with the outcome counted in its bucket."""

    if isinstance(outcome, Passed):
        return replace(summary, passed=summary.passed + 1)
    if isinstance(outcome, (Failed, FailedWithMessage)):
        return replace(summary, failed=summary.failed + 1)
    if isinstance(outcome, AllowedFailure):
        return replace(summary, allowed_failures=summary.allowed_failures + 1)
    if isinstance(outcome, Ignored):
        return replace(summary, ignored=summary.ignored + 1)
    if isinstance(outcome, Benchmarked):
        return replace(summary, measured=summary.measured + 1)
    raise TypeError(f"Unsupported test outcome {outcome!r}")


def _select_tests(tests: Sequence[PlannedTest], options: PlanOptions) -> list[PlannedTest]:
    if not options.filters:
        return list(tests)
    return [test for test in tests if any(fnmatch.fnmatchcase(test.name, pattern) for pattern in options.filters)]

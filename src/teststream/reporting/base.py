"""Formatter interface definitions."""
from __future__ import annotations

from typing import Sequence

from teststream.core.models import RunSummary, TestIdentity
from teststream.core.results import TestOutcome


class SinkWriteError(RuntimeError):
    """Raised when an event could not be written to the output sink."""


class OutputFormatter:
    """Interface for renderers of run lifecycle events."""

    def on_run_start(self, test_count: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_test_start(self, name: TestIdentity) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_test_result(self, name: TestIdentity, outcome: TestOutcome) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_timeout(self, name: TestIdentity) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_run_finish(self, summary: RunSummary) -> bool:  # pragma: no cover
        raise NotImplementedError


class ReportManager(OutputFormatter):
    """Dispatches lifecycle callbacks to multiple formatters."""

    def __init__(self, formatters: Sequence[OutputFormatter]) -> None:
        self._formatters = list(formatters)

    def on_run_start(self, test_count: int) -> None:
        for formatter in self._formatters:
            formatter.on_run_start(test_count)

    def on_test_start(self, name: TestIdentity) -> None:
        for formatter in self._formatters:
            formatter.on_test_start(name)

    def on_test_result(self, name: TestIdentity, outcome: TestOutcome) -> None:
        for formatter in self._formatters:
            formatter.on_test_result(name, outcome)

    def on_timeout(self, name: TestIdentity) -> None:
        for formatter in self._formatters:
            formatter.on_timeout(name)

    def on_run_finish(self, summary: RunSummary) -> bool:
        results = [formatter.on_run_finish(summary) for formatter in self._formatters]
        return all(results)

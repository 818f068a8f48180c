"""Outcome variants describing how a single test concluded."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .models import BenchmarkSummary


@dataclass(frozen=True)
class Passed:
    pass


@dataclass(frozen=True)
class Failed:
    """Failure carrying whatever the test wrote to its captured stdout."""

    stdout: bytes = b""

    @property
    def text(self) -> str:
        return lossy_decode(self.stdout)


@dataclass(frozen=True)
class FailedWithMessage:
    """Failure with a runner-supplied diagnostic and no captured output."""

    message: str


@dataclass(frozen=True)
class Ignored:
    pass


@dataclass(frozen=True)
class AllowedFailure:
    """Failed, but the test ran under a failure-tolerated policy."""


@dataclass(frozen=True)
class Benchmarked:
    summary: BenchmarkSummary


TestOutcome = Union[Passed, Failed, FailedWithMessage, Ignored, AllowedFailure, Benchmarked]


def lossy_decode(data: bytes) -> str:
    """Decode UTF-8, substituting U+FFFD for every invalid sequence."""

    return bytes(data).decode("utf-8", errors="replace")

"""Value types handed to formatters by the test runner."""
from __future__ import annotations

from dataclasses import dataclass, fields

# Fully qualified test name; the correlation key between start and result events.
TestIdentity = str


@dataclass(frozen=True)
class BenchmarkSummary:
    """Already-computed statistics of one benchmark, in nanoseconds."""

    median: int
    min: int
    max: int
    mib_per_second: int = 0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"BenchmarkSummary.{item.name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"BenchmarkSummary.{item.name} must be non-negative, got {value}")
        if self.max < self.min:
            raise ValueError(f"BenchmarkSummary.max ({self.max}) is below min ({self.min})")

    @property
    def deviation(self) -> int:
        return self.max - self.min

    @property
    def measures_throughput(self) -> bool:
        return self.mib_per_second != 0


@dataclass(frozen=True)
class RunSummary:
    """Counts accumulated by the runner over a completed suite."""

    passed: int = 0
    failed: int = 0
    allowed_failures: int = 0
    ignored: int = 0
    measured: int = 0
    filtered_out: int = 0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"RunSummary.{item.name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"RunSummary.{item.name} must be non-negative, got {value}")

    @property
    def succeeded(self) -> bool:
        return self.failed == 0

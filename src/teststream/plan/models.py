"""Data models for scripted runs replayed through a formatter."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from teststream.core.results import TestOutcome


@dataclass(frozen=True)
class PlannedTest:
    name: str
    outcome: Optional[TestOutcome] = None
    timed_out: bool = False


@dataclass(frozen=True)
class RunPlan:
    tests: Sequence[PlannedTest]
    description: str = ""


@dataclass(frozen=True)
class PlanOptions:
    filters: Sequence[str] = field(default_factory=tuple)

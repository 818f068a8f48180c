"""Core models and outcomes exposed at the package level."""
from .models import BenchmarkSummary, RunSummary, TestIdentity
from .results import (
    AllowedFailure,
    Benchmarked,
    Failed,
    FailedWithMessage,
    Ignored,
    Passed,
    TestOutcome,
    lossy_decode,
)

__all__ = [
    "AllowedFailure",
    "Benchmarked",
    "BenchmarkSummary",
    "Failed",
    "FailedWithMessage",
    "Ignored",
    "Passed",
    "RunSummary",
    "TestIdentity",
    "TestOutcome",
    "lossy_decode",
]

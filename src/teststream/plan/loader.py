"""YAML loader and validation for run plans."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from jsonschema import Draft7Validator

from teststream.core.models import BenchmarkSummary
from teststream.core.results import (
    AllowedFailure,
    Benchmarked,
    Failed,
    FailedWithMessage,
    Ignored,
    Passed,
    TestOutcome,
)

from .models import PlannedTest, RunPlan

OUTCOMES = ("passed", "failed", "ignored", "allowed_failure", "bench", "timeout")

_COUNT = {"type": "integer", "minimum": 0}

PLAN_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "teststream run plan",
    "type": "object",
    "required": ["tests"],
    "properties": {
        "description": {"type": "string"},
        "tests": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "outcome"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "outcome": {"enum": list(OUTCOMES)},
                    "stdout": {"type": "string"},
                    "message": {"type": "string"},
                    "median": _COUNT,
                    "min": _COUNT,
                    "max": _COUNT,
                    "mib_per_second": _COUNT,
                },
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}

_validator = Draft7Validator(PLAN_SCHEMA)


def load_plan(path: str) -> RunPlan:
    """Load and validate a plan file."""
    plan_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(plan_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError("Plan file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(map(str, e.path)))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Plan schema validation failed: {messages}")
    tests = []
    seen: set[str] = set()
    for entry in raw["tests"]:
        name = entry["name"].strip()
        if not name:
            raise ValueError("Test names cannot be blank")
        if name in seen:
            raise ValueError(f"Duplicate test name '{name}'")
        seen.add(name)
        tests.append(_parse_test(name, entry))
    return RunPlan(
        tests=tuple(tests),
        description=str(raw.get("description", "")),
    )


def _parse_test(name: str, entry: Mapping[str, Any]) -> PlannedTest:
    kind = entry["outcome"]
    if kind == "timeout":
        return PlannedTest(name=name, timed_out=True)
    return PlannedTest(name=name, outcome=_parse_outcome(name, kind, entry))


def _parse_outcome(name: str, kind: str, entry: Mapping[str, Any]) -> TestOutcome:
    if kind == "failed":
        if "message" in entry and "stdout" in entry:
            raise ValueError(f"Test '{name}' cannot set both stdout and message")
        if "message" in entry:
            return FailedWithMessage(message=entry["message"])
        return Failed(stdout=entry.get("stdout", "").encode("utf-8"))
    if kind == "bench":
        missing = [key for key in ("median", "min", "max") if key not in entry]
        if missing:
            raise ValueError(f"Benchmark '{name}' is missing {', '.join(missing)}")
        try:
            summary = BenchmarkSummary(
                median=entry["median"],
                min=entry["min"],
                max=entry["max"],
                mib_per_second=entry.get("mib_per_second", 0),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Benchmark '{name}': {exc}") from exc
        return Benchmarked(summary=summary)
    if kind == "passed":
        return Passed()
    if kind == "ignored":
        return Ignored()
    if kind == "allowed_failure":
        return AllowedFailure()
    raise ValueError(f"Unknown outcome '{kind}' for test '{name}'")

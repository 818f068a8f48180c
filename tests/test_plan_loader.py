from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from teststream.core import Benchmarked, BenchmarkSummary, Failed, FailedWithMessage, Passed
from teststream.plan import load_plan


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "plan.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_load_plan_builds_outcomes(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path,
        """
        description: nightly
        tests:
          - name: parse::ok
            outcome: passed
          - name: parse::crash
            outcome: failed
            stdout: "thread panicked\\n"
          - name: parse::assert
            outcome: failed
            message: expected panic
          - name: parse::slow
            outcome: timeout
          - name: bench::sort
            outcome: bench
            median: 30
            min: 10
            max: 50
            mib_per_second: 5
        """,
    )
    plan = load_plan(str(plan_path))
    assert plan.description == "nightly"
    assert [test.name for test in plan.tests] == [
        "parse::ok",
        "parse::crash",
        "parse::assert",
        "parse::slow",
        "bench::sort",
    ]
    assert plan.tests[0].outcome == Passed()
    assert plan.tests[1].outcome == Failed(b"thread panicked\n")
    assert plan.tests[2].outcome == FailedWithMessage("expected panic")
    assert plan.tests[3].timed_out and plan.tests[3].outcome is None
    assert plan.tests[4].outcome == Benchmarked(BenchmarkSummary(median=30, min=10, max=50, mib_per_second=5))


def test_schema_errors_name_the_field(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path,
        """
        tests:
          - name: a
            outcome: skipped
        """,
    )
    with pytest.raises(ValueError) as exc:
        load_plan(str(plan_path))
    assert "tests/0/outcome" in str(exc.value)


def test_missing_tests_rejected(tmp_path: Path) -> None:
    plan_path = _write(tmp_path, "description: empty\n")
    with pytest.raises(ValueError, match="tests"):
        load_plan(str(plan_path))


def test_duplicate_names_rejected(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path,
        """
        tests:
          - {name: a, outcome: passed}
          - {name: a, outcome: ignored}
        """,
    )
    with pytest.raises(ValueError, match="Duplicate test name 'a'"):
        load_plan(str(plan_path))


def test_bench_requires_statistics(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path,
        """
        tests:
          - {name: b, outcome: bench, median: 3}
        """,
    )
    with pytest.raises(ValueError, match="missing min, max"):
        load_plan(str(plan_path))


def test_failed_cannot_carry_stdout_and_message(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path,
        """
        tests:
          - {name: f, outcome: failed, stdout: out, message: msg}
        """,
    )
    with pytest.raises(ValueError, match="both stdout and message"):
        load_plan(str(plan_path))


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    plan_path = _write(tmp_path, "- a\n- b\n")
    with pytest.raises(ValueError, match="mapping"):
        load_plan(str(plan_path))


def test_bench_rejects_float_statistics(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path,
        """
        tests:
          - {name: b, outcome: bench, median: 30, min: 10, max: 50, mib_per_second: 5.0}
        """,
    )
    with pytest.raises(ValueError, match="Benchmark 'b': .*mib_per_second must be an integer"):
        load_plan(str(plan_path))

"""Verification of recorded event streams against the wire contract."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Set, Union

from teststream.core.results import lossy_decode

from .schema import validator_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractViolation:
    line: int
    message: str


@dataclass
class CheckReport:
    """Outcome of checking one stream."""

    events: int = 0
    tests: int = 0
    violations: List[ContractViolation] = field(default_factory=list)
    succeeded: Optional[bool] = None

    @property
    def ok(self) -> bool:
        return not self.violations


class _StreamState:
    def __init__(self, report: CheckReport) -> None:
        self.report = report
        self.suite_started = False
        self.suite_finished = False
        self.test_count = 0
        self.running: Set[str] = set()
        self.concluded: Set[str] = set()
        self.malformed: Set[str] = set()

    def flag(self, line: int, message: str) -> None:
        self.report.violations.append(ContractViolation(line=line, message=message))

    def skip(self, event: Any) -> None:
        """Remember the test named by a line that failed its schema."""
        if isinstance(event, Mapping) and isinstance(event.get("name"), str):
            self.malformed.add(event["name"])

    def observe(self, line: int, event: dict) -> None:
        if self.suite_finished:
            self.flag(line, "event after the suite finished")
        if event["type"] == "suite":
            if event["event"] == "started":
                self._suite_started(line, event)
            else:
                self._suite_finished(line, event)
            return
        if not self.suite_started:
            self.flag(line, "test event before the suite started")
        name = event["name"]
        if event["type"] == "test" and event["event"] == "started":
            if name in self.running or name in self.concluded:
                self.flag(line, f"test '{name}' started more than once")
                return
            self.running.add(name)
            self.report.tests += 1
            if self.report.tests > self.test_count:
                self.flag(line, f"more tests started than the announced test_count {self.test_count}")
            return
        if name in self.concluded:
            self.flag(line, f"test '{name}' concluded more than once")
        elif name not in self.running:
            if name in self.malformed:
                return
            self.flag(line, f"test '{name}' concluded without being started")
        else:
            self.running.remove(name)
            self.concluded.add(name)

    def _suite_started(self, line: int, event: dict) -> None:
        if self.suite_started:
            self.flag(line, "suite started more than once")
            return
        if self.report.events > 1:
            self.flag(line, "suite start is not the first event")
        self.suite_started = True
        self.test_count = event["test_count"]

    def _suite_finished(self, line: int, event: dict) -> None:
        if not self.suite_started:
            self.flag(line, "suite finished before it started")
        self.suite_finished = True
        pending_names = self.running - self.malformed
        if pending_names:
            pending = ", ".join(sorted(pending_names))
            self.flag(line, f"suite finished with unconcluded tests: {pending}")
        hard_failures = event["failed"] - event["allowed_fail"]
        if hard_failures < 0:
            self.flag(line, "failed count is lower than allowed_fail")
        expected = "ok" if hard_failures == 0 else "failed"
        if event["event"] != expected:
            self.flag(line, f"suite event is '{event['event']}' but the counts imply '{expected}'")
        self.report.succeeded = event["event"] == "ok"


def check_stream(lines: Iterable[Union[str, bytes]]) -> CheckReport:
    """Validate every line and the start/conclude ordering of a stream."""

    report = CheckReport()
    state = _StreamState(report)
    last_line = 0
    for line_no, raw in enumerate(lines, start=1):
        last_line = line_no
        text = lossy_decode(raw) if isinstance(raw, bytes) else raw
        text = text.rstrip("\r\n")
        if not text.strip():
            state.flag(line_no, "blank line")
            continue
        try:
            event = json.loads(text)
        except json.JSONDecodeError as exc:
            state.flag(line_no, f"invalid JSON: {exc.msg}")
            continue
        report.events += 1
        try:
            validator = validator_for(event)
        except ValueError as exc:
            state.flag(line_no, str(exc))
            state.skip(event)
            continue
        errors = sorted(validator.iter_errors(event), key=lambda e: list(map(str, e.path)))
        if errors:
            for err in errors:
                state.flag(line_no, f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}")
            state.skip(event)
            continue
        state.observe(line_no, event)
    if not state.suite_started:
        state.flag(last_line, "stream has no suite start event")
    if not state.suite_finished:
        state.flag(last_line, "stream ended before the suite finished")
    logger.debug("checked %d event(s), %d violation(s)", report.events, len(report.violations))
    return report


def check_file(path: str) -> CheckReport:
    stream_path = Path(path).expanduser()
    with stream_path.open("rb") as handle:
        return check_stream(handle)

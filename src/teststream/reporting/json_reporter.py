"""JSON formatter streaming one event per line as a run progresses."""
from __future__ import annotations

import json
import logging
import threading
from typing import Any, BinaryIO, Dict

from teststream.core.models import BenchmarkSummary, RunSummary, TestIdentity
from teststream.core.results import (
    AllowedFailure,
    Benchmarked,
    Failed,
    FailedWithMessage,
    Ignored,
    Passed,
    TestOutcome,
)

from .base import OutputFormatter, SinkWriteError
from .schema import validate_event

logger = logging.getLogger(__name__)


class JsonFormatter(OutputFormatter):
    """Writes newline-delimited JSON events to a binary sink.

    Every call encodes exactly one object, writes it followed by a single
    newline and flushes the sink before returning, so a reader tailing the
    stream sees each event as soon as it happens. Writes are serialized by
    an internal lock; the sink is never closed by the formatter.

    ``legacy_bench_format`` keeps the historical benchmark shape where the
    throughput is appended to the ``deviation`` string. Passing ``False``
    emits ``deviation`` as an integer and ``mib_per_second`` as its own key.
    ``validate`` checks each event against the schemas before writing it.
    Names and messages holding lone surrogates cannot be encoded as UTF-8
    and raise ``ValueError`` before anything is written.
    """

    def __init__(self, sink: BinaryIO, *, legacy_bench_format: bool = True, validate: bool = False) -> None:
        self._sink = sink
        self._legacy_bench_format = legacy_bench_format
        self._validate = validate
        self._lock = threading.Lock()

    def on_run_start(self, test_count: int) -> None:
        self._write_message({"type": "suite", "event": "started", "test_count": test_count})

    def on_test_start(self, name: TestIdentity) -> None:
        self._write_message({"type": "test", "event": "started", "name": name})

    def on_test_result(self, name: TestIdentity, outcome: TestOutcome) -> None:
        self._write_message(self._result_message(name, outcome))

    def on_timeout(self, name: TestIdentity) -> None:
        self._write_message({"type": "test", "name": name, "event": "timeout"})

    def on_run_finish(self, summary: RunSummary) -> bool:
        self._write_message(
            {
                "type": "suite",
                "event": "ok" if summary.succeeded else "failed",
                "passed": summary.passed,
                "failed": summary.failed + summary.allowed_failures,
                "allowed_fail": summary.allowed_failures,
                "ignored": summary.ignored,
                "measured": summary.measured,
                "filtered_out": summary.filtered_out,
            }
        )
        return summary.succeeded

    def _result_message(self, name: TestIdentity, outcome: TestOutcome) -> Dict[str, Any]:
        if isinstance(outcome, Passed):
            return {"type": "test", "name": name, "event": "ok"}
        if isinstance(outcome, Failed):
            return {"type": "test", "name": name, "event": "failed", "stdout": outcome.text}
        if isinstance(outcome, FailedWithMessage):
            return {"type": "test", "name": name, "event": "failed", "message": outcome.message}
        if isinstance(outcome, Ignored):
            return {"type": "test", "name": name, "event": "ignored"}
        if isinstance(outcome, AllowedFailure):
            return {"type": "test", "name": name, "event": "allowed_failure"}
        if isinstance(outcome, Benchmarked):
            return self._bench_message(name, outcome.summary)
        raise TypeError(f"Unsupported test outcome {outcome!r} for '{name}'")

    def _bench_message(self, name: TestIdentity, summary: BenchmarkSummary) -> Dict[str, Any]:
        if not self._legacy_bench_format:
            record: Dict[str, Any] = {
                "type": "bench",
                "name": name,
                "median": summary.median,
                "deviation": summary.deviation,
            }
            if summary.measures_throughput:
                record["mib_per_second"] = summary.mib_per_second
            return record
        throughput = f', "mib_per_second": {summary.mib_per_second}' if summary.measures_throughput else ""
        return {
            "type": "bench",
            "name": name,
            "median": summary.median,
            "deviation": f"{summary.deviation}{throughput}",
        }

    def _write_message(self, message: Dict[str, Any]) -> None:
        if self._validate:
            validate_event(message)
        line = json.dumps(message, ensure_ascii=False, separators=(",", ":")) + "\n"
        try:
            data = line.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValueError(f"{message['type']} event holds text that is not valid Unicode: {exc}") from exc
        with self._lock:
            try:
                self._sink.write(data)
                flush = getattr(self._sink, "flush", None)
                if flush is not None:
                    flush()
            except (OSError, ValueError) as exc:
                logger.error("Failed to write %s event to sink: %s", message["type"], exc)
                raise SinkWriteError(f"Failed to write {message['type']} event: {exc}") from exc
        logger.debug("emitted %s/%s event", message["type"], message.get("event", "result"))


EventEmitter = JsonFormatter

"""JSON schema definitions for streamed test events."""
from __future__ import annotations

from typing import Any, Dict, Mapping

from jsonschema import Draft7Validator

SCHEMA_VERSION = "1.0.0"

_COUNT = {"type": "integer", "minimum": 0}
_NAME = {"type": "string"}


def _event_schema(title: str, properties: Dict[str, Any], required: list[str]) -> Dict[str, Any]:
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": title,
        "type": "object",
        "required": required,
        "properties": properties,
        "additionalProperties": False,
    }


SUITE_STARTED_SCHEMA = _event_schema(
    "suite started",
    {
        "type": {"const": "suite"},
        "event": {"const": "started"},
        "test_count": _COUNT,
    },
    ["type", "event", "test_count"],
)

SUITE_FINISHED_SCHEMA = _event_schema(
    "suite finished",
    {
        "type": {"const": "suite"},
        "event": {"enum": ["ok", "failed"]},
        "passed": _COUNT,
        "failed": _COUNT,
        "allowed_fail": _COUNT,
        "ignored": _COUNT,
        "measured": _COUNT,
        "filtered_out": _COUNT,
    },
    ["type", "event", "passed", "failed", "allowed_fail", "ignored", "measured", "filtered_out"],
)

TEST_STARTED_SCHEMA = _event_schema(
    "test started",
    {
        "type": {"const": "test"},
        "event": {"const": "started"},
        "name": _NAME,
    },
    ["type", "event", "name"],
)

TEST_CONCLUDED_SCHEMA = _event_schema(
    "test concluded",
    {
        "type": {"const": "test"},
        "name": _NAME,
        "event": {"enum": ["ok", "ignored", "allowed_failure", "timeout"]},
    },
    ["type", "name", "event"],
)

TEST_FAILED_SCHEMA = _event_schema(
    "test failed",
    {
        "type": {"const": "test"},
        "name": _NAME,
        "event": {"const": "failed"},
        "stdout": {"type": "string"},
    },
    ["type", "name", "event", "stdout"],
)

TEST_FAILED_MESSAGE_SCHEMA = _event_schema(
    "test failed with message",
    {
        "type": {"const": "test"},
        "name": _NAME,
        "event": {"const": "failed"},
        "message": {"type": "string"},
    },
    ["type", "name", "event", "message"],
)

# The legacy deviation value is a string that may embed a throughput fragment.
BENCH_SCHEMA = _event_schema(
    "bench",
    {
        "type": {"const": "bench"},
        "name": _NAME,
        "median": _COUNT,
        "deviation": {"type": "string", "pattern": r'^[0-9]+(, "mib_per_second": [0-9]+)?$'},
    },
    ["type", "name", "median", "deviation"],
)

BENCH_CLEAN_SCHEMA = _event_schema(
    "bench (clean)",
    {
        "type": {"const": "bench"},
        "name": _NAME,
        "median": _COUNT,
        "deviation": _COUNT,
        "mib_per_second": {"type": "integer", "minimum": 1},
    },
    ["type", "name", "median", "deviation"],
)

_VALIDATORS = {
    "suite_started": Draft7Validator(SUITE_STARTED_SCHEMA),
    "suite_finished": Draft7Validator(SUITE_FINISHED_SCHEMA),
    "test_started": Draft7Validator(TEST_STARTED_SCHEMA),
    "test_concluded": Draft7Validator(TEST_CONCLUDED_SCHEMA),
    "test_failed": Draft7Validator(TEST_FAILED_SCHEMA),
    "test_failed_message": Draft7Validator(TEST_FAILED_MESSAGE_SCHEMA),
    "bench": Draft7Validator(BENCH_SCHEMA),
    "bench_clean": Draft7Validator(BENCH_CLEAN_SCHEMA),
}


def validator_for(event: Any) -> Draft7Validator:
    """Pick the schema validator matching the event's discriminating fields."""

    if not isinstance(event, Mapping):
        raise ValueError(f"Event must be a JSON object, got {type(event).__name__}")
    kind = event.get("type")
    name = event.get("event")
    if kind == "suite":
        return _VALIDATORS["suite_started" if name == "started" else "suite_finished"]
    if kind == "test":
        if name == "started":
            return _VALIDATORS["test_started"]
        if name == "failed":
            return _VALIDATORS["test_failed_message" if "message" in event else "test_failed"]
        return _VALIDATORS["test_concluded"]
    if kind == "bench":
        return _VALIDATORS["bench" if isinstance(event.get("deviation"), str) else "bench_clean"]
    raise ValueError(f"Unknown event type {kind!r}")


def validate_event(event: Any) -> None:
    """Raise jsonschema.ValidationError if the event does not match its shape."""

    validator_for(event).validate(event)

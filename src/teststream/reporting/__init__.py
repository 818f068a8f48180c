"""Reporting exports."""
from .base import OutputFormatter, ReportManager, SinkWriteError
from .checker import CheckReport, ContractViolation, check_file, check_stream
from .json_reporter import EventEmitter, JsonFormatter
from .schema import SCHEMA_VERSION, validate_event

__all__ = [
    "CheckReport",
    "ContractViolation",
    "EventEmitter",
    "JsonFormatter",
    "OutputFormatter",
    "ReportManager",
    "SCHEMA_VERSION",
    "SinkWriteError",
    "check_file",
    "check_stream",
    "validate_event",
]

from __future__ import annotations

import io

import pytest

from teststream.reporting import JsonFormatter


@pytest.fixture
def sink() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def emitter(sink: io.BytesIO) -> JsonFormatter:
    """Formatter validating every event it writes."""

    return JsonFormatter(sink, validate=True)

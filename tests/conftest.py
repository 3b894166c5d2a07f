"""Fixtures compartidas."""

from __future__ import annotations

import os
from typing import List, Optional
from unittest.mock import patch

import pytest

from adsb_relay.core.domain.record import Record
from adsb_relay.core.domain.sink_interface import IRecordSink, PublishOutcome
from adsb_relay.sinks.payload import mqtt_topic

SAMPLE_LINE = (
    "MSG,3,1,1,ABC123,1,2024/01/01,12:00:00,2024/01/01,12:00:00,,"
    "5000,450.0,270.0,51.5,-0.1,,,,,,,"
)


def make_line(fields: Optional[dict] = None, count: int = 22) -> str:
    """Construye una línea MSG con `count` campos, sobrescribiendo posiciones."""
    base = SAMPLE_LINE.split(",")[:count]
    base += [""] * (count - len(base))
    for pos, value in (fields or {}).items():
        base[pos] = value
    return ",".join(base)


class RecordingSink(IRecordSink):
    """Sink en memoria: registra publicaciones y puede fallar a demanda."""

    def __init__(self, fail_identifiers: Optional[set] = None):
        self.published: List[Record] = []
        self.fail_identifiers = fail_identifiers or set()
        self.started = False
        self.closed = False

    @property
    def sink_name(self) -> str:
        return "recording"

    def start(self) -> None:
        self.started = True

    def destination_for(self, record: Record) -> str:
        return mqtt_topic(record)

    def publish(self, record: Record) -> PublishOutcome:
        topic = self.destination_for(record)
        if record.identifier in self.fail_identifiers:
            return PublishOutcome.failed(topic, "broker unavailable")
        self.published.append(record)
        return PublishOutcome.ok(topic)

    def close(self) -> None:
        self.closed = True

    def is_connected(self) -> bool:
        return self.started and not self.closed


@pytest.fixture
def sample_line() -> str:
    return SAMPLE_LINE


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def failing_sink() -> RecordingSink:
    """Sink que falla para el identifier BAD."""
    return RecordingSink(fail_identifiers={"BAD"})


@pytest.fixture
def clean_env():
    """Entorno vacío, restaurado al terminar el test."""
    with patch.dict(os.environ, {}, clear=True):
        yield os.environ


@pytest.fixture
def line_factory():
    """Factory de líneas MSG (ver make_line)."""
    return make_line

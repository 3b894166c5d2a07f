"""Abstract interface for record sinks.

Decouples the pipeline from the message-bus backend. Exactly one
implementation is selected at startup:
- MQTTSink: publishes to adsb/<identifier>/<transmission_type>
- KafkaSink: publishes to a fixed topic keyed by identifier
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .record import Record


@dataclass(frozen=True)
class PublishOutcome:
    """Resultado de publicar un Record."""
    success: bool
    destination: str
    reason: Optional[str] = None

    @classmethod
    def ok(cls, destination: str) -> "PublishOutcome":
        return cls(success=True, destination=destination)

    @classmethod
    def failed(cls, destination: str, reason: str) -> "PublishOutcome":
        return cls(success=False, destination=destination, reason=reason)


class IRecordSink(ABC):
    """Abstract interface for a connected publish target.

    The handle lives for the whole process. Any background listener it owns
    only drains protocol housekeeping and never touches publish outcomes.
    """

    @abstractmethod
    def start(self) -> None:
        """Acquire the backend connection.

        Raises:
            SinkConnectionError: if the handle cannot be created or connected
        """

    @abstractmethod
    def publish(self, record: Record) -> PublishOutcome:
        """Publish a record and wait for the broker acknowledgment.

        Transport and broker errors are returned as a failed outcome, never
        raised.
        """

    @abstractmethod
    def destination_for(self, record: Record) -> str:
        """Destination (topic) name for a record."""

    @abstractmethod
    def close(self) -> None:
        """Flush and release the connection. Safe to call twice."""

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the backend connection is up."""

    @property
    @abstractmethod
    def sink_name(self) -> str:
        """Nombre del backend: mqtt, kafka."""

    def __enter__(self) -> "IRecordSink":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

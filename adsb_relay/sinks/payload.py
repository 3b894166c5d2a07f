"""Payload saliente y nombres de destino.

Proyección fija del Record a un documento JSON:

{
    "identifier": "4CA2D6",
    "transmissionType": 3,
    "altitude": 5000,
    "latitude": 51.5,
    "longitude": -0.1,
    "groundSpeed": 450.0,
    "track": 270.0
}

Los campos de sesión, correlación y timestamps no se publican.
"""

from __future__ import annotations

from typing import Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field

from ..core.domain.record import Record

MQTT_TOPIC_PREFIX = "adsb"


class RecordPayload(BaseModel):
    """Schema del documento publicado en ambos backends."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    identifier: str
    transmission_type: int = Field(alias="transmissionType", ge=0, le=255)
    altitude: Optional[int] = Field(default=None, ge=0)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    ground_speed: Optional[float] = Field(default=None, alias="groundSpeed")
    track: Optional[float] = None

    @classmethod
    def from_record(cls, record: Record) -> "RecordPayload":
        return cls(
            identifier=record.identifier,
            transmission_type=record.transmission_type,
            altitude=record.altitude,
            latitude=record.latitude,
            longitude=record.longitude,
            ground_speed=record.ground_speed,
            track=record.track,
        )

    def to_json(self) -> bytes:
        return orjson.dumps(self.model_dump(by_alias=True))


def encode_record(record: Record) -> bytes:
    """Serializa un Record al payload JSON."""
    return RecordPayload.from_record(record).to_json()


def mqtt_topic(record: Record) -> str:
    """Topic MQTT: adsb/<identifier>/<transmission_type>."""
    return f"{MQTT_TOPIC_PREFIX}/{record.identifier}/{record.transmission_type}"

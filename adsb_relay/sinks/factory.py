"""Factory para crear el sink activo.

La selección se hace una sola vez en arranque; el pipeline recibe el sink ya
elegido y nunca vuelve a despachar por backend.
"""

from __future__ import annotations

import logging

from ..common.config import Settings, SinkType
from ..common.errors import ConfigError
from ..core.domain.sink_interface import IRecordSink
from .kafka_sink import KafkaSink
from .mqtt_sink import MQTTSink

logger = logging.getLogger(__name__)


def create_sink(settings: Settings) -> IRecordSink:
    """Crea (sin conectar) el sink seleccionado por la configuración."""
    if settings.sink_type is SinkType.MQTT:
        if settings.mqtt is None:
            raise ConfigError("MQTT sink selected but MQTT settings are missing")
        logger.info("[SINK_FACTORY] Using MQTT sink: %r", settings.mqtt)
        return MQTTSink(settings.mqtt)

    if settings.sink_type is SinkType.KAFKA:
        if settings.kafka is None:
            raise ConfigError("Kafka sink selected but Kafka settings are missing")
        logger.info("[SINK_FACTORY] Using Kafka sink: %r", settings.kafka)
        return KafkaSink(settings.kafka)

    raise ConfigError(f"Unsupported sink type: {settings.sink_type!r}")

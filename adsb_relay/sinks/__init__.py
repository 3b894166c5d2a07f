"""Sinks - Adaptadores de publicación.

- mqtt_sink.py: paho-mqtt, topic por aeronave y tipo de transmisión
- kafka_sink.py: aiokafka, topic fijo con identifier como key
- payload.py: documento JSON publicado
- factory.py: selección del sink en arranque
"""

from .factory import create_sink
from .kafka_sink import KafkaSink, build_producer_config
from .mqtt_sink import MQTTSink
from .payload import RecordPayload, encode_record, mqtt_topic

__all__ = [
    "KafkaSink",
    "MQTTSink",
    "RecordPayload",
    "build_producer_config",
    "create_sink",
    "encode_record",
    "mqtt_topic",
]

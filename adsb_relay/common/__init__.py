"""Configuración y excepciones compartidas."""

from .config import FeedSettings, KafkaSettings, MQTTSettings, Settings, SinkType, get_settings
from .errors import ConfigError, RelayError, SinkConnectionError

__all__ = [
    "ConfigError",
    "FeedSettings",
    "KafkaSettings",
    "MQTTSettings",
    "RelayError",
    "Settings",
    "SinkConnectionError",
    "SinkType",
    "get_settings",
]

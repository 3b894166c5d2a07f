"""Configuración del relay.

Se lee una sola vez al arrancar (variables de entorno + archivo .env opcional)
y se pasa explícitamente a cada adaptador. Solo se valida la configuración del
sink seleccionado.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"


class SinkType(str, Enum):
    """Backends de publicación soportados."""
    MQTT = "mqtt"
    KAFKA = "kafka"


class KafkaAuthType(str, Enum):
    """Modos de autenticación Kafka (mutuamente excluyentes)."""
    ANONYMOUS = "Anonymous"
    SCRAM_SHA_512 = "SCRAM-SHA-512"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _require(name: str) -> str:
    value = _env(name)
    if value is None:
        raise ConfigError(f"{name} not set")
    return value


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} should be an integer, got: {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} should be a number, got: {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in ("true", "1", "yes", "on")


@dataclass(frozen=True)
class FeedSettings:
    """Origen TCP del feed SBS."""
    host: Optional[str]
    port: int = 30003
    connect_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "FeedSettings":
        return cls(
            host=_env("ADSB_HOST"),
            port=_env_int("ADSB_PORT", 30003),
            connect_timeout=_env_float("ADSB_CONNECT_TIMEOUT", 10.0),
        )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class MQTTSettings:
    """Conexión al broker MQTT."""
    host: str
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: str = "adsb_publisher"
    keepalive: int = 5
    connect_timeout: float = 5.0

    @classmethod
    def from_env(cls) -> "MQTTSettings":
        return cls(
            host=_require("MQTT_HOST"),
            port=_env_int("MQTT_PORT", 1883),
            username=_env("MQTT_USERNAME"),
            password=_env("MQTT_PASSWORD"),
            client_id=_env("MQTT_CLIENT_ID", "adsb_publisher"),
            keepalive=_env_int("MQTT_KEEPALIVE", 5),
            connect_timeout=_env_float("MQTT_CONNECT_TIMEOUT", 5.0),
        )

    def __repr__(self) -> str:
        # Sin contraseña
        return (
            f"MQTTSettings(host={self.host!r}, port={self.port}, "
            f"username={self.username!r}, client_id={self.client_id!r})"
        )


@dataclass(frozen=True)
class KafkaSettings:
    """Conexión al cluster Kafka.

    Exactamente un modo de autenticación queda activo durante todo el proceso:
    - Anonymous: PLAINTEXT o SSL
    - SCRAM-SHA-512: SASL_PLAINTEXT o SASL_SSL, con usuario y contraseña
    """
    brokers: str
    topic: str
    auth_type: KafkaAuthType = KafkaAuthType.SCRAM_SHA_512
    enable_tls: bool = True
    username: Optional[str] = None
    password: Optional[str] = None
    sasl_mechanism: str = "SCRAM-SHA-512"
    message_timeout_ms: int = 5000

    def __post_init__(self):
        if self.auth_type is KafkaAuthType.SCRAM_SHA_512:
            if not self.username:
                raise ConfigError("KAFKA_USERNAME not set")
            if not self.password:
                raise ConfigError("KAFKA_PASSWORD not set")

    @classmethod
    def from_env(cls) -> "KafkaSettings":
        raw_auth = _env("KAFKA_AUTH_TYPE", KafkaAuthType.SCRAM_SHA_512.value)
        try:
            auth_type = KafkaAuthType(raw_auth)
        except ValueError:
            raise ConfigError(
                f"KAFKA_AUTH_TYPE must be one of "
                f"{[a.value for a in KafkaAuthType]}, got: {raw_auth!r}"
            ) from None

        return cls(
            brokers=_require("KAFKA_BROKERS"),
            topic=_require("KAFKA_TOPIC"),
            auth_type=auth_type,
            enable_tls=_env_bool("KAFKA_ENABLE_TLS", True),
            username=_env("KAFKA_USERNAME"),
            password=_env("KAFKA_PASSWORD"),
            sasl_mechanism=_env("KAFKA_SASL_MECHANISM", "SCRAM-SHA-512"),
            message_timeout_ms=_env_int("KAFKA_MESSAGE_TIMEOUT_MS", 5000),
        )

    @property
    def bootstrap_servers(self) -> list[str]:
        return [b.strip() for b in self.brokers.split(",") if b.strip()]

    @property
    def security_protocol(self) -> str:
        if self.auth_type is KafkaAuthType.ANONYMOUS:
            return "SSL" if self.enable_tls else "PLAINTEXT"
        return "SASL_SSL" if self.enable_tls else "SASL_PLAINTEXT"

    def __repr__(self) -> str:
        return (
            f"KafkaSettings(brokers={self.brokers!r}, topic={self.topic!r}, "
            f"auth_type={self.auth_type.value!r}, enable_tls={self.enable_tls})"
        )


@dataclass(frozen=True)
class Settings:
    feed: FeedSettings
    sink_type: SinkType
    stats_interval: int = 1000
    mqtt: Optional[MQTTSettings] = None
    kafka: Optional[KafkaSettings] = None


def parse_sink_type(raw: Optional[str]) -> SinkType:
    """Convierte el valor configurado en SinkType (MQTT si no hay valor)."""
    if raw is None or raw.strip() == "":
        return SinkType.MQTT
    try:
        return SinkType(raw.strip().lower())
    except ValueError:
        raise ConfigError(
            f"SINK_TYPE must be one of {[s.value for s in SinkType]}, got: {raw!r}"
        ) from None


def get_settings(
    env_file: Optional[str] = None,
    sink_type: Optional[str] = None,
) -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = env_file or os.getenv("ADSB_ENV_FILE", DEFAULT_ENV_FILE)
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)
        logger.debug("[CONFIG] Loaded %s", env_file)

    selected = parse_sink_type(sink_type if sink_type is not None else _env("SINK_TYPE"))

    settings = Settings(
        feed=FeedSettings.from_env(),
        sink_type=selected,
        stats_interval=_env_int("STATS_LOG_INTERVAL", 1000),
        mqtt=MQTTSettings.from_env() if selected is SinkType.MQTT else None,
        kafka=KafkaSettings.from_env() if selected is SinkType.KAFKA else None,
    )
    logger.info("[CONFIG] sink=%s feed=%s", settings.sink_type.value, settings.feed.address)
    return settings

"""Sink Kafka usando aiokafka.

El productor vive en un event loop asyncio privado que corre en un hilo
daemon ("kafka-events"). Ese loop es el listener en segundo plano: ejecuta
las rutinas internas del productor (envío de batches, ACKs, metadata) y solo
escribe al log.

El hilo principal envía cada Record con run_coroutine_threadsafe y espera el
ACK del broker con un timeout acotado, de modo que el pipeline ve éxito/fallo
síncrono por registro.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError
from aiokafka.helpers import create_ssl_context

from ..common.config import KafkaAuthType, KafkaSettings
from ..common.errors import SinkConnectionError
from ..core.domain.record import Record
from ..core.domain.sink_interface import IRecordSink, PublishOutcome
from .payload import encode_record

logger = logging.getLogger(__name__)

CLIENT_ID = "adsb_publisher"
STARTUP_TIMEOUT_SECONDS = 30.0
SHUTDOWN_TIMEOUT_SECONDS = 10.0


def build_producer_config(settings: KafkaSettings) -> dict[str, Any]:
    """Construye los kwargs de AIOKafkaProducer según el modo de autenticación."""
    config: dict[str, Any] = {
        "bootstrap_servers": settings.bootstrap_servers,
        "client_id": CLIENT_ID,
        "acks": "all",
        "request_timeout_ms": settings.message_timeout_ms,
        "security_protocol": settings.security_protocol,
    }

    if settings.enable_tls:
        config["ssl_context"] = create_ssl_context()

    if settings.auth_type is KafkaAuthType.SCRAM_SHA_512:
        config["sasl_mechanism"] = settings.sasl_mechanism
        config["sasl_plain_username"] = settings.username
        config["sasl_plain_password"] = settings.password
        logger.info(
            "[KAFKA] Using SASL authentication with protocol %s",
            settings.security_protocol,
        )
    else:
        logger.info(
            "[KAFKA] Using anonymous authentication with protocol %s",
            settings.security_protocol,
        )

    return config


class KafkaSink(IRecordSink):
    """Sink sobre un productor Kafka.

    Responsabilidades:
    - Crear el productor en arranque (fallo = fatal)
    - Publicar al topic configurado con el identifier como key
    - Esperar el ACK con timeout acotado
    """

    def __init__(
        self,
        settings: KafkaSettings,
        producer_factory: Callable[..., Any] = AIOKafkaProducer,
    ):
        self._settings = settings
        self._producer_factory = producer_factory
        self._timeout = settings.message_timeout_ms / 1000.0

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._producer: Optional[Any] = None

    @property
    def sink_name(self) -> str:
        return "kafka"

    def start(self) -> None:
        """Arranca el event loop y el productor."""
        config = build_producer_config(self._settings)

        self._loop = asyncio.new_event_loop()
        self._loop.set_exception_handler(self._on_loop_error)
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="kafka-events",
        )
        self._thread.start()

        logger.info("[KAFKA] Connecting to %s", self._settings.brokers)
        future = asyncio.run_coroutine_threadsafe(self._start_producer(config), self._loop)
        try:
            future.result(timeout=STARTUP_TIMEOUT_SECONDS)
        except FutureTimeoutError:
            future.cancel()
            self._stop_loop()
            raise SinkConnectionError(self.sink_name, "producer start timed out") from None
        except (KafkaError, OSError, ValueError) as e:
            self._stop_loop()
            raise SinkConnectionError(self.sink_name, f"producer creation error: {e}") from e

        logger.info("[KAFKA] Started successfully (topic=%s)", self._settings.topic)

    async def _start_producer(self, config: dict[str, Any]) -> None:
        # AIOKafkaProducer se crea dentro del loop que lo va a ejecutar
        producer = self._producer_factory(**config)
        try:
            await producer.start()
        except Exception:
            await producer.stop()
            raise
        self._producer = producer

    def destination_for(self, record: Record) -> str:
        return self._settings.topic

    def publish(self, record: Record) -> PublishOutcome:
        """Publica un Record y espera el ACK (como máximo message_timeout_ms)."""
        if self._producer is None or self._loop is None:
            raise RuntimeError("KafkaSink.publish called before start()")

        topic = self.destination_for(record)
        future = asyncio.run_coroutine_threadsafe(
            self._producer.send_and_wait(
                topic,
                value=encode_record(record),
                key=record.identifier.encode("utf-8"),
            ),
            self._loop,
        )

        try:
            metadata = future.result(timeout=self._timeout)
        except FutureTimeoutError:
            future.cancel()
            return PublishOutcome.failed(
                topic, f"no acknowledgment within {self._settings.message_timeout_ms} ms"
            )
        except KafkaError as e:
            return PublishOutcome.failed(topic, str(e) or type(e).__name__)

        logger.debug(
            "[KAFKA] Delivered topic=%s partition=%s offset=%s",
            topic,
            metadata.partition,
            metadata.offset,
        )
        return PublishOutcome.ok(topic)

    def close(self) -> None:
        """Vacía envíos pendientes, detiene el productor y el loop."""
        if self._loop is None:
            return

        if self._producer is not None:
            future = asyncio.run_coroutine_threadsafe(self._producer.stop(), self._loop)
            try:
                future.result(timeout=SHUTDOWN_TIMEOUT_SECONDS)
            except (KafkaError, FutureTimeoutError) as e:
                logger.warning("[KAFKA] Error stopping producer: %s", e)
            self._producer = None

        self._stop_loop()
        logger.info("[KAFKA] Stopped")

    def is_connected(self) -> bool:
        return self._producer is not None

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        logger.debug("[KAFKA] Event loop started")
        self._loop.run_forever()
        logger.debug("[KAFKA] Event loop stopped")

    def _stop_loop(self) -> None:
        loop, thread = self._loop, self._thread
        self._loop = None
        self._thread = None
        if loop is None:
            return

        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=SHUTDOWN_TIMEOUT_SECONDS)
            if thread.is_alive():
                logger.warning("[KAFKA] Event loop thread did not stop")
                return
        loop.close()

    def _on_loop_error(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        logger.warning(
            "[KAFKA] Notification: %s",
            context.get("exception") or context.get("message"),
        )

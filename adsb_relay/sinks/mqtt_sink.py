"""Sink MQTT usando paho-mqtt.

Publica cada Record en adsb/<identifier>/<transmission_type> con QoS 1.

El hilo de red de paho (loop_start) es el listener en segundo plano: mantiene
viva la conexión, procesa CONNACK/PUBACK y solo escribe al log.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import paho.mqtt.client as mqtt

from ..common.config import MQTTSettings
from ..common.errors import SinkConnectionError
from ..core.domain.record import Record
from ..core.domain.sink_interface import IRecordSink, PublishOutcome
from .payload import encode_record, mqtt_topic

logger = logging.getLogger(__name__)

PUBLISH_QOS = 1


class MQTTSink(IRecordSink):
    """Sink sobre una conexión MQTT persistente.

    Responsabilidades:
    - Conexión al broker en arranque (fallo = fatal)
    - Publicación QoS 1 esperando el PUBACK
    - Log de notificaciones del hilo de red
    """

    def __init__(self, settings: MQTTSettings):
        self._settings = settings
        self.client_id = f"{settings.client_id}-{int(time.time())}"

        self._client: Optional[mqtt.Client] = None
        self._connected = False
        self._connect_error: Optional[str] = None

    @property
    def sink_name(self) -> str:
        return "mqtt"

    def start(self) -> None:
        """Conecta al broker MQTT y arranca el hilo de red."""
        s = self._settings
        self._client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=self.client_id,
            protocol=mqtt.MQTTv311,
        )

        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        self._client.on_publish = self._on_publish

        if s.username and s.password:
            self._client.username_pw_set(s.username, s.password)

        logger.info("[MQTT] Connecting to %s:%d", s.host, s.port)
        try:
            self._client.connect(s.host, s.port, keepalive=s.keepalive)
        except (OSError, ValueError) as e:
            raise SinkConnectionError(self.sink_name, f"connect to {s.host}:{s.port} failed: {e}") from e

        self._client.loop_start()

        # Esperar CONNACK
        deadline = time.monotonic() + s.connect_timeout
        while time.monotonic() < deadline:
            if self._connected or self._connect_error:
                break
            time.sleep(0.1)

        if not self._connected:
            reason = self._connect_error or "connection timeout"
            self._client.disconnect()
            self._client.loop_stop()
            self._client = None
            raise SinkConnectionError(self.sink_name, reason)

        logger.info("[MQTT] Started successfully")

    def destination_for(self, record: Record) -> str:
        return mqtt_topic(record)

    def publish(self, record: Record) -> PublishOutcome:
        """Publica un Record y espera el PUBACK del broker."""
        if self._client is None:
            raise RuntimeError("MQTTSink.publish called before start()")

        topic = self.destination_for(record)
        payload = encode_record(record)

        try:
            info = self._client.publish(topic, payload, qos=PUBLISH_QOS, retain=False)
            if info.rc != mqtt.MQTT_ERR_SUCCESS:
                return PublishOutcome.failed(topic, mqtt.error_string(info.rc))
            info.wait_for_publish()
        except (ValueError, RuntimeError) as e:
            return PublishOutcome.failed(topic, str(e))

        return PublishOutcome.ok(topic)

    def close(self) -> None:
        """Desconecta del broker."""
        if self._client is None:
            return
        try:
            self._client.disconnect()
            self._client.loop_stop()
        except (OSError, RuntimeError) as e:
            logger.warning("[MQTT] Disconnect error: %s", e)
        self._client = None
        self._connected = False
        logger.info("[MQTT] Stopped")

    def is_connected(self) -> bool:
        return self._connected

    # Callbacks del hilo de red de paho: solo estado de conexión y log.

    def _on_connect(self, client, userdata, flags, rc, properties=None):
        """Callback de conexión."""
        if rc == 0:
            self._connected = True
            self._connect_error = None
            logger.info("[MQTT] Connected to broker")
        else:
            self._connected = False
            self._connect_error = f"connection refused: {rc}"
            logger.error("[MQTT] Connection failed: rc=%s", rc)

    def _on_disconnect(self, client, userdata, flags, rc, properties=None):
        """Callback de desconexión."""
        self._connected = False
        logger.warning("[MQTT] Disconnected (rc=%s)", rc)

    def _on_publish(self, client, userdata, mid, rc, properties=None):
        logger.debug("[MQTT] Notification: PUBACK mid=%s rc=%s", mid, rc)

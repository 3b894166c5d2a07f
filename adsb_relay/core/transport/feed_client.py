"""Cliente TCP para el feed SBS (puerto 30003 de dump1090 y similares)."""

from __future__ import annotations

import logging
import socket
from typing import BinaryIO, Iterator, Optional

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def iter_text_lines(stream: BinaryIO) -> Iterator[str]:
    """Itera líneas de texto de un stream binario.

    Quita el terminador (\\n o \\r\\n). Los bytes no UTF-8 se reemplazan para
    que una línea corrupta sea rechazada por el decoder en lugar de cortar
    el stream. Los OSError de lectura se propagan.
    """
    for raw in stream:
        yield raw.decode(ENCODING, errors="replace").rstrip("\r\n")


class FeedClient:
    """Cliente TCP de solo lectura para el feed.

    Responsabilidades:
    - Conexión/desconexión al origen
    - Entrega de líneas al pipeline
    """

    def __init__(self, host: str, port: int, connect_timeout: float = 10.0):
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout

        self._sock: Optional[socket.socket] = None
        self._reader: Optional[BinaryIO] = None

    def connect(self) -> None:
        """Conecta al feed. Los errores de conexión se propagan (fatal)."""
        logger.info("[FEED] Connecting to %s:%d", self.host, self.port)
        self._sock = socket.create_connection(
            (self.host, self.port), timeout=self.connect_timeout
        )
        # Lectura bloqueante sin timeout una vez conectado
        self._sock.settimeout(None)
        self._reader = self._sock.makefile("rb")
        logger.info("[FEED] Connected")

    def lines(self) -> Iterator[str]:
        """Líneas del feed hasta EOF."""
        if self._reader is None:
            raise RuntimeError("FeedClient is not connected")
        return iter_text_lines(self._reader)

    def close(self) -> None:
        if self._reader is not None:
            try:
                self._reader.close()
            except OSError as e:
                logger.warning("[FEED] Close error: %s", e)
            self._reader = None
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError as e:
                logger.warning("[FEED] Close error: %s", e)
            self._sock = None

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def __enter__(self) -> "FeedClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

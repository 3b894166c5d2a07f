"""Excepciones del relay."""

from __future__ import annotations


class RelayError(Exception):
    """Error base del relay."""


class ConfigError(RelayError, ValueError):
    """Configuración ausente o inválida (fatal en arranque)."""


class SinkConnectionError(RelayError):
    """No se pudo crear o conectar el handle del sink (fatal en arranque)."""

    def __init__(self, sink_name: str, reason: str):
        self.sink_name = sink_name
        self.reason = reason
        super().__init__(f"{sink_name} sink unavailable: {reason}")

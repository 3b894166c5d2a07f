"""Modelo de dominio para observaciones ADS-B."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

RECORD_KIND = "MSG"


@dataclass(frozen=True)
class Record:
    """Observación de telemetría decodificada (línea MSG).

    Se construye una vez por línea aceptada, se entrega al sink y se descarta.

    Los campos de correlación y los timestamps se copian tal cual, sin validar.
    Los numéricos opcionales son None cuando el campo está vacío o no es
    numérico; None y 0 son valores distintos para los consumidores.
    """
    record_kind: str
    transmission_type: int
    session_id: str
    source_id: str
    identifier: str
    callsign: str
    date_generated: str
    time_generated: str
    altitude: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    ground_speed: Optional[float] = None
    track: Optional[float] = None


@dataclass(frozen=True)
class Rejected:
    """Línea descartada por el decodificador."""
    line: str
    reason: str

    def __str__(self) -> str:
        return f"Rejected({self.reason})"

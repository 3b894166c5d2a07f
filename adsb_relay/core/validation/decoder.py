"""Decodificador de líneas SBS (BaseStation) a Record.

Formato de línea (separado por comas, sin comillas ni escapes):

    MSG,3,1,1,4CA2D6,1,2024/01/01,12:00:00,2024/01/01,12:00:00,,5000,450.0,270.0,51.5,-0.1,,,,,,,

Solo se aceptan líneas con al menos 22 campos cuyo primer campo sea "MSG".
Cada campo numérico se parsea de forma independiente: un valor inválido deja
el atributo en None (o en 0 para transmission_type) sin rechazar la línea.

Función pura: sin logging ni estado, segura para fuzzing.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Union

from ..domain.record import RECORD_KIND, Record, Rejected

MIN_FIELDS = 22
FIELD_DELIMITER = ","

U8_MAX = 0xFF
U32_MAX = 0xFFFFFFFF

# Posiciones de campo
F_KIND = 0
F_TRANSMISSION_TYPE = 1
F_SESSION_ID = 2
F_SOURCE_ID = 3
F_IDENTIFIER = 4
F_CALLSIGN = 5
F_DATE_GENERATED = 6
F_TIME_GENERATED = 7
F_ALTITUDE = 11
F_GROUND_SPEED = 12
F_TRACK = 13
F_LATITUDE = 14
F_LONGITUDE = 15

_UINT_RE = re.compile(r"\+?[0-9]+")
# Parte entera y fracción sin ambigüedad: fullmatch falla en tiempo lineal
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_uint(text: str, max_value: int) -> Optional[int]:
    """Parsea un entero sin signo estricto (solo dígitos ASCII, sin espacios).

    Acepta cualquier cantidad de ceros a la izquierda. La longitud se compara
    antes de int(), que rechaza cadenas de más de 4300 dígitos.

    Returns:
        El valor, o None si no es numérico o excede max_value
    """
    if not _UINT_RE.fullmatch(text):
        return None
    digits = text.lstrip("+").lstrip("0") or "0"
    if len(digits) > len(str(max_value)):
        return None
    value = int(digits)
    if value > max_value:
        return None
    return value


def parse_float(text: str) -> Optional[float]:
    """Parsea un float decimal estricto. inf/NaN se tratan como ausentes."""
    if not _FLOAT_RE.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        # "1e999" desborda a inf
        return None
    return value


def decode(line: str) -> Union[Record, Rejected]:
    """Decodifica una línea del feed.

    Args:
        line: Línea sin terminador

    Returns:
        Record si la línea es un MSG con al menos 22 campos, Rejected si no
    """
    fields = line.split(FIELD_DELIMITER)

    if len(fields) < MIN_FIELDS:
        return Rejected(
            line=line,
            reason=f"too few fields ({len(fields)} < {MIN_FIELDS})",
        )

    if fields[F_KIND] != RECORD_KIND:
        return Rejected(line=line, reason=f"not a {RECORD_KIND} record: {fields[F_KIND]!r}")

    transmission_type = parse_uint(fields[F_TRANSMISSION_TYPE], U8_MAX)

    return Record(
        record_kind=fields[F_KIND],
        transmission_type=transmission_type if transmission_type is not None else 0,
        session_id=fields[F_SESSION_ID],
        source_id=fields[F_SOURCE_ID],
        identifier=fields[F_IDENTIFIER],
        callsign=fields[F_CALLSIGN],
        date_generated=fields[F_DATE_GENERATED],
        time_generated=fields[F_TIME_GENERATED],
        altitude=parse_uint(fields[F_ALTITUDE], U32_MAX),
        latitude=parse_float(fields[F_LATITUDE]),
        longitude=parse_float(fields[F_LONGITUDE]),
        ground_speed=parse_float(fields[F_GROUND_SPEED]),
        track=parse_float(fields[F_TRACK]),
    )

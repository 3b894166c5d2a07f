"""Tests del decodificador de líneas SBS.

Cubre:
1. Rechazo estructural (campos insuficientes, tipo distinto de MSG)
2. Mapeo posicional de campos
3. Ausencia independiente de campos opcionales
4. Default de transmission_type
5. Determinismo
6. Campos numéricos enormes (sin excepciones ni backtracking)

Ejecutar:
    pytest tests/test_decoder.py -v
"""

import time

import pytest

from adsb_relay.core.domain.record import Record, Rejected
from adsb_relay.core.validation.decoder import (
    F_ALTITUDE,
    F_GROUND_SPEED,
    F_LATITUDE,
    F_LONGITUDE,
    F_TRACK,
    F_TRANSMISSION_TYPE,
    decode,
    parse_float,
    parse_uint,
)


# =============================================================================
# TEST 1: RECHAZOS
# =============================================================================

class TestRejection:
    """Líneas que nunca producen Record."""

    def test_too_few_fields(self):
        """MSG,3,1,1,ABC123 se rechaza."""
        result = decode("MSG,3,1,1,ABC123")

        assert isinstance(result, Rejected)
        assert "too few fields" in result.reason
        assert result.line == "MSG,3,1,1,ABC123"

    @pytest.mark.parametrize("count", [0, 1, 10, 21])
    def test_any_count_below_22_is_rejected(self, line_factory, count):
        line = ",".join(line_factory().split(",")[:count]) if count else ""
        assert isinstance(decode(line), Rejected)

    def test_exactly_22_fields_accepted(self, line_factory):
        line = line_factory(count=22)
        assert len(line.split(",")) == 22
        assert isinstance(decode(line), Record)

    @pytest.mark.parametrize("kind", ["SEL", "ID", "AIR", "STA", "CLK", "msg", " MSG", "MSG "])
    def test_non_msg_kind_rejected(self, line_factory, kind):
        """Cualquier tipo distinto de "MSG" exacto se rechaza."""
        result = decode(line_factory({0: kind}))

        assert isinstance(result, Rejected)
        assert "not a MSG record" in result.reason

    def test_sel_rejected_regardless_of_field_count(self, line_factory):
        assert isinstance(decode(line_factory({0: "SEL"}, count=40)), Rejected)

    def test_empty_line(self):
        assert isinstance(decode(""), Rejected)


# =============================================================================
# TEST 2: MAPEO DE CAMPOS
# =============================================================================

class TestFieldMapping:
    """Posiciones fijas → atributos del Record."""

    def test_reference_scenario(self, sample_line):
        record = decode(sample_line)

        assert isinstance(record, Record)
        assert record.record_kind == "MSG"
        assert record.identifier == "ABC123"
        assert record.transmission_type == 3
        assert record.altitude == 5000
        assert record.ground_speed == 450.0
        assert record.track == 270.0
        assert record.latitude == 51.5
        assert record.longitude == -0.1

    def test_correlation_fields_copied_verbatim(self, line_factory):
        line = line_factory({
            2: "sess 7",
            3: "  42",
            4: "4ca2d6",
            5: "BAW123  ",
            6: "not-a-date",
            7: "25:99:99",
        })
        record = decode(line)

        assert record.session_id == "sess 7"
        assert record.source_id == "  42"
        assert record.identifier == "4ca2d6"
        assert record.callsign == "BAW123  "
        assert record.date_generated == "not-a-date"
        assert record.time_generated == "25:99:99"

    def test_logged_timestamps_are_ignored(self, line_factory):
        """Los campos 8-10 no forman parte del Record."""
        a = decode(line_factory({8: "1999/01/01", 9: "00:00:00", 10: "x"}))
        b = decode(line_factory())
        assert a == b

    def test_extra_fields_ignored(self, line_factory):
        record = decode(line_factory({21: "0"}, count=30))
        assert isinstance(record, Record)
        assert record.identifier == "ABC123"


# =============================================================================
# TEST 3: CAMPOS OPCIONALES
# =============================================================================

OPTIONAL_POSITIONS = {
    F_ALTITUDE: "altitude",
    F_GROUND_SPEED: "ground_speed",
    F_TRACK: "track",
    F_LATITUDE: "latitude",
    F_LONGITUDE: "longitude",
}


class TestOptionalFields:
    """Cada opcional está presente sii su campo es numérico."""

    def test_non_numeric_altitude(self, line_factory):
        """Altitud no numérica → None, resto intacto."""
        record = decode(line_factory({F_ALTITUDE: "FL350"}))

        assert isinstance(record, Record)
        assert record.altitude is None
        assert record.ground_speed == 450.0
        assert record.track == 270.0
        assert record.latitude == 51.5
        assert record.longitude == -0.1
        assert record.transmission_type == 3

    @pytest.mark.parametrize("position", sorted(OPTIONAL_POSITIONS))
    def test_one_bad_field_does_not_affect_others(self, line_factory, position):
        record = decode(line_factory({position: "garbage"}))

        for pos, attr in OPTIONAL_POSITIONS.items():
            if pos == position:
                assert getattr(record, attr) is None
            else:
                assert getattr(record, attr) is not None

    def test_all_empty(self, line_factory):
        record = decode(line_factory({pos: "" for pos in OPTIONAL_POSITIONS}))

        assert isinstance(record, Record)
        for attr in OPTIONAL_POSITIONS.values():
            assert getattr(record, attr) is None

    def test_zero_is_not_absent(self, line_factory):
        record = decode(line_factory({F_ALTITUDE: "0", F_TRACK: "0.0"}))

        assert record.altitude == 0
        assert record.track == 0.0

    @pytest.mark.parametrize("value", ["-100", "1.5", "4294967296", " 100", "1_000", "١٢"])
    def test_altitude_must_be_u32(self, line_factory, value):
        assert decode(line_factory({F_ALTITUDE: value})).altitude is None

    def test_altitude_u32_max(self, line_factory):
        assert decode(line_factory({F_ALTITUDE: "4294967295"})).altitude == 4294967295

    @pytest.mark.parametrize("value", ["inf", "NaN", "-infinity", "1e999", " 1.0", "0x10", "1_0"])
    def test_float_rejects_non_decimal(self, line_factory, value):
        assert decode(line_factory({F_LATITUDE: value})).latitude is None


# =============================================================================
# TEST 4: TRANSMISSION TYPE
# =============================================================================

class TestTransmissionType:
    """transmission_type degrada a 0, nunca a None."""

    @pytest.mark.parametrize("value", ["", "x", "-1", "256", "3.0"])
    def test_defaults_to_zero(self, line_factory, value):
        record = decode(line_factory({F_TRANSMISSION_TYPE: value}))

        assert isinstance(record, Record)
        assert record.transmission_type == 0

    @pytest.mark.parametrize("value,expected", [("1", 1), ("8", 8), ("255", 255), ("+4", 4)])
    def test_valid_values(self, line_factory, value, expected):
        assert decode(line_factory({F_TRANSMISSION_TYPE: value})).transmission_type == expected


# =============================================================================
# TEST 5: PARSERS Y DETERMINISMO
# =============================================================================

class TestParsers:

    @pytest.mark.parametrize("text,expected", [
        ("450", 450.0),
        ("450.", 450.0),
        (".5", 0.5),
        ("-0.1", -0.1),
        ("+2.5", 2.5),
        ("1e3", 1000.0),
        ("1.5E-2", 0.015),
    ])
    def test_parse_float_accepts(self, text, expected):
        assert parse_float(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", ".", "-", "e5", "1e", "abc", "1.2.3"])
    def test_parse_float_rejects(self, text):
        assert parse_float(text) is None

    def test_parse_uint_bounds(self):
        assert parse_uint("255", 255) == 255
        assert parse_uint("256", 255) is None
        assert parse_uint("007", 255) == 7
        assert parse_uint("0000", 255) == 0
        assert parse_uint("+0", 255) == 0


# =============================================================================
# TEST 6: CAMPOS LARGOS
# =============================================================================

class TestOversizedFields:
    """Un campo numérico enorme nunca aborta ni bloquea el decode."""

    def test_huge_altitude_is_absent(self, line_factory):
        record = decode(line_factory({F_ALTITUDE: "9" * 5000}))

        assert isinstance(record, Record)
        assert record.altitude is None
        assert record.latitude == 51.5

    def test_leading_zeros_transmission_type(self, line_factory):
        record = decode(line_factory({F_TRANSMISSION_TYPE: "0" * 5000 + "3"}))

        assert record.transmission_type == 3

    def test_huge_transmission_type_defaults_to_zero(self, line_factory):
        assert decode(line_factory({F_TRANSMISSION_TYPE: "1" * 5000})).transmission_type == 0

    @pytest.mark.parametrize("position", [F_LATITUDE, F_GROUND_SPEED])
    def test_long_non_numeric_float_is_fast(self, line_factory, position):
        line = line_factory({position: "1" * 20000 + "x"})

        started = time.monotonic()
        record = decode(line)
        elapsed = time.monotonic() - started

        assert getattr(record, OPTIONAL_POSITIONS[position]) is None
        assert elapsed < 1.0

    def test_long_float_with_exponent_is_fast(self, line_factory):
        line = line_factory({F_TRACK: "1" * 10000 + "." + "2" * 10000 + "e" + "3" * 10000 + "x"})

        started = time.monotonic()
        record = decode(line)

        assert record.track is None
        assert time.monotonic() - started < 1.0


class TestDeterminism:
    """Misma entrada → mismo resultado, campo a campo."""

    @pytest.mark.parametrize("line", [
        "MSG,3,1,1,ABC123,1,2024/01/01,12:00:00,2024/01/01,12:00:00,,5000,450.0,270.0,51.5,-0.1,,,,,,,",
        "MSG,3,1,1,ABC123",
        "SEL,,,,,,,,,,,,,,,,,,,,,,",
        "MSG,x,,,,,,,,,,y,z,,,,,,,,,",
    ])
    def test_repeatable(self, line):
        assert decode(line) == decode(line)

    def test_record_is_immutable(self, sample_line):
        record = decode(sample_line)
        with pytest.raises(AttributeError):
            record.altitude = 1

"""Validation layer - Decodificación de líneas SBS."""

from .decoder import MIN_FIELDS, decode, parse_float, parse_uint

__all__ = ["MIN_FIELDS", "decode", "parse_float", "parse_uint"]

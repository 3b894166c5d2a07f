"""Monitoring - Estadísticas del pipeline."""

from .stats import Stats

__all__ = ["Stats"]

"""Domain layer - Modelos y contratos."""

from .record import RECORD_KIND, Record, Rejected
from .sink_interface import IRecordSink, PublishOutcome

__all__ = ["RECORD_KIND", "Record", "Rejected", "IRecordSink", "PublishOutcome"]

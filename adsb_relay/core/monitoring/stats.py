"""Estadísticas de procesamiento."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class Stats:
    """Estadísticas de procesamiento de líneas del feed."""

    received: int = 0
    published: int = 0
    rejected: int = 0
    failed: int = 0
    _started_monotonic: float = field(default_factory=time.monotonic, repr=False)

    def __str__(self) -> str:
        return (
            f"Stats: received={self.received} published={self.published} "
            f"rejected={self.rejected} failed={self.failed} "
            f"rate={self.lines_per_second():.1f}/s"
        )

    def lines_per_second(self) -> float:
        elapsed = time.monotonic() - self._started_monotonic
        if elapsed <= 0:
            return 0.0
        return self.received / elapsed

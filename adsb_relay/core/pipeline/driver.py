"""Driver del pipeline: fuente de líneas → decoder → sink.

Flujo por línea:
  línea → decode() → Rejected → log + contador
                   → Record   → sink.publish() → PublishOutcome → log + contador

Ninguna condición por línea detiene el loop. Solo el fin del stream o un
error de I/O de la fuente lo terminan.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from ..domain.record import Rejected
from ..domain.sink_interface import IRecordSink
from ..monitoring.stats import Stats
from ..validation.decoder import decode

logger = logging.getLogger(__name__)

DEFAULT_STATS_INTERVAL = 1000


class PipelineState(str, Enum):
    """Estados del driver."""
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


class RelayPipeline:
    """Publica cada línea decodificada en el sink activo, en orden de llegada.

    El sink se fija en el constructor y nunca se cambia durante la ejecución.
    Sin batching ni concurrencia: una línea, un publish.
    """

    def __init__(
        self,
        sink: IRecordSink,
        stats_interval: int = DEFAULT_STATS_INTERVAL,
        stats: Optional[Stats] = None,
    ):
        self._sink = sink
        self._stats_interval = stats_interval
        self._stats = stats or Stats()
        self._state: Optional[PipelineState] = None

    def run(self, lines: Iterable[str]) -> Stats:
        """Procesa líneas hasta el fin del stream.

        Raises:
            OSError: si la fuente falla mientras se lee (tras drenar)
        """
        self._state = PipelineState.RUNNING
        logger.info("[PIPELINE] Running (sink=%s)", self._sink.sink_name)

        try:
            for line in lines:
                self.process_line(line)
        except OSError as e:
            logger.error("[PIPELINE] Error reading from stream: %s", e)
            self._drain()
            raise

        logger.info("[PIPELINE] End of stream")
        self._drain()
        return self._stats

    def process_line(self, line: str) -> None:
        """Decodifica y publica una línea."""
        self._stats.received += 1

        result = decode(line)
        if isinstance(result, Rejected):
            self._stats.rejected += 1
            logger.warning("[PIPELINE] Failed to parse message: %s (%s)", line, result.reason)
        else:
            outcome = self._sink.publish(result)
            if outcome.success:
                self._stats.published += 1
                logger.debug("[PIPELINE] Published to topic: %s", outcome.destination)
            else:
                self._stats.failed += 1
                logger.warning(
                    "[PIPELINE] Failed to publish to topic %s: %s",
                    outcome.destination,
                    outcome.reason,
                )

        # Log periódico
        if self._stats_interval > 0 and self._stats.received % self._stats_interval == 0:
            logger.info("[PIPELINE] %s", self._stats)

    def _drain(self) -> None:
        self._state = PipelineState.DRAINING
        logger.info("[PIPELINE] All messages processed. %s", self._stats)
        self._state = PipelineState.TERMINATED

    @property
    def state(self) -> Optional[PipelineState]:
        return self._state

    @property
    def stats(self) -> Stats:
        return self._stats

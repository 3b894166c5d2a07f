"""Pipeline - Lectura, decodificación y publicación."""

from .driver import PipelineState, RelayPipeline

__all__ = ["PipelineState", "RelayPipeline"]

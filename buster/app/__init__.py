"""Application layer for Buster.

This layer orchestrates the walker and the manifest writer. Side effects
other than the walk itself are delegated to adapters via port interfaces.
"""

__all__ = [
    "BusterRunResult",
    "BusterService",
    "PipelineStage",
]

from buster.app.buster_service import BusterRunResult, BusterService, PipelineStage

"""Application layer - use cases and orchestration."""

from .commands import BuildFrameCommand
from .dtos import BuildFrameOutput

__all__ = [
    "BuildFrameCommand",
    "BuildFrameOutput",
]

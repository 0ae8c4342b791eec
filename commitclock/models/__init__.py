"""Models package - request-scoped entities."""

from .entities import (
    ActivityMatrix,
    ChartType,
    CommitEvent,
    PolarPoint,
    RenderConfig,
    Theme,
)

__all__ = [
    "ActivityMatrix",
    "ChartType",
    "CommitEvent",
    "PolarPoint",
    "RenderConfig",
    "Theme",
]

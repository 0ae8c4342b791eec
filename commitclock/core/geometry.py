"""
Geometry for placing matrix cells on a chart.

Grid charts map (row, col) straight to x/y. Radial charts sweep the column
axis clockwise from 12 o'clock and push each row onto its own ring.
All functions are pure.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from commitclock.models.entities import PolarPoint


@dataclass(frozen=True)
class GridLayout:
    cell_width: float
    cell_height: float
    offset_x: float = 0.0
    offset_y: float = 0.0


@dataclass(frozen=True)
class RadialLayout:
    cx: float
    cy: float
    base_radius: float
    ring_spacing: float


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def map_to_grid(row: int, col: int, layout: GridLayout) -> Tuple[float, float]:
    """Top-left corner of the cell at (row, col)."""
    return (
        col * layout.cell_width + layout.offset_x,
        row * layout.cell_height + layout.offset_y,
    )


def slot_angle(unit: float, total_units: int) -> float:
    """Angle of a slot, 0 at 12 o'clock and increasing clockwise.

    SVG's y axis points down, so a growing angle already turns clockwise.
    """
    return (unit / total_units) * 2 * math.pi - math.pi / 2


def map_to_polar(
    row: int,
    col: int,
    shape: Tuple[int, int],
    layout: RadialLayout,
) -> PolarPoint:
    """Polar position of (row, col): column sets the angle, row the ring."""
    _, cols = shape
    return PolarPoint(
        angle=slot_angle(col, cols),
        radius=layout.base_radius + row * layout.ring_spacing,
    )


def polar_to_cartesian(point: PolarPoint, cx: float, cy: float) -> Tuple[float, float]:
    return (
        cx + point.radius * math.cos(point.angle),
        cy + point.radius * math.sin(point.angle),
    )


def intensity(value: float, max_value: float) -> float:
    """Value normalized against the matrix maximum, 0 when the matrix is empty."""
    if max_value <= 0:
        return 0.0
    return clamp(value / max_value, 0.0, 1.0)


def marker_size(i: float, min_size: float, max_size: float) -> float:
    return clamp(i * max_size, min_size, max_size)


def marker_opacity(i: float) -> float:
    return clamp(i, 0.0, 1.0)


def bar_length(value: float, max_value: float, max_bar_length: float) -> float:
    """Length of a rolling-window bar; magnitude lives here, not in the radius."""
    return intensity(value, max_value) * max_bar_length


def gradient_color(i: float) -> str:
    """Hue runs from green (120) at zero intensity to red (0) at the peak."""
    i = clamp(i, 0.0, 1.0)
    hue = 120 * (1 - i)
    lightness = 30 + 50 * i
    return f"hsl({hue:.0f}, 80%, {lightness:.0f}%)"

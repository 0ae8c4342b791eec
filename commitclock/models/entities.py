"""
Data structures (entities) for commit-clock.

Uses dataclasses for clean, typed data structures.
Nothing here outlives a single request.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class Theme(str, Enum):
    """Color themes accepted in the `theme` query parameter."""
    LIGHT = "light"
    DARK = "dark"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    ORANGE = "orange"
    COLORFUL = "colorful"


class ChartType(str, Enum):
    """Chart layouts accepted in the `type` query parameter."""
    GRID = "grid"
    RADIAL = "radial"
    CIRCULAR_BARS = "circularBars"


@dataclass
class CommitEvent:
    """One or more commits recorded at a single instant."""
    timestamp: datetime
    count: int = 1

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"CommitEvent count must be >= 1, got {self.count}")
        # Naive timestamps from the API are UTC
        if self.timestamp.tzinfo is None:
            self.timestamp = self.timestamp.replace(tzinfo=timezone.utc)


@dataclass
class ActivityMatrix:
    """Fixed rows x cols grid of non-negative activity counts.

    Weekly shape is 7 x 24 (row 0 = Sunday, column = hour of day).
    Rolling shape is 1 x N (column 0 = oldest day).
    `start` and `end` are the inclusive dates the matrix covers.
    """
    rows: int
    cols: int
    cells: List[List[int]] = field(default_factory=list)
    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self):
        if not self.cells:
            self.cells = [[0] * self.cols for _ in range(self.rows)]
        if len(self.cells) != self.rows or any(len(r) != self.cols for r in self.cells):
            raise ValueError(f"cells do not match shape {self.rows}x{self.cols}")

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @property
    def total(self) -> int:
        """Sum of all cells."""
        return sum(sum(row) for row in self.cells)

    @property
    def max_value(self) -> int:
        """Largest cell value, 0 for an empty matrix."""
        return max((max(row) for row in self.cells if row), default=0)

    def add(self, row: int, col: int, count: int = 1) -> None:
        self.cells[row][col] += count

    def nonzero(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (row, col, value) for populated cells in row-major order."""
        for r, row in enumerate(self.cells):
            for c, value in enumerate(row):
                if value > 0:
                    yield r, c, value


@dataclass(frozen=True)
class PolarPoint:
    """A position given by angle (radians) and distance from a center."""
    angle: float
    radius: float


@dataclass(frozen=True)
class RenderConfig:
    """Per-request rendering options, immutable for one render."""
    username: str
    theme: Theme = Theme.LIGHT
    chart_type: ChartType = ChartType.GRID
    timezone: str = "UTC"

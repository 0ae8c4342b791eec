"""Pydantic models for heatmap API."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class HeatmapCell(BaseModel):
    row: int  # weekday (0=Sunday) or 0 for rolling windows
    col: int  # hour of day or day offset (0=oldest)
    value: int


class HeatmapResponse(BaseModel):
    username: str
    rows: int
    cols: int
    cells: List[HeatmapCell]
    max_value: int
    total: int
    timezone: str
    start: Optional[date] = None
    end: Optional[date] = None

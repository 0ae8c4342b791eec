"""
Terminal output for commit-clock.

Renders an ActivityMatrix as a small text report for the CLI.
"""

import os
import sys
from typing import List, Union

from commitclock.core.bucketer import window_dates
from commitclock.models.entities import ActivityMatrix
from commitclock.render.svg import DAY_LABELS
from commitclock.utils.timestamps import to_date_string

# Enable ANSI colors on Windows
if sys.platform == 'win32':
    os.system('')  # Triggers VT100 emulation


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Apply color if enabled."""
    if not enabled:
        return text
    return f"{color}{text}{Colors.RESET}"


def bold(text: str, enabled: bool = True) -> str:
    """Make text bold."""
    return colorize(text, Colors.BOLD, enabled)


def format_number(value: Union[int, float]) -> str:
    """Format number with thousands separator."""
    return f"{int(value):,}"


def create_bar(value: float, max_value: float, width: int = 20) -> str:
    """Create ASCII progress bar."""
    if max_value == 0:
        return ' ' * width

    ratio = min(1.0, value / max_value)
    filled = int(ratio * width)

    return '█' * filled + '░' * (width - filled)


def _shade(bar: str, share: float, enabled: bool) -> str:
    if share > 0.25:
        return colorize(bar, Colors.GREEN, enabled)
    if share > 0.10:
        return colorize(bar, Colors.YELLOW, enabled)
    return bar


def format_weekly_summary(matrix: ActivityMatrix, username: str,
                          color_enabled: bool = True) -> str:
    """Weekday totals with bars, followed by the busiest hours."""
    lines = [bold(f"COMMIT ACTIVITY: {username}", color_enabled)]
    lines.append(f"({to_date_string(matrix.start)} to {to_date_string(matrix.end)})")
    lines.append("")

    total = matrix.total
    if total == 0:
        return "\n".join(lines) + "\nNo commit activity found."

    day_totals = [sum(row) for row in matrix.cells]
    max_day = max(day_totals)

    lines.append(f"{'Day':5} {'Commits':>8} {'Peak':>6} {'Activity':30}")
    lines.append("-" * 52)
    for row, day_total in enumerate(day_totals):
        cells = matrix.cells[row]
        peak = f"{cells.index(max(cells)):02d}:00" if day_total else "-"
        bar = _shade(create_bar(day_total, max_day, width=30), day_total / total, color_enabled)
        lines.append(f"{DAY_LABELS[row]:5} {format_number(day_total):>8} {peak:>6} {bar}")
    lines.append("-" * 52)
    lines.append(f"{'TOTAL':5} {format_number(total):>8}")
    lines.append("")

    hour_totals = [sum(matrix.cells[r][h] for r in range(matrix.rows)) for h in range(matrix.cols)]
    peak_hours: List[int] = sorted(range(matrix.cols), key=lambda h: (-hour_totals[h], h))[:3]

    lines.append(bold("PEAK HOURS", color_enabled))
    lines.append("-" * 40)
    for hour in peak_hours:
        if hour_totals[hour] == 0:
            break
        pct = hour_totals[hour] / total * 100
        lines.append(f"{hour:02d}:00 - {hour:02d}:59  {format_number(hour_totals[hour]):>6} commits ({pct:.1f}%)")

    return "\n".join(lines)


def format_rolling_summary(matrix: ActivityMatrix, username: str,
                           color_enabled: bool = True) -> str:
    """One line per day of a rolling window."""
    lines = [bold(f"DAILY CONTRIBUTIONS: {username}", color_enabled)]
    lines.append(f"({to_date_string(matrix.start)} to {to_date_string(matrix.end)})")
    lines.append("")

    counts = matrix.cells[0]
    max_count = matrix.max_value
    for day, count in zip(window_dates(matrix), counts):
        lines.append(f"{to_date_string(day):10} {format_number(count):>6} {create_bar(count, max_count, width=30)}")
    lines.append("-" * 48)
    lines.append(f"{'TOTAL':10} {format_number(matrix.total):>6}")
    return "\n".join(lines)

"""
Activity bucketing.

Folds commit instants (or per-date contribution counts) into a fixed-size
ActivityMatrix. Summation is order independent, so callers may feed events
in whatever order their fetches complete.
"""

from datetime import date, timedelta
from typing import Iterable, Mapping, Optional

from commitclock.models.entities import ActivityMatrix, CommitEvent
from commitclock.utils.timestamps import local_weekday, resolve_timezone

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24
ROLLING_DAYS = 30


def bucket_weekly(
    events: Iterable[CommitEvent],
    timezone: str = "UTC",
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> ActivityMatrix:
    """Bucket events into a 7 x 24 weekday/hour matrix.

    Each instant is converted to `timezone` before its weekday (0=Sunday)
    and hour are taken. When `start`/`end` are given, events whose local
    date falls outside the inclusive window are dropped.

    Raises:
        ValueError: if `timezone` is not a known IANA zone.
    """
    tz = resolve_timezone(timezone)
    matrix = ActivityMatrix(DAYS_PER_WEEK, HOURS_PER_DAY, start=start, end=end)

    for event in events:
        local = event.timestamp.astimezone(tz)
        local_date = local.date()
        if start and local_date < start:
            continue
        if end and local_date > end:
            continue
        matrix.add(local_weekday(local), local.hour, event.count)

    return matrix


def bucket_rolling(
    day_counts: Mapping[date, int],
    today: date,
    days: int = ROLLING_DAYS,
) -> ActivityMatrix:
    """Bucket per-date counts into a 1 x `days` rolling window.

    Column `days - 1` is `today` (UTC), column 0 is the oldest day.
    Dates outside the window are dropped, never wrapped.
    """
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}")

    first = today - timedelta(days=days - 1)
    matrix = ActivityMatrix(1, days, start=first, end=today)

    for day, count in day_counts.items():
        if count <= 0:
            continue
        offset = (day - first).days
        if 0 <= offset < days:
            matrix.add(0, offset, count)

    return matrix


def window_dates(matrix: ActivityMatrix) -> list:
    """Calendar dates covered by a rolling matrix, one per column."""
    if matrix.start is None:
        return []
    return [matrix.start + timedelta(days=i) for i in range(matrix.cols)]

"""
Timestamp utilities for commit-clock.

GitHub reports instants as ISO-8601 strings, usually UTC with a 'Z'
suffix, sometimes with the author's own offset.
"""

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def parse_timestamp(ts: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp to an aware datetime.

    Returns None if parsing fails. Strings without an offset are UTC.

    Args:
        ts: Timestamp string like "2024-03-10T23:30:00Z"
    """
    if not ts or not isinstance(ts, str):
        return None

    try:
        if ts.endswith('Z'):
            ts = ts[:-1] + '+00:00'
        dt = datetime.fromisoformat(ts)
    except (ValueError, TypeError):
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def resolve_timezone(name: str) -> ZoneInfo:
    """Look up an IANA zone, raising ValueError for unknown names."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise ValueError(f"Unknown timezone: {name}") from e


def local_weekday(dt: datetime) -> int:
    """Weekday index with 0=Sunday, 6=Saturday."""
    return dt.isoweekday() % 7


def utc_today() -> date:
    """Today's calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def to_date_string(d: Optional[date]) -> str:
    """Format a date as YYYY-MM-DD, or "N/A" if None."""
    if not d:
        return "N/A"
    return d.strftime('%Y-%m-%d')

"""
The fetch -> bucket -> render pipeline.

One parameterized path serves every chart variant: weekday/hour charts
(grid, radial) are fed by push events or a per-day commit search, the
rolling circular-bar chart by the contribution calendar.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from commitclock.config.loader import DEFAULT_CONFIG
from commitclock.core.bucketer import bucket_rolling, bucket_weekly
from commitclock.errors import ValidationError
from commitclock.github.client import GitHubClient
from commitclock.models.entities import ActivityMatrix, ChartType, RenderConfig
from commitclock.render.svg import render
from commitclock.utils.timestamps import resolve_timezone, utc_today

logger = logging.getLogger("commitclock.pipeline")

SOURCES = ("events", "search")


async def build_weekly_matrix(
    client: GitHubClient,
    username: str,
    timezone: str = "UTC",
    source: str = "events",
    today: Optional[date] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> ActivityMatrix:
    """Weekday/hour matrix for a user.

    `events` reads recent public pushes and keeps the last
    `events_window_days` local days. `search` picks the most recent days
    with contributions from the calendar and searches commits per day.
    `today` is the current date in `timezone`.
    """
    settings = settings or DEFAULT_CONFIG
    activity = settings["activity"]
    if source not in SOURCES:
        raise ValidationError(f"Unknown source: {source}")
    try:
        tz = resolve_timezone(timezone)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    today = today or datetime.now(tz).date()

    if source == "events":
        events = await client.fetch_push_events(username)
        start = today - timedelta(days=activity["events_window_days"] - 1)
        return bucket_weekly(events, timezone, start=start, end=today)

    calendar = await client.fetch_contribution_calendar(username)
    active_days = sorted(d for d, count in calendar.items() if count > 0 and d <= today)
    days = active_days[-activity["search_days"]:]
    if not days:
        return bucket_weekly([], timezone)

    events = await client.fetch_commits_by_day(username, days)
    logger.debug("Search source for %s: %d events over %d days", username, len(events), len(days))
    # The per-day queries already bound the data; a local-date filter would
    # drop commits that cross midnight in the target zone.
    matrix = bucket_weekly(events, timezone)
    matrix.start, matrix.end = days[0], days[-1]
    return matrix


async def build_rolling_matrix(
    client: GitHubClient,
    username: str,
    today: Optional[date] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> ActivityMatrix:
    """1 x N matrix of daily contribution counts ending today (UTC)."""
    settings = settings or DEFAULT_CONFIG
    days = settings["activity"]["rolling_days"]
    today = today or utc_today()
    first = today - timedelta(days=days - 1)
    calendar = await client.fetch_contribution_calendar(username, first, today)
    return bucket_rolling(calendar, today, days)


async def build_matrix(
    client: GitHubClient,
    config: RenderConfig,
    source: str = "events",
    today: Optional[date] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> ActivityMatrix:
    """Pick the matrix shape the chart type needs."""
    if ChartType(config.chart_type) == ChartType.CIRCULAR_BARS:
        return await build_rolling_matrix(client, config.username, today, settings)
    return await build_weekly_matrix(
        client, config.username, config.timezone, source, today, settings
    )


async def render_activity(
    client: GitHubClient,
    config: RenderConfig,
    source: str = "events",
    today: Optional[date] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> str:
    """Fetch, bucket and render one chart."""
    matrix = await build_matrix(client, config, source, today, settings)
    logger.info(
        "Rendered %s for %s: %d events, peak %d",
        ChartType(config.chart_type).value, config.username, matrix.total, matrix.max_value,
    )
    return render(matrix, config, settings)

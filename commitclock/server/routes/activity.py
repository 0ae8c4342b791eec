"""Activity chart endpoints.

SVG routes always answer with an image, errors included, because the
usual consumer is an <img> tag in a README.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from commitclock.github.client import GitHubClient
from commitclock.pipeline import build_matrix, render_activity
from commitclock.server.dependencies import get_config, get_github
from commitclock.server.models.activity import parse_activity_params
from commitclock.server.models.heatmap import HeatmapCell, HeatmapResponse

router = APIRouter(prefix="/api", tags=["activity"])

SVG_MEDIA_TYPE = "image/svg+xml"

HEATMAP_DEFAULTS = {"type": "grid", "theme": "green", "tz": "UTC", "source": "events"}
CLOCK_DEFAULTS = {"type": "radial", "theme": "light", "tz": "UTC", "source": "search"}


def svg_response(svg: str, config: dict) -> Response:
    max_age = config["cache"]["max_age_seconds"]
    return Response(
        content=svg,
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": f"public, max-age={max_age}"},
    )


@router.get("/heatmap")
async def heatmap_svg(
    username: Optional[str] = Query(None),
    chart_type: Optional[str] = Query(None, alias="type"),
    theme: Optional[str] = Query(None),
    tz: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    github: GitHubClient = Depends(get_github),
    config: dict = Depends(get_config),
):
    """Commit heatmap as SVG (grid by default)."""
    params = parse_activity_params(
        HEATMAP_DEFAULTS, username, type=chart_type, theme=theme, tz=tz, source=source
    )
    svg = await render_activity(github, params.to_render_config(), params.source, settings=config)
    return svg_response(svg, config)


@router.get("/heatmap/data", response_model=HeatmapResponse)
async def heatmap_data(
    username: Optional[str] = Query(None),
    chart_type: Optional[str] = Query(None, alias="type"),
    tz: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    github: GitHubClient = Depends(get_github),
    config: dict = Depends(get_config),
):
    """The bucketed matrix behind a chart, as JSON."""
    params = parse_activity_params(
        HEATMAP_DEFAULTS, username, type=chart_type, tz=tz, source=source
    )
    matrix = await build_matrix(github, params.to_render_config(), params.source, settings=config)
    return HeatmapResponse(
        username=params.username,
        rows=matrix.rows,
        cols=matrix.cols,
        cells=[HeatmapCell(row=r, col=c, value=v) for r, c, v in matrix.nonzero()],
        max_value=matrix.max_value,
        total=matrix.total,
        timezone=params.tz,
        start=matrix.start,
        end=matrix.end,
    )


@router.get("/{username}")
async def commit_clock_svg(
    username: str,
    chart_type: Optional[str] = Query(None, alias="type"),
    theme: Optional[str] = Query(None),
    tz: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    github: GitHubClient = Depends(get_github),
    config: dict = Depends(get_config),
):
    """Commit clock for a user (radial by default)."""
    params = parse_activity_params(
        CLOCK_DEFAULTS, username, type=chart_type, theme=theme, tz=tz, source=source
    )
    svg = await render_activity(github, params.to_render_config(), params.source, settings=config)
    return svg_response(svg, config)

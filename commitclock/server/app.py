"""
FastAPI application factory for commit-clock.

Creates the app with all routes, lifespan management and the exception
handlers that keep the image contract for errors.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from commitclock.config.loader import load_config
from commitclock.errors import ActivityError
from commitclock.github.client import GitHubClient
from commitclock.render.svg import render_error
from commitclock.server.models.common import ErrorResponse
from commitclock.server.routes.health import VERSION

logger = logging.getLogger("commitclock.server")

GENERIC_ERROR = "Could not fetch GitHub activity"

# Routes that answer errors as JSON; every other route answers with an image
JSON_PATHS = ("/api/heatmap/data",)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage the shared GitHub client lifecycle."""
    config = app.state.config if hasattr(app.state, "config") else load_config()
    app.state.config = config

    github = GitHubClient(config)
    app.state.github = github

    yield

    await github.aclose()


def _wants_json(request: Request) -> bool:
    return request.url.path.rstrip("/") in JSON_PATHS


def _error_response(request: Request, status_code: int, message: str) -> Response:
    if _wants_json(request):
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=message).model_dump(),
            headers={"Cache-Control": "no-store"},
        )
    config = request.app.state.config
    svg = render_error(message, request.query_params.get("theme", "light"), config)
    return Response(
        content=svg,
        status_code=status_code,
        media_type="image/svg+xml",
        headers={"Cache-Control": "no-store"},
    )


def create_app(config: dict = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="commit-clock",
        description="GitHub commit activity as embeddable SVG charts",
        version=VERSION,
        lifespan=lifespan,
    )

    if config:
        app.state.config = config

    @app.exception_handler(ActivityError)
    async def activity_error_handler(request: Request, exc: ActivityError):
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(request, 500, GENERIC_ERROR)

    # Health and fixed /api paths BEFORE the /api/{username} catch-all
    from commitclock.server.routes.health import router as health_router
    from commitclock.server.routes.activity import router as activity_router

    app.include_router(health_router)
    app.include_router(activity_router)

    return app

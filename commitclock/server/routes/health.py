"""Health check endpoint."""

import time

from fastapi import APIRouter, Depends

from commitclock.config.loader import get_github_token
from commitclock.server.dependencies import get_config
from commitclock.server.models.common import HealthResponse

VERSION = "1.0.0"

router = APIRouter(prefix="/api", tags=["health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(config: dict = Depends(get_config)):
    """Health check: returns status, uptime and whether a GitHub token is set."""
    return HealthResponse(
        status="ok",
        uptime_seconds=int(time.time() - _start_time),
        version=VERSION,
        token_configured=get_github_token(config) is not None,
    )

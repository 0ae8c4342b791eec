"""FastAPI dependency injection for the GitHub client and config."""

from fastapi import Request

from commitclock.github.client import GitHubClient


async def get_github(request: Request) -> GitHubClient:
    """Get the shared GitHub client from app state."""
    return request.app.state.github


def get_config(request: Request) -> dict:
    """Get the loaded config from app state."""
    return request.app.state.config

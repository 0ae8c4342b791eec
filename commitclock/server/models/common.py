"""Common Pydantic models for API responses."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response for JSON endpoints."""
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    uptime_seconds: int
    version: str
    token_configured: bool

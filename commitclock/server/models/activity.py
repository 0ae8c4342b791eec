"""Pydantic models for activity chart requests."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from commitclock.errors import ValidationError
from commitclock.models.entities import ChartType, RenderConfig, Theme
from commitclock.utils.timestamps import resolve_timezone

# GitHub logins: alphanumerics joined by single hyphens, no leading or
# trailing hyphen, at most 39 characters
USERNAME_PATTERN = r"^[A-Za-z0-9](?:-?[A-Za-z0-9]){0,38}$"


class ActivityParams(BaseModel):
    """Query parameters shared by the chart endpoints."""
    username: str = Field(..., pattern=USERNAME_PATTERN, max_length=39)
    chart_type: ChartType = Field(ChartType.GRID, alias="type")
    theme: Theme = Theme.GREEN
    tz: str = "UTC"
    source: Literal["events", "search"] = "events"

    model_config = {"populate_by_name": True}

    @field_validator("chart_type", mode="before")
    @classmethod
    def accept_rectangular(cls, value):
        # Older embed snippets ask for type=rectangular
        if value == "rectangular":
            return ChartType.GRID
        return value

    @field_validator("tz")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        resolve_timezone(value)
        return value

    def to_render_config(self) -> RenderConfig:
        return RenderConfig(
            username=self.username,
            theme=self.theme,
            chart_type=self.chart_type,
            timezone=self.tz,
        )


def parse_activity_params(
    defaults: Dict[str, Any],
    username: Optional[str] = None,
    **query: Optional[str],
) -> ActivityParams:
    """Validate raw query values over per-endpoint defaults.

    Raises:
        ValidationError: missing username or any invalid value.
    """
    if not username or not username.strip():
        raise ValidationError("Missing required parameter: username")

    values = dict(defaults)
    values["username"] = username.strip()
    values.update({k: v for k, v in query.items() if v not in (None, "")})

    try:
        return ActivityParams.model_validate(values)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(p) for p in error.get("loc", ())) or "request"
        raise ValidationError(f"Invalid {field}: {values.get(field, '')}") from e

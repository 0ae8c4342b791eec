"""
Error taxonomy for commit-clock.

Every error that can reach a client carries the HTTP status it maps to,
so the server can answer with an image instead of a broken <img> icon.
"""


class ActivityError(Exception):
    """Base class for errors reported back to the client."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ActivityError):
    """Missing or invalid request parameter. No upstream call is made."""

    status_code = 400


class UpstreamNotFound(ActivityError):
    """GitHub user does not exist or has no public data."""

    status_code = 404

    def __init__(self, username: str):
        super().__init__(f'GitHub user "{username}" not found')
        self.username = username


class UpstreamUnavailable(ActivityError):
    """Network failure, non-2xx answer or malformed payload from GitHub."""

    status_code = 500

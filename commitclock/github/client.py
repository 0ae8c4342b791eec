"""
GitHub data fetcher.

Async client over the REST and GraphQL APIs. Every transport problem is
turned into UpstreamUnavailable here, and "no such user" into
UpstreamNotFound, so nothing past this module has to know about httpx.
"""

import asyncio
import logging
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional

import httpx

from commitclock.config.loader import get_github_token
from commitclock.errors import UpstreamNotFound, UpstreamUnavailable
from commitclock.models.entities import CommitEvent
from commitclock.utils.timestamps import parse_timestamp

logger = logging.getLogger("commitclock.github")

CALENDAR_QUERY = """
query($login: String!, $from: DateTime, $to: DateTime) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


class GitHubClient:
    """Thin async wrapper around the GitHub endpoints commit-clock reads."""

    def __init__(self, config: Dict[str, Any],
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        gh = config["github"]
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": gh["user_agent"],
        }
        token = get_github_token(config)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.graphql_url = gh["graphql_url"]
        self._client = httpx.AsyncClient(
            base_url=gh["api_url"],
            headers=headers,
            timeout=gh["timeout_seconds"],
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("GitHub request %s %s failed: %s", method, url, e)
            raise UpstreamUnavailable("Could not reach GitHub") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailable("GitHub returned a malformed response") from e

    async def fetch_push_events(self, username: str) -> List[CommitEvent]:
        """Commit events from the user's recent public push events.

        Each PushEvent becomes one CommitEvent at the push instant whose
        count is the number of commits it carried.
        """
        response = await self._request(
            "GET", f"/users/{username}/events/public", params={"per_page": 100}
        )
        if response.status_code == 404:
            raise UpstreamNotFound(username)
        if response.status_code != 200:
            logger.warning("Events for %s: HTTP %s", username, response.status_code)
            raise UpstreamUnavailable(f"GitHub answered HTTP {response.status_code}")

        data = self._json(response)
        if not isinstance(data, list):
            raise UpstreamUnavailable("GitHub returned a malformed response")

        events = []
        for event in data:
            if not isinstance(event, dict) or event.get("type") != "PushEvent":
                continue
            payload = event.get("payload")
            commits = payload.get("commits") if isinstance(payload, dict) else None
            created = parse_timestamp(event.get("created_at"))
            if isinstance(commits, list) and commits and created:
                events.append(CommitEvent(timestamp=created, count=len(commits)))

        logger.debug("Fetched %d push events for %s", len(events), username)
        return events

    async def fetch_contribution_calendar(
        self,
        username: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Dict[date, int]:
        """Per-date contribution counts from the GraphQL contribution calendar."""
        variables = {
            "login": username,
            "from": _graphql_datetime(date_from, time.min),
            "to": _graphql_datetime(date_to, time(23, 59, 59)),
        }
        response = await self._request(
            "POST", self.graphql_url, json={"query": CALENDAR_QUERY, "variables": variables}
        )
        if response.status_code != 200:
            logger.warning("Calendar for %s: HTTP %s", username, response.status_code)
            raise UpstreamUnavailable(f"GitHub answered HTTP {response.status_code}")

        result = self._json(response)
        if not isinstance(result, dict):
            raise UpstreamUnavailable("GitHub returned a malformed response")

        user = (result.get("data") or {}).get("user")
        if user is None:
            # GraphQL reports a missing login as a null user plus a NOT_FOUND error
            if result.get("errors") and not _is_not_found(result["errors"]):
                logger.warning("GraphQL errors for %s: %s", username, result["errors"])
                raise UpstreamUnavailable("GitHub GraphQL query failed")
            raise UpstreamNotFound(username)

        counts: Dict[date, int] = {}
        try:
            weeks = user["contributionsCollection"]["contributionCalendar"]["weeks"]
            for week in weeks:
                for day in week["contributionDays"]:
                    counts[date.fromisoformat(day["date"])] = int(day["contributionCount"])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamUnavailable("GitHub returned a malformed calendar") from e

        return counts

    async def search_commits_on(self, username: str, day: date) -> List[CommitEvent]:
        """Commits authored by the user with the given committer date."""
        response = await self._request(
            "GET",
            "/search/commits",
            params={
                "q": f"author:{username} committer-date:{day.isoformat()}",
                "per_page": 100,
            },
        )
        if response.status_code != 200:
            raise UpstreamUnavailable(
                f"Commit search for {day.isoformat()} answered HTTP {response.status_code}"
            )

        data = self._json(response)
        if not isinstance(data, dict):
            raise UpstreamUnavailable("GitHub returned a malformed response")

        items = data.get("items")
        if not isinstance(items, list):
            items = []

        events = []
        for item in items:
            try:
                stamp = parse_timestamp(item["commit"]["committer"]["date"])
            except (KeyError, TypeError):
                stamp = None
            if stamp:
                events.append(CommitEvent(timestamp=stamp))
        return events

    async def fetch_commits_by_day(self, username: str, days: Iterable[date]) -> List[CommitEvent]:
        """Search commits for several days concurrently.

        A day whose search fails contributes no events; the rest still count.
        """
        days = list(days)
        results = await asyncio.gather(
            *(self.search_commits_on(username, day) for day in days),
            return_exceptions=True,
        )

        events: List[CommitEvent] = []
        for day, result in zip(days, results):
            if isinstance(result, UpstreamUnavailable):
                logger.warning("Skipping %s for %s: %s", day.isoformat(), username, result.message)
                continue
            if isinstance(result, BaseException):
                raise result
            events.extend(result)
        return events


def _graphql_datetime(day: Optional[date], at: time) -> Optional[str]:
    if day is None:
        return None
    return datetime.combine(day, at, tzinfo=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _is_not_found(errors: Any) -> bool:
    if not isinstance(errors, list):
        return False
    return any(isinstance(e, dict) and e.get("type") == "NOT_FOUND" for e in errors)

"""Test fixtures for server tests.

Stands up a fake GitHub behind httpx.MockTransport with deterministic data
for one known user, so endpoints run end to end without the network.

Known users:
- octocat: push events, a contribution calendar and per-day commit search
- broken: every request answers HTTP 502
- anyone else: does not exist
"""

import copy
import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from commitclock.config.loader import DEFAULT_CONFIG
from commitclock.github.client import GitHubClient
from commitclock.server.app import create_app

NOW = datetime.now(timezone.utc).replace(minute=30, second=0, microsecond=0)
TODAY = NOW.date()


def _stamp(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def _push(created: datetime, commits: int, event_type: str = "PushEvent") -> dict:
    return {
        "type": event_type,
        "created_at": _stamp(created),
        "payload": {"commits": [{"sha": f"sha-{i}"} for i in range(commits)]},
    }


# 3 commits inside the 90 day window, 5 outside, plus noise
PUSH_EVENTS = [
    _push(NOW - timedelta(days=1), 2),
    _push(NOW - timedelta(days=3), 1),
    _push(NOW - timedelta(days=2), 4, event_type="WatchEvent"),
    _push(NOW - timedelta(days=4), 0),
    _push(NOW - timedelta(days=120), 5),
]

# Days with contributions; the 40 day old entry falls outside the rolling window
CALENDAR_COUNTS = {
    TODAY - timedelta(days=1): 2,
    TODAY - timedelta(days=5): 1,
    TODAY - timedelta(days=40): 3,
    TODAY - timedelta(days=2): 0,
}


def calendar_payload(counts: dict) -> dict:
    days = [
        {"date": d.isoformat(), "contributionCount": c}
        for d, c in sorted(counts.items())
    ]
    return {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {"weeks": [{"contributionDays": days}]}
                }
            }
        }
    }


def search_payload(day_iso: str, count: int) -> dict:
    items = [
        {"commit": {"committer": {"date": f"{day_iso}T10:{15 + i:02d}:00Z"}}}
        for i in range(count)
    ]
    return {"total_count": count, "items": items}


NOT_FOUND_GRAPHQL = {
    "data": {"user": None},
    "errors": [{"type": "NOT_FOUND", "message": "Could not resolve to a User"}],
}


def fake_github(request: httpx.Request) -> httpx.Response:
    """Route a request to canned GitHub answers."""
    path = request.url.path

    if path == "/graphql":
        login = json.loads(request.content)["variables"]["login"]
        if login == "octocat":
            return httpx.Response(200, json=calendar_payload(CALENDAR_COUNTS))
        if login == "broken":
            return httpx.Response(502, text="Bad gateway")
        return httpx.Response(200, json=NOT_FOUND_GRAPHQL)

    if path.endswith("/events/public"):
        login = path.split("/")[2]
        if login == "octocat":
            return httpx.Response(200, json=PUSH_EVENTS)
        if login == "broken":
            return httpx.Response(502, text="Bad gateway")
        return httpx.Response(404, json={"message": "Not Found"})

    if path == "/search/commits":
        query = request.url.params["q"]
        day_iso = query.split("committer-date:")[1]
        count = {d.isoformat(): c for d, c in CALENDAR_COUNTS.items()}.get(day_iso, 0)
        return httpx.Response(200, json=search_payload(day_iso, count))

    return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def test_config():
    """Default config with the token read from an unset variable."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["github"]["token_env"] = "COMMITCLOCK_TEST_TOKEN"
    return config


@pytest_asyncio.fixture
async def github(test_config):
    """GitHub client wired to the fake API."""
    client = GitHubClient(test_config, transport=httpx.MockTransport(fake_github))
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def client(test_config, github):
    """Create an async test client backed by the fake GitHub."""
    app = create_app(config=test_config)

    # Override lifespan by manually setting up state
    app.state.config = test_config
    app.state.github = github

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

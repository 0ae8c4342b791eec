"""Tests for the GitHub data fetcher against mocked transports."""

import json
from datetime import date, datetime, timezone

import httpx
import pytest

from commitclock.errors import UpstreamNotFound, UpstreamUnavailable
from commitclock.github.client import GitHubClient

from conftest import NOT_FOUND_GRAPHQL, calendar_payload, search_payload


def _client(test_config, handler) -> GitHubClient:
    return GitHubClient(test_config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
class TestPushEvents:
    """Test fetch_push_events."""

    async def test_push_events_become_commit_events(self, github):
        events = await github.fetch_push_events("octocat")
        # Watch events, empty pushes are skipped; the old push is still returned
        assert sorted(e.count for e in events) == [1, 2, 5]
        assert all(e.timestamp.tzinfo is not None for e in events)

    async def test_unknown_user_raises_not_found(self, github):
        with pytest.raises(UpstreamNotFound) as ctx:
            await github.fetch_push_events("ghost-user")
        assert "ghost-user" in ctx.value.message
        assert ctx.value.status_code == 404

    async def test_server_error_raises_unavailable(self, github):
        with pytest.raises(UpstreamUnavailable):
            await github.fetch_push_events("broken")

    async def test_network_error_raises_unavailable(self, test_config):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(test_config, handler)
        try:
            with pytest.raises(UpstreamUnavailable):
                await client.fetch_push_events("octocat")
        finally:
            await client.aclose()

    async def test_malformed_body_raises_unavailable(self, test_config):
        client = _client(test_config, lambda request: httpx.Response(200, content=b"<html>"))
        try:
            with pytest.raises(UpstreamUnavailable):
                await client.fetch_push_events("octocat")
        finally:
            await client.aclose()

    async def test_token_sent_when_configured(self, test_config, monkeypatch):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["agent"] = request.headers.get("User-Agent")
            return httpx.Response(200, json=[])

        monkeypatch.setenv("COMMITCLOCK_TEST_TOKEN", "secret-token")
        client = _client(test_config, handler)
        try:
            assert await client.fetch_push_events("octocat") == []
        finally:
            await client.aclose()

        assert seen["auth"] == "Bearer secret-token"
        assert seen["agent"] == "commit-clock"

    async def test_no_token_no_auth_header(self, test_config):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=[])

        client = _client(test_config, handler)
        try:
            await client.fetch_push_events("octocat")
        finally:
            await client.aclose()
        assert seen["auth"] is None

    async def test_malformed_events_are_skipped(self, test_config):
        payload = [
            {"type": "PushEvent", "created_at": 12345, "payload": {"commits": [{"sha": "a"}]}},
            {"type": "PushEvent", "created_at": "2024-03-11T09:00:00Z", "payload": "oops"},
            {"type": "PushEvent", "created_at": "2024-03-11T09:00:00Z", "payload": {"commits": 3}},
            {"type": "PushEvent", "created_at": "2024-03-11T10:00:00Z",
             "payload": {"commits": [{"sha": "b"}, {"sha": "c"}]}},
        ]
        client = _client(test_config, lambda r: httpx.Response(200, json=payload))
        try:
            events = await client.fetch_push_events("octocat")
        finally:
            await client.aclose()
        assert [(e.timestamp, e.count) for e in events] == [
            (datetime(2024, 3, 11, 10, tzinfo=timezone.utc), 2),
        ]


@pytest.mark.asyncio
class TestContributionCalendar:
    """Test fetch_contribution_calendar."""

    async def test_calendar_returns_counts_by_date(self, test_config):
        counts = {date(2024, 3, 1): 4, date(2024, 3, 2): 0}
        client = _client(test_config, lambda r: httpx.Response(200, json=calendar_payload(counts)))
        try:
            result = await client.fetch_contribution_calendar("octocat")
        finally:
            await client.aclose()
        assert result == counts

    async def test_calendar_sends_date_range(self, test_config):
        seen = {}

        def handler(request):
            seen.update(json.loads(request.content)["variables"])
            return httpx.Response(200, json=calendar_payload({}))

        client = _client(test_config, handler)
        try:
            await client.fetch_contribution_calendar("octocat", date(2024, 3, 1), date(2024, 3, 30))
        finally:
            await client.aclose()

        assert seen["login"] == "octocat"
        assert seen["from"] == "2024-03-01T00:00:00Z"
        assert seen["to"] == "2024-03-30T23:59:59Z"

    async def test_calendar_without_range_sends_nulls(self, test_config):
        seen = {}

        def handler(request):
            seen.update(json.loads(request.content)["variables"])
            return httpx.Response(200, json=calendar_payload({}))

        client = _client(test_config, handler)
        try:
            await client.fetch_contribution_calendar("octocat")
        finally:
            await client.aclose()
        assert seen["from"] is None
        assert seen["to"] is None

    async def test_null_user_raises_not_found(self, test_config):
        client = _client(test_config, lambda r: httpx.Response(200, json=NOT_FOUND_GRAPHQL))
        try:
            with pytest.raises(UpstreamNotFound):
                await client.fetch_contribution_calendar("ghost-user")
        finally:
            await client.aclose()

    async def test_null_user_without_errors_raises_not_found(self, test_config):
        client = _client(test_config, lambda r: httpx.Response(200, json={"data": {"user": None}}))
        try:
            with pytest.raises(UpstreamNotFound):
                await client.fetch_contribution_calendar("ghost-user")
        finally:
            await client.aclose()

    async def test_other_graphql_errors_raise_unavailable(self, test_config):
        payload = {"data": None, "errors": [{"type": "RATE_LIMITED", "message": "slow down"}]}
        client = _client(test_config, lambda r: httpx.Response(200, json=payload))
        try:
            with pytest.raises(UpstreamUnavailable):
                await client.fetch_contribution_calendar("octocat")
        finally:
            await client.aclose()

    async def test_unauthorized_raises_unavailable(self, test_config):
        client = _client(test_config, lambda r: httpx.Response(401, json={"message": "Bad credentials"}))
        try:
            with pytest.raises(UpstreamUnavailable):
                await client.fetch_contribution_calendar("octocat")
        finally:
            await client.aclose()

    async def test_malformed_calendar_raises_unavailable(self, test_config):
        payload = {"data": {"user": {"contributionsCollection": {}}}}
        client = _client(test_config, lambda r: httpx.Response(200, json=payload))
        try:
            with pytest.raises(UpstreamUnavailable):
                await client.fetch_contribution_calendar("octocat")
        finally:
            await client.aclose()


@pytest.mark.asyncio
class TestCommitSearch:
    """Test per-day commit search and the fan-out."""

    async def test_search_day_without_commits(self, github):
        events = await github.search_commits_on("octocat", date(2024, 3, 11))
        # Fake search answers with the calendar count for that date, 0 here
        assert events == []

    async def test_search_items(self, test_config):
        client = _client(test_config, lambda r: httpx.Response(200, json=search_payload("2024-03-11", 2)))
        try:
            events = await client.search_commits_on("octocat", date(2024, 3, 11))
        finally:
            await client.aclose()
        assert [e.timestamp for e in events] == [
            datetime(2024, 3, 11, 10, 15, tzinfo=timezone.utc),
            datetime(2024, 3, 11, 10, 16, tzinfo=timezone.utc),
        ]

    async def test_failed_day_contributes_nothing(self, test_config):
        def handler(request):
            day_iso = request.url.params["q"].split("committer-date:")[1]
            if day_iso == "2024-03-12":
                return httpx.Response(422, json={"message": "Validation Failed"})
            return httpx.Response(200, json=search_payload(day_iso, 3))

        client = _client(test_config, handler)
        try:
            events = await client.fetch_commits_by_day(
                "octocat", [date(2024, 3, 11), date(2024, 3, 12), date(2024, 3, 13)]
            )
        finally:
            await client.aclose()
        assert len(events) == 6

    async def test_network_failure_on_one_day_is_skipped(self, test_config):
        def handler(request):
            day_iso = request.url.params["q"].split("committer-date:")[1]
            if day_iso == "2024-03-11":
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json=search_payload(day_iso, 1))

        client = _client(test_config, handler)
        try:
            events = await client.fetch_commits_by_day("octocat", [date(2024, 3, 11), date(2024, 3, 12)])
        finally:
            await client.aclose()
        assert len(events) == 1

    async def test_no_days_no_requests(self, test_config):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=search_payload("2024-03-11", 1))

        client = _client(test_config, handler)
        try:
            assert await client.fetch_commits_by_day("octocat", []) == []
        finally:
            await client.aclose()
        assert calls == []

    async def test_non_string_committer_date_is_skipped(self, test_config):
        def handler(request):
            day_iso = request.url.params["q"].split("committer-date:")[1]
            if day_iso == "2024-03-12":
                return httpx.Response(200, json={"items": [{"commit": {"committer": {"date": 7}}}]})
            return httpx.Response(200, json=search_payload(day_iso, 1))

        client = _client(test_config, handler)
        try:
            events = await client.fetch_commits_by_day("octocat", [date(2024, 3, 11), date(2024, 3, 12)])
        finally:
            await client.aclose()
        assert [e.timestamp for e in events] == [datetime(2024, 3, 11, 10, 15, tzinfo=timezone.utc)]

    async def test_non_list_items_give_no_events(self, test_config):
        client = _client(test_config, lambda r: httpx.Response(200, json={"items": 3}))
        try:
            assert await client.search_commits_on("octocat", date(2024, 3, 11)) == []
        finally:
            await client.aclose()

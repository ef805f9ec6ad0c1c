from __future__ import annotations

import datetime as dt

import pytest

from profile_badges import github
from profile_badges.github import GraphQLError, LifetimeTotals

from .conftest import FakeResponse, calendar_payload

UTC = dt.timezone.utc


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr(github.time, "sleep", recorded.append)
    return recorded


def queue_posts(monkeypatch, responses):
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return responses.pop(0)

    monkeypatch.setattr(github.requests, "post", fake_post)
    return calls


def test_gql_returns_data_and_sends_bearer(monkeypatch, sleeps):
    calls = queue_posts(monkeypatch, [FakeResponse(200, {"data": {"user": {"login": "octo"}}})])

    data = github.gql("tok", "query { viewer { login } }", {"a": 1})

    assert data == {"user": {"login": "octo"}}
    assert calls[0]["url"] == github.GQL_ENDPOINT
    assert calls[0]["headers"]["Authorization"] == "bearer tok"
    assert calls[0]["json"] == {"query": "query { viewer { login } }", "variables": {"a": 1}}
    assert sleeps == []


def test_gql_retries_server_errors_with_linear_backoff(monkeypatch, sleeps):
    calls = queue_posts(monkeypatch, [
        FakeResponse(503, text="unavailable"),
        FakeResponse(502, text="bad gateway"),
        FakeResponse(200, {"data": {"ok": True}}),
    ])

    assert github.gql("tok", "q") == {"ok": True}
    assert len(calls) == 3
    assert sleeps == pytest.approx([0.4, 0.8])


def test_gql_gives_up_after_max_attempts(monkeypatch, sleeps):
    calls = queue_posts(monkeypatch, [FakeResponse(500, text="boom") for _ in range(github.MAX_ATTEMPTS)])

    with pytest.raises(GraphQLError, match="GraphQL 500"):
        github.gql("tok", "q")
    assert len(calls) == github.MAX_ATTEMPTS
    assert len(sleeps) == github.MAX_ATTEMPTS - 1


def test_gql_backoff_is_capped(monkeypatch, sleeps):
    monkeypatch.setattr(github, "MAX_ATTEMPTS", 8)
    queue_posts(monkeypatch, [FakeResponse(500, text="boom") for _ in range(7)] + [FakeResponse(200, {"data": {}})])

    github.gql("tok", "q")
    assert max(sleeps) == github.BACKOFF_CAP
    assert sleeps[-1] == github.BACKOFF_CAP


def test_gql_client_error_is_not_retried(monkeypatch, sleeps):
    calls = queue_posts(monkeypatch, [FakeResponse(401, text="Bad credentials")])

    with pytest.raises(GraphQLError, match="Bad credentials"):
        github.gql("tok", "q")
    assert len(calls) == 1
    assert sleeps == []


def test_gql_raises_on_error_payload(monkeypatch, sleeps):
    queue_posts(monkeypatch, [FakeResponse(200, {"errors": [{"message": "Could not resolve to a User"}]})])

    with pytest.raises(GraphQLError, match="Could not resolve"):
        github.gql("tok", "q")


def test_lifetime_windows_cover_creation_to_now():
    created = dt.datetime(2020, 3, 15, 10, 30, tzinfo=UTC)
    now = dt.datetime(2021, 4, 1, 12, 0, tzinfo=UTC)

    windows = list(github.lifetime_windows(created, now))

    assert windows == [
        (dt.datetime(2020, 3, 15, tzinfo=UTC), dt.datetime(2021, 3, 14, 23, 59, 59, tzinfo=UTC)),
        (dt.datetime(2021, 3, 15, tzinfo=UTC), now),
    ]


def test_lifetime_windows_empty_when_created_in_future():
    now = dt.datetime(2021, 1, 1, tzinfo=UTC)
    assert list(github.lifetime_windows(now + dt.timedelta(days=2), now)) == []


def test_fetch_calendar_window_flattens_days(monkeypatch):
    seen = {}

    def fake_gql(token, query, variables):
        seen.update(variables)
        return calendar_payload([("2024-01-01", 2), ("2024-01-02", 0)])

    monkeypatch.setattr(github, "gql", fake_gql)
    days = github.fetch_calendar_window(
        "tok", "octo",
        dt.datetime(2024, 1, 1, tzinfo=UTC),
        dt.datetime(2024, 1, 2, 6, 0, tzinfo=UTC),
    )

    assert days == [{"date": "2024-01-01", "count": 2}, {"date": "2024-01-02", "count": 0}]
    assert seen == {"login": "octo", "from": "2024-01-01T00:00:00Z", "to": "2024-01-02T06:00:00Z"}


def test_fetch_lifetime_days_walks_every_window(monkeypatch):
    windows = []

    def fake_gql(token, query, variables):
        if "createdAt" in query:
            return {"user": {"createdAt": "2022-06-01T08:00:00Z"}}
        windows.append((variables["from"], variables["to"]))
        return calendar_payload([(variables["from"][:10], 1)])

    monkeypatch.setattr(github, "gql", fake_gql)
    now = dt.datetime(2024, 1, 1, tzinfo=UTC)

    days = github.fetch_lifetime_days("tok", "octo", now)

    assert windows == [
        ("2022-06-01T00:00:00Z", "2023-05-31T23:59:59Z"),
        ("2023-06-01T00:00:00Z", "2024-01-01T00:00:00Z"),
    ]
    assert days == [{"date": "2022-06-01", "count": 1}, {"date": "2023-06-01", "count": 1}]


def test_fetch_repository_stars_paginates(monkeypatch):
    pages = {
        None: {"nodes": [{"stargazerCount": 3}, {"stargazerCount": 4}], "hasNextPage": True, "endCursor": "c1"},
        "c1": {"nodes": [{"stargazerCount": 10}, {"stargazerCount": None}], "hasNextPage": False, "endCursor": None},
    }
    cursors = []

    def fake_gql(token, query, variables):
        cursors.append(variables["after"])
        page = pages[variables["after"]]
        return {"user": {"repositories": {
            "totalCount": 4,
            "nodes": page["nodes"],
            "pageInfo": {"hasNextPage": page["hasNextPage"], "endCursor": page["endCursor"]},
        }}}

    monkeypatch.setattr(github, "gql", fake_gql)

    assert github.fetch_repository_stars("tok", "octo") == (17, 4)
    assert cursors == [None, "c1"]


def test_fetch_lifetime_totals_sums_windows(monkeypatch):
    def fake_gql(token, query, variables):
        if "followers" in query:
            return {"user": {"createdAt": "2022-01-01T00:00:00Z", "followers": {"totalCount": 42}}}
        if "totalCommitContributions" in query:
            return {"user": {"contributionsCollection": {
                "totalCommitContributions": 100,
                "totalIssueContributions": 2,
                "totalPullRequestContributions": 5,
                "totalPullRequestReviewContributions": 7,
                "totalRepositoryContributions": 1,
                "contributionCalendar": {"totalContributions": 115},
            }}}
        raise AssertionError(query)

    monkeypatch.setattr(github, "gql", fake_gql)
    monkeypatch.setattr(github, "fetch_repository_stars", lambda token, user: (99, 12))
    now = dt.datetime(2023, 6, 1, tzinfo=UTC)

    totals = github.fetch_lifetime_totals("tok", "octo", now)

    # 2022-01-01..2022-12-31T23:59:59 and 2023-01-01..now
    assert totals == LifetimeTotals(
        commits=200,
        issues=4,
        pull_requests=10,
        reviews=14,
        repository_contributions=2,
        total_contributions=230,
        followers=42,
        stars=99,
        repositories=12,
    )


def test_lifetime_windows_do_not_share_a_boundary_day():
    created = dt.datetime(2019, 7, 4, tzinfo=UTC)
    now = dt.datetime(2023, 2, 1, tzinfo=UTC)

    windows = list(github.lifetime_windows(created, now))

    assert len(windows) == 4
    for (_, prev_to), (next_from, _) in zip(windows, windows[1:]):
        assert prev_to < next_from
        assert prev_to.date() < next_from.date()
        assert next_from - prev_to == dt.timedelta(seconds=1)
    assert windows[-1][1] == now

# -*- coding: utf-8 -*-
"""
GitHub GraphQL access for the badge generators.

- 5xx responses are retried with a capped linear backoff
- a contributionsCollection spans at most one year, so lifetime data is
  fetched in consecutive 365-day windows starting at account creation
"""
from __future__ import annotations

import datetime as _dt
import logging
import time
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

GQL_ENDPOINT = "https://api.github.com/graphql"
USER_AGENT = "profile-badges"
MAX_ATTEMPTS = 5
BACKOFF_STEP = 0.4
BACKOFF_CAP = 2.0
WINDOW_DAYS = 365


class GraphQLError(RuntimeError):
    pass


@dataclass
class LifetimeTotals:
    commits: int = 0
    issues: int = 0
    pull_requests: int = 0
    reviews: int = 0
    repository_contributions: int = 0
    total_contributions: int = 0
    followers: int = 0
    stars: int = 0
    repositories: int = 0


def gql(token: str, query: str, variables: Optional[dict] = None) -> dict:
    headers = {
        "Authorization": f"bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    attempt = 1
    while True:
        r = requests.post(GQL_ENDPOINT, json={"query": query, "variables": variables or {}}, headers=headers, timeout=30)
        if r.status_code >= 500 and attempt < MAX_ATTEMPTS:
            delay = min(BACKOFF_CAP, attempt * BACKOFF_STEP)
            logger.warning("GraphQL %s, retrying in %.1fs (attempt %d/%d)", r.status_code, delay, attempt, MAX_ATTEMPTS)
            time.sleep(delay)
            attempt += 1
            continue
        break
    if not r.ok:
        raise GraphQLError(f"GraphQL {r.status_code}: {r.text}")
    data = r.json()
    if "errors" in data:
        raise GraphQLError(f"GraphQL errors: {data['errors']}")
    return data["data"]


def _iso(t: _dt.datetime) -> str:
    return t.astimezone(_dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(s: str) -> _dt.datetime:
    return _dt.datetime.fromisoformat(s.replace("Z", "+00:00")).astimezone(_dt.timezone.utc)


def fetch_created_at(token: str, user: str) -> _dt.datetime:
    query = r"""
    query($login:String!) { user(login:$login) { createdAt } }
    """
    d = gql(token, query, {"login": user})
    return parse_timestamp(d["user"]["createdAt"])


def lifetime_windows(created_at: _dt.datetime, now: _dt.datetime) -> Iterator[Tuple[_dt.datetime, _dt.datetime]]:
    """(from, to) pairs covering creation day midnight UTC up to `now`."""
    created = created_at.astimezone(_dt.timezone.utc)
    cursor = _dt.datetime(created.year, created.month, created.day, tzinfo=_dt.timezone.utc)
    while cursor < now:
        to = cursor + _dt.timedelta(days=WINDOW_DAYS)
        # stop one second short so the boundary day is only fetched once
        yield cursor, min(to - _dt.timedelta(seconds=1), now)
        cursor = to


def fetch_calendar_window(token: str, user: str, date_from: _dt.datetime, date_to: _dt.datetime) -> List[Dict[str, object]]:
    """
    Returns: [{"date": "YYYY-MM-DD", "count": n}, ...] in calendar order
    """
    query = r"""
    query($login:String!, $from:DateTime!, $to:DateTime!) {
      user(login:$login) {
        contributionsCollection(from:$from, to:$to) {
          contributionCalendar {
            weeks { contributionDays { date contributionCount } }
          }
        }
      }
    }
    """
    d = gql(token, query, {"login": user, "from": _iso(date_from), "to": _iso(date_to)})
    cal = d["user"]["contributionsCollection"]["contributionCalendar"]
    days = []
    for w in cal["weeks"]:
        for day in w["contributionDays"]:
            days.append({"date": day["date"], "count": int(day["contributionCount"])})
    return days


def fetch_lifetime_days(token: str, user: str, now: _dt.datetime) -> List[Dict[str, object]]:
    created_at = fetch_created_at(token, user)
    days: List[Dict[str, object]] = []
    for date_from, date_to in lifetime_windows(created_at, now):
        window = fetch_calendar_window(token, user, date_from, date_to)
        logger.info("calendar %s..%s: %d days", date_from.date(), date_to.date(), len(window))
        days.extend(window)
    return days


def fetch_repository_stars(token: str, user: str) -> Tuple[int, int]:
    """Stargazers summed over owned, non-fork repositories, and their count."""
    total = 0
    repo_count = 0
    after: Optional[str] = None
    query = r"""
    query($login:String!, $after:String) {
      user(login:$login) {
        repositories(first: 100, after: $after, ownerAffiliations: OWNER, isFork:false) {
          totalCount
          pageInfo { hasNextPage endCursor }
          nodes { stargazerCount }
        }
      }
    }
    """
    while True:
        d = gql(token, query, {"login": user, "after": after})
        repos = d["user"]["repositories"]
        repo_count = int(repos["totalCount"])
        for node in repos["nodes"]:
            total += int(node.get("stargazerCount") or 0)
        pi = repos["pageInfo"]
        if not pi["hasNextPage"]:
            break
        after = pi["endCursor"]
        logger.debug("repositories: next page after %s", after)
    return total, repo_count


def fetch_lifetime_totals(token: str, user: str, now: _dt.datetime) -> LifetimeTotals:
    window_query = r"""
    query($login:String!, $from:DateTime!, $to:DateTime!) {
      user(login:$login) {
        contributionsCollection(from:$from, to:$to) {
          totalCommitContributions
          totalIssueContributions
          totalPullRequestContributions
          totalPullRequestReviewContributions
          totalRepositoryContributions
          contributionCalendar { totalContributions }
        }
      }
    }
    """
    followers_query = r"""
    query($login:String!) {
      user(login:$login) {
        createdAt
        followers { totalCount }
      }
    }
    """
    d = gql(token, followers_query, {"login": user})
    totals = LifetimeTotals(followers=int(d["user"]["followers"]["totalCount"]))
    created_at = parse_timestamp(d["user"]["createdAt"])

    for date_from, date_to in lifetime_windows(created_at, now):
        w = gql(token, window_query, {"login": user, "from": _iso(date_from), "to": _iso(date_to)})
        cc = w["user"]["contributionsCollection"]
        totals.commits += int(cc["totalCommitContributions"])
        totals.issues += int(cc["totalIssueContributions"])
        totals.pull_requests += int(cc["totalPullRequestContributions"])
        totals.reviews += int(cc["totalPullRequestReviewContributions"])
        totals.repository_contributions += int(cc["totalRepositoryContributions"])
        totals.total_contributions += int(cc["contributionCalendar"]["totalContributions"])

    totals.stars, totals.repositories = fetch_repository_stars(token, user)
    return totals

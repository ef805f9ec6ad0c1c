from __future__ import annotations

import json
from typing import Any, Optional

import pytest

ENV_VARS = (
    "PAT_GITHUB",
    "GH_TOKEN",
    "GITHUB_TOKEN",
    "GH_USER",
    "USER_LOGIN",
    "GITHUB_REPOSITORY",
    "BUILD_TAG",
)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Optional[Any] = None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        return self._payload

    def raise_for_status(self) -> None:
        if not self.ok:
            import requests

            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def calendar_payload(days):
    """GraphQL data for a contribution calendar made of one week per day."""
    return {
        "user": {
            "contributionsCollection": {
                "contributionCalendar": {
                    "weeks": [{"contributionDays": [{"date": d, "contributionCount": c}]} for d, c in days]
                }
            }
        }
    }

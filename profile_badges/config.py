# -*- coding: utf-8 -*-
"""Settings resolved from CLI flags and the environment."""
from __future__ import annotations

import datetime as _dt
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

TOKEN_VARS = ("PAT_GITHUB", "GH_TOKEN", "GITHUB_TOKEN")
USER_VARS = ("GH_USER", "USER_LOGIN")


class ConfigError(ValueError):
    pass


def _first(env: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


@dataclass
class Settings:
    user: Optional[str] = None
    token: Optional[str] = None
    build_tag: str = ""
    now: _dt.datetime = field(default_factory=lambda: _dt.datetime.now(_dt.timezone.utc))

    @classmethod
    def from_env(cls, user: Optional[str] = None, build_tag: Optional[str] = None,
                 env: Optional[Mapping[str, str]] = None, now: Optional[_dt.datetime] = None) -> "Settings":
        env = os.environ if env is None else env
        now = now or _dt.datetime.now(_dt.timezone.utc)
        if not user:
            user = _first(env, USER_VARS)
        if not user:
            repo = env.get("GITHUB_REPOSITORY", "")
            if "/" in repo:
                user = repo.split("/")[0]
        return cls(
            user=user,
            token=_first(env, TOKEN_VARS),
            build_tag=build_tag or env.get("BUILD_TAG") or now.strftime("%Y-%m-%dT%H:%M:%SZ"),
            now=now,
        )

    def validate(self, need_token: bool = True) -> None:
        if not self.user:
            raise ConfigError("no user: pass --user or set GH_USER / USER_LOGIN")
        if need_token and not self.token:
            raise ConfigError("missing token: set PAT_GITHUB, GH_TOKEN or GITHUB_TOKEN")

# -*- coding: utf-8 -*-
"""
Generate the profile badges.

Usage:
  profile-badges streak --user <login> [--out assets/streak.svg]
  profile-badges trophies --user <login>
  profile-badges flow --user <login> [--title ...] [--build-tag ...]
  profile-badges views --user <login>
  profile-badges all --user <login>

Env:
  PAT_GITHUB, GH_TOKEN or GITHUB_TOKEN (not needed for `views`)
  GH_USER or USER_LOGIN when --user is omitted
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import requests

from . import flow, streak, trophies, views
from .config import ConfigError, Settings
from .github import GraphQLError
from .svg import write_svg
from .timeline import InvalidSampleError
from .views import ViewCountError

logger = logging.getLogger(__name__)

DEFAULT_OUT = {
    "streak": "assets/streak.svg",
    "trophies": "assets/trophies.svg",
    "flow": "docs/svg/crimson-flow.svg",
    "views": "assets/pv-count.svg",
}


def run_streak(cfg: Settings, out: str, top: int = streak.TOP_STREAKS, max_frames: int = streak.MAX_FRAMES) -> str:
    stats = streak.collect(cfg.token, cfg.user, cfg.now, top, max_frames)
    return write_svg(out, streak.build_svg(stats))


def run_trophies(cfg: Settings, out: str) -> str:
    items = trophies.collect(cfg.token, cfg.user, cfg.now)
    return write_svg(out, trophies.build_svg(items))


def run_flow(cfg: Settings, out: str, title: Optional[str] = None) -> str:
    stats = flow.collect(cfg.token, cfg.user, cfg.now)
    title = title or f"{cfg.user}’s Crimson Flow"
    return write_svg(out, flow.build_svg(stats, cfg.user, title, cfg.build_tag))


def run_views(cfg: Settings, out: str) -> str:
    count = views.fetch_count(cfg.user, int(cfg.now.timestamp() * 1000))
    return write_svg(out, views.build_svg(count))


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="profile-badges", description="Render animated GitHub profile badges.")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="badge", required=True)

    def add(name: str, help_text: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--user")
        if name in DEFAULT_OUT:
            p.add_argument("--out", default=DEFAULT_OUT[name])
        return p

    p = add("streak", "lifetime total, current streak and longest streaks")
    p.add_argument("--top", type=int, default=streak.TOP_STREAKS)
    p.add_argument("--max-frames", type=int, default=streak.MAX_FRAMES)
    add("trophies", "lifetime totals as graded trophy cards")
    p = add("flow", "30-day activity curve with 365-day stats")
    p.add_argument("--title")
    p.add_argument("--build-tag")
    add("views", "profile view counter pill")
    p = add("all", "every badge at its default path")
    p.add_argument("--build-tag")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    cfg = Settings.from_env(user=args.user, build_tag=getattr(args, "build_tag", None))
    try:
        cfg.validate(need_token=args.badge != "views")
    except ConfigError as e:
        logger.error("%s", e)
        return 2

    try:
        if args.badge == "streak":
            run_streak(cfg, args.out, args.top, args.max_frames)
        elif args.badge == "trophies":
            run_trophies(cfg, args.out)
        elif args.badge == "flow":
            run_flow(cfg, args.out, args.title)
        elif args.badge == "views":
            run_views(cfg, args.out)
        else:
            run_streak(cfg, DEFAULT_OUT["streak"])
            run_trophies(cfg, DEFAULT_OUT["trophies"])
            run_flow(cfg, DEFAULT_OUT["flow"])
            run_views(cfg, DEFAULT_OUT["views"])
    except (GraphQLError, ViewCountError, InvalidSampleError, requests.RequestException, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0

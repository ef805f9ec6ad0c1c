# -*- coding: utf-8 -*-
"""
Animated trophies: lifetime totals as graded cards, two per sliding page.

Stars are stargazers on owned repositories, and every total covers the whole
account lifetime up to now.
"""
from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import List

from . import github
from .svg import fmt_int

logger = logging.getLogger(__name__)

W, H = 760, 140
CW, CH, G = 300, 120, 40
PAGE_SECONDS = 3


@dataclass
class Trophy:
    title: str
    value: int
    desc: str

    @property
    def grade(self) -> str:
        return grade(self.value)


def grade(v: int) -> str:
    if v > 5000:
        return "S"
    if v > 1000:
        return "A"
    return "B"


def trophies_from_totals(t: github.LifetimeTotals) -> List[Trophy]:
    return [
        Trophy("Commits", t.commits, "Commit contributions across all repos."),
        Trophy("Followers", t.followers, "People following this account."),
        Trophy("Stars Earned", t.stars, "Stargazers on your owned repositories."),
        Trophy("Reviews", t.reviews, "Pull request reviews submitted."),
        Trophy("Issues", t.issues, "Issues created."),
        Trophy("Repositories", t.repositories, "Owned non-fork repositories."),
        Trophy("Pull Requests", t.pull_requests, "Pull requests opened."),
        Trophy("Total Activity", t.total_contributions, "All recorded contributions."),
    ]


def collect(token: str, user: str, now: _dt.datetime) -> List[Trophy]:
    totals = github.fetch_lifetime_totals(token, user, now)
    logger.info("trophies: %s", totals)
    return trophies_from_totals(totals)


def paginate(items: List[Trophy], size: int = 2) -> List[List[Trophy]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


def _card(t: Trophy, x: int, begin: str) -> str:
    return f"""
  <g transform="translate({x},10)" opacity="0.0">
    <rect x="0" y="0" rx="14" ry="14" width="{CW}" height="{CH}" fill="#0b1220" stroke="#1f2937"/>
    <text x="20" y="34" class="cardTitle">{t.title}</text>
    <text x="20" y="70" class="cardValue">{fmt_int(t.value)} <tspan class="grade">[{t.grade}]</tspan></text>
    <text x="20" y="96" class="cardDesc">{t.desc}</text>
    <animate attributeName="opacity" values="0;1;1;0" keyTimes="0;0.1;0.9;1" dur="{PAGE_SECONDS}s" begin="{begin}" repeatCount="1" fill="freeze"/>
    <animate attributeName="filter" values="url(#p0);url(#p1);url(#p0)" dur="1.6s" repeatCount="indefinite"/>
  </g>
"""


def build_svg(trophies: List[Trophy]) -> str:
    pages = paginate(trophies)
    x0 = (W - (2 * CW + G)) // 2

    slides = []
    for i, pg in enumerate(pages):
        begin = f"{i * PAGE_SECONDS:.2f}s"
        cards = _card(pg[0], x0, begin) + (_card(pg[1], x0 + CW + G, begin) if len(pg) > 1 else "")
        slides.append(f"""
  <g transform="translate({W},0)">
    {cards}
    <animateTransform attributeName="transform" type="translate"
      values="{W};0;{-W}" keyTimes="0;0.12;1" dur="{PAGE_SECONDS}s" begin="{begin}" fill="freeze"/>
  </g>""")

    total_dur = f"{len(pages) * PAGE_SECONDS:.2f}"
    body = "".join(slides)

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg width="{W}" height="{H}" viewBox="0 0 {W} {H}" xmlns="http://www.w3.org/2000/svg">
  <style>
    :root{{ color-scheme: dark; }}
    .cardTitle{{ font:700 16px system-ui; fill:#e5e7eb }}
    .cardValue{{ font:800 22px system-ui; fill:#60a5fa }}
    .grade{{ font:700 16px system-ui; fill:#e11d48 }}
    .cardDesc{{ font:12px system-ui; fill:#9ca3af }}
  </style>
  <defs>
    <filter id="p0"><feGaussianBlur stdDeviation="0"/></filter>
    <filter id="p1"><feGaussianBlur stdDeviation="2"/></filter>
  </defs>
{body}

  <!-- loop -->
  <set attributeName="visibility" to="visible" begin="{total_dur}s" dur="0.01s"/>
</svg>
"""

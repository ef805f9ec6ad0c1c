# -*- coding: utf-8 -*-
"""
"Crimson flow" graph: last 30 days as a smooth animated curve, plus the
365-day total and current/longest streaks.
"""
from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import List, Tuple
from xml.sax.saxutils import escape

from . import github
from .svg import FONT_STACK, fmt_int
from .timeline import DailySample, normalize, streak_summary

logger = logging.getLogger(__name__)

W, H = 1200, 420
PLOT_X, PLOT_Y, PLOT_W, PLOT_H = 40, 60, 1120, 260
TENSION = 0.2

RED = "#9b0e2a"
RED_LINE = "#c3193d"
RED_SOFT = "#7a0f26"
MUTED = "#94a3b8"


@dataclass
class FlowStats:
    days_30: List[DailySample]
    total_365: int
    current: int
    longest: int


def _clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def _utc_midnight(t: _dt.datetime) -> _dt.datetime:
    t = t.astimezone(_dt.timezone.utc)
    return _dt.datetime(t.year, t.month, t.day, tzinfo=_dt.timezone.utc)


def analyze(raw_30, raw_365, now) -> FlowStats:
    days_30 = normalize(raw_30)[-30:]
    days_365 = normalize(raw_365)[-365:]
    current, longest = streak_summary(days_365, now)
    return FlowStats(
        days_30=days_30,
        total_365=sum(d.count for d in days_365),
        current=current,
        longest=longest,
    )


def collect(token: str, user: str, now: _dt.datetime) -> FlowStats:
    raw_30 = github.fetch_calendar_window(token, user, _utc_midnight(now - _dt.timedelta(days=30)), now)
    raw_365 = github.fetch_calendar_window(token, user, _utc_midnight(now - _dt.timedelta(days=365)), now)
    stats = analyze(raw_30, raw_365, now)
    logger.info("flow: total365=%d current=%d longest=%d", stats.total_365, stats.current, stats.longest)
    return stats


def bezier_path(points: List[Tuple[float, float]]) -> str:
    if len(points) < 2:
        return ""
    parts = [f"M{points[0][0]:.1f},{points[0][1]:.1f}"]
    for i in range(len(points) - 1):
        p0 = points[i - 1] if i > 0 else points[i]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[i + 2] if i + 2 < len(points) else p2
        c1x = p1[0] + (p2[0] - p0[0]) * TENSION
        c1y = p1[1] + (p2[1] - p0[1]) * TENSION
        c2x = p2[0] - (p3[0] - p1[0]) * TENSION
        c2y = p2[1] - (p3[1] - p1[1]) * TENSION
        parts.append(f"C{c1x:.1f},{c1y:.1f} {c2x:.1f},{c2y:.1f} {p2[0]:.1f},{p2[1]:.1f}")
    return " ".join(parts)


def plot_points(days: List[DailySample]) -> List[Tuple[float, float]]:
    max_count = max([5] + [d.count for d in days])
    cap = max(15, min(40, max_count + 5))
    span = max(1, len(days) - 1)
    pts = []
    for i, d in enumerate(days):
        x = PLOT_X + PLOT_W * i / span
        y = PLOT_Y + PLOT_H - PLOT_H * _clamp(d.count, 0, cap) / cap
        pts.append((x, y))
    return pts


def _pill(x: int, width: int, label: str, value: str) -> str:
    return (
        f'<g transform="translate({x},360)">'
        f'<rect x="-12" y="-26" rx="10" ry="10" width="{width}" height="36" fill="#0a0d12" stroke="{RED}" opacity=".92"/>'
        f'<text x="12" y="-6" fill="{MUTED}">{label}</text>'
        f'<text x="12" y="12" fill="{RED}" font-weight="700">{value}</text></g>'
    )


def build_svg(s: FlowStats, user: str, title: str, build_tag: str) -> str:
    pts = plot_points(s.days_30)
    d_path = bezier_path(pts)
    bottom = PLOT_Y + PLOT_H
    area = f"{d_path} L {PLOT_X + PLOT_W},{bottom} L {PLOT_X},{bottom} Z" if d_path else ""
    pills = "\n    ".join([
        _pill(120, 220, "Total Contributions (365d)", fmt_int(s.total_365)),
        _pill(490, 170, "Current Streak", str(s.current)),
        _pill(800, 170, "Longest Streak", str(s.longest)),
    ])

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<!-- build: {escape(build_tag)} user:{escape(user)} points:{len(pts)} total365:{s.total_365} -->
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink"
     width="{W}" height="{H}" viewBox="0 0 {W} {H}" role="img" aria-label="Crimson Flow Graph">
  <defs>
    <linearGradient id="bgGrad" x1="0" y1="0" x2="0" y2="1">
      <stop offset="0%" stop-color="#0a0d12"/><stop offset="100%" stop-color="#070a0d"/>
    </linearGradient>
    <pattern id="grid" width="40" height="40" patternUnits="userSpaceOnUse">
      <path d="M40 0H0V40" fill="none" stroke="#121821" stroke-width="1"/>
    </pattern>
    <filter id="glow"><feGaussianBlur stdDeviation="3" result="b1"/><feMerge><feMergeNode in="b1"/><feMergeNode in="SourceGraphic"/></feMerge></filter>
    <linearGradient id="sheen" x1="0" y1="0" x2="1" y2="0">
      <stop offset="0%" stop-color="{RED}" stop-opacity="0"/>
      <stop offset="50%" stop-color="{RED}" stop-opacity=".14"/>
      <stop offset="100%" stop-color="{RED}" stop-opacity="0"/>
      <animateTransform attributeName="gradientTransform" type="translate" from="-1 0" to="1 0" dur="9s" repeatCount="indefinite"/>
    </linearGradient>
    <pattern id="scan" width="2" height="6" patternUnits="userSpaceOnUse"><rect width="2" height="1" fill="{RED}" opacity=".05"/></pattern>
  </defs>

  <rect width="{W}" height="{H}" fill="url(#bgGrad)"/>
  <rect x="{PLOT_X}" y="{PLOT_Y}" width="{PLOT_W}" height="{PLOT_H}" fill="url(#grid)"/>
  <rect x="{PLOT_X}" y="{PLOT_Y}" width="{PLOT_W}" height="{PLOT_H}" fill="url(#sheen)"/>
  <rect x="{PLOT_X}" y="{PLOT_Y}" width="{PLOT_W}" height="{PLOT_H}" fill="url(#scan)"/>

  <text x="{W // 2}" y="40" text-anchor="middle" font-family="{FONT_STACK}"
        font-size="22" fill="{RED}" opacity=".95">{escape(title)}</text>

  <path d="{area}" fill="{RED_SOFT}" opacity=".13">
    <animate attributeName="opacity" values=".10;.17;.10" dur="6s" repeatCount="indefinite"/>
  </path>

  <path id="curve" d="{d_path}" fill="none" stroke="{RED_LINE}" stroke-width="5"
        stroke-linecap="round" stroke-linejoin="round" stroke-dasharray="6 14" filter="url(#glow)">
    <animate attributeName="stroke-dashoffset" values="0;-220" dur="4.8s" repeatCount="indefinite"/>
  </path>

  <g fill="#ffd1db">
    <circle r="4"><animateMotion dur="7s" rotate="auto" repeatCount="indefinite"><mpath xlink:href="#curve"/></animateMotion><animate attributeName="opacity" values="1;.3;1" dur="2.2s" repeatCount="indefinite"/></circle>
    <circle r="3" fill="#ffffff"><animateMotion dur="8.2s" begin="1s" rotate="auto" repeatCount="indefinite"><mpath xlink:href="#curve"/></animateMotion><animate attributeName="opacity" values=".7;.2;.7" dur="2.4s" repeatCount="indefinite"/></circle>
    <circle r="3" fill="#ffc7d3"><animateMotion dur="6s" begin="2s" rotate="auto" repeatCount="indefinite"><mpath xlink:href="#curve"/></animateMotion><animate attributeName="opacity" values=".8;.3;.8" dur="2s" repeatCount="indefinite"/></circle>
  </g>

  <text x="{PLOT_X - 12}" y="{bottom + 15}" font-size="12" fill="{RED}" opacity=".7">days ▶</text>
  <text x="{PLOT_X - 16}" y="{PLOT_Y + PLOT_H // 2}" transform="rotate(-90 {PLOT_X - 16},{PLOT_Y + PLOT_H // 2})" font-size="12" fill="{RED}" opacity=".7">contributions ▶</text>

  <g font-family="{FONT_STACK}" font-size="15">
    {pills}
  </g>
</svg>
"""

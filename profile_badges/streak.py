# -*- coding: utf-8 -*-
"""
Animated streak badge (SMIL, renders on GitHub).

- lifetime contributions count-up carousel (left)
- flickering ring of fire around the current streak (center)
- longest streaks carousel (right)
"""
from __future__ import annotations

import datetime as _dt
import logging
import math
from dataclasses import dataclass
from typing import List

from . import github
from .svg import carousel_keyframes, fmt_int, seconds
from .timeline import (
    StreakRun,
    TimelinePoint,
    cumulative_timeline,
    current_streak,
    longest_streaks,
    normalize,
    sample_points,
)

logger = logging.getLogger(__name__)

MAX_FRAMES = 80
TOP_STREAKS = 3

W, H = 760, 170
L_X, C_X, R_X = 150, 380, 610
TITLE_Y, NUM_Y, SUB_Y = 34, 98, 120

FLAME_COUNT = 28
RING_R = 44
FLARE_R1, FLARE_R2 = 56, 62


@dataclass
class StreakStats:
    timeline: List[TimelinePoint]
    current: int
    top: List[StreakRun]


def analyze(raw_days, now, top_n: int = TOP_STREAKS, max_frames: int = MAX_FRAMES) -> StreakStats:
    days = normalize(raw_days)
    return StreakStats(
        timeline=sample_points(cumulative_timeline(days), max_frames),
        current=current_streak(days, now),
        top=longest_streaks(days, top_n),
    )


def collect(token: str, user: str, now: _dt.datetime, top_n: int = TOP_STREAKS, max_frames: int = MAX_FRAMES) -> StreakStats:
    raw = github.fetch_lifetime_days(token, user, now)
    stats = analyze(raw, now, top_n, max_frames)
    logger.info("streak: current=%d, longest=%s", stats.current, [s.length for s in stats.top])
    return stats


def _left(points: List[TimelinePoint]) -> str:
    frames = len(points)
    if not frames:
        return ""
    dur = seconds(frames * 0.08)
    out = []
    for i, p in enumerate(points):
        key_times, values = carousel_keyframes(i, frames)
        out.append(f"""
  <g>
    <text x="{L_X}" y="{NUM_Y}" class="leftLabel" text-anchor="middle">{fmt_int(p.total)}</text>
    <text x="{L_X}" y="{SUB_Y}" class="leftSub" text-anchor="middle">{p.date.isoformat()}</text>
    <animate attributeName="opacity"
      values="{values}"
      keyTimes="{key_times}"
      dur="{dur}s" repeatCount="indefinite"/>
  </g>""")
    return "".join(out)


def _right(top: List[StreakRun]) -> str:
    frames = max(1, len(top))
    dur = seconds(frames * 2.4)
    out = []
    for i, s in enumerate(top):
        key_times, values = carousel_keyframes(i, frames)
        out.append(f"""
  <g>
    <text x="{R_X}" y="{NUM_Y}" class="rightLabel" text-anchor="middle">{s.length} days</text>
    <text x="{R_X}" y="{SUB_Y}" class="rightSub" text-anchor="middle">{s.start.isoformat()} → {s.end.isoformat()}</text>
    <animate attributeName="opacity"
      values="{values}"
      keyTimes="{key_times}"
      dur="{dur}s" repeatCount="indefinite"/>
  </g>""")
    return "".join(out)


def _flame_crown() -> str:
    uses = []
    rr = RING_R + 10
    for i in range(FLAME_COUNT):
        a = i / FLAME_COUNT * 360
        phase = seconds((i % 5) * 0.12)
        scale = 0.85 + (i % 3) * 0.05
        # -90 so 0deg points up
        rad = math.radians(a - 90)
        x = rr * math.cos(rad)
        y = rr * math.sin(rad)
        uses.append(f"""
    <g transform="translate({x:.3f},{y:.3f}) rotate({a:g})">
      <use xlink:href="#flame" opacity="0.9">
        <animateTransform attributeName="transform" additive="sum" type="scale"
          values="{scale:.2f};{scale + 0.25:.2f};{scale:.2f}"
          keyTimes="0;0.5;1" dur="{0.9 + (i % 4) * 0.2:.2f}s" begin="{phase}s" repeatCount="indefinite"/>
        <animate attributeName="opacity" values="0.75;1;0.8" keyTimes="0;0.5;1"
          dur="{1.1 + (i % 3) * 0.2:.2f}s" begin="{phase}s" repeatCount="indefinite"/>
      </use>
    </g>""")
    return "".join(uses)


def _ring(current: int) -> str:
    return f"""
<g transform="translate({C_X},104)">
  <defs>
    <linearGradient id="flameGrad" x1="0" y1="1" x2="0" y2="0">
      <stop offset="0%" stop-color="#ff6200"/>
      <stop offset="55%" stop-color="#ffae00"/>
      <stop offset="100%" stop-color="#fff2a6"/>
    </linearGradient>
    <symbol id="flame" viewBox="-8 -26 16 26" overflow="visible">
      <path d="M0,0 C-6,-6 -8,-14 -4,-22 C-2,-26 2,-26 4,-22 C8,-14 6,-6 0,0 Z" fill="url(#flameGrad)"/>
      <path d="M1,-5 C-3,-9 -4,-14 -2,-18 C-1,-20 1,-20 2,-18 C4,-14 3,-9 1,-5 Z" fill="#ffd15a" opacity=".6"/>
    </symbol>
    <filter id="flameJitter" x="-80%" y="-80%" width="260%" height="260%">
      <feTurbulence type="fractalNoise" baseFrequency="0.8" numOctaves="2" seed="5" result="n">
        <animate attributeName="baseFrequency" values="0.7;1.1;0.7" dur="1.4s" repeatCount="indefinite"/>
        <animate attributeName="seed" values="5;7;9;5" dur="3s" repeatCount="indefinite"/>
      </feTurbulence>
      <feDisplacementMap in="SourceGraphic" in2="n" scale="6">
        <animate attributeName="scale" values="3;10;4;8;3" dur="1.3s" repeatCount="indefinite"/>
      </feDisplacementMap>
    </filter>
    <linearGradient id="emberGrad" x1="0%" x2="100%">
      <stop offset="0%" stop-color="#ffd15a"/>
      <stop offset="45%" stop-color="#ff3b3b"/>
      <stop offset="100%" stop-color="#ffd15a"/>
    </linearGradient>
    <radialGradient id="coreGrad" r="78%">
      <stop offset="0%" stop-color="#ffffff" stop-opacity=".55"/>
      <stop offset="60%" stop-color="#e11d48" stop-opacity=".40"/>
      <stop offset="100%" stop-color="#000000" stop-opacity="0"/>
    </radialGradient>
    <filter id="ringGlow" x="-70%" y="-70%" width="240%" height="240%">
      <feGaussianBlur stdDeviation="5" result="b1"/>
      <feGaussianBlur stdDeviation="12" in="SourceGraphic" result="b2"/>
      <feMerge><feMergeNode in="b1"/><feMergeNode in="b2"/><feMergeNode in="SourceGraphic"/></feMerge>
    </filter>
  </defs>

  <circle r="{RING_R}" fill="none" stroke="#1f2937" stroke-width="12"/>

  <g filter="url(#flameJitter)">
    <circle r="{FLARE_R1}" fill="none" stroke="#ff7a18" stroke-opacity=".55" stroke-width="9"/>
    <circle r="{FLARE_R2}" fill="none" stroke="#ffa62b" stroke-opacity=".35" stroke-width="12"/>
  </g>

  <g filter="url(#ringGlow)">{_flame_crown()}
  </g>

  <g filter="url(#ringGlow)">
    <circle r="{RING_R}" fill="none" stroke="url(#emberGrad)" stroke-width="10" stroke-linecap="round" stroke-dasharray="70 240">
      <animateTransform attributeName="transform" type="rotate" from="0" to="-360" dur="3s" repeatCount="indefinite"/>
      <animate attributeName="stroke-dasharray" values="60 250;95 215;130 180;95 215;60 250" dur="1.8s" repeatCount="indefinite"/>
    </circle>
  </g>

  <circle r="{RING_R + 8}" fill="url(#coreGrad)">
    <animate attributeName="opacity" values="0.22;0.40;0.22" dur="1.2s" repeatCount="indefinite"/>
  </circle>

  <text class="centerNum" text-anchor="middle" dy="10">{current}</text>
</g>"""


def build_svg(s: StreakStats) -> str:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg width="{W}" height="{H}" viewBox="0 0 {W} {H}" xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
  <style>
    :root{{ color-scheme: dark; }}
    .title{{ font:700 18px system-ui; fill:url(#hdrGrad); filter:url(#hdrGlow) }}
    .leftLabel,.rightLabel{{ font:800 22px system-ui; fill:#60a5fa }}
    .leftSub,.rightSub{{ font:12px system-ui; fill:#9ca3af }}
    .centerNum{{ font:900 28px system-ui; fill:#e11d48 }}
  </style>
  <defs>
    <linearGradient id="hdrGrad" x1="0" x2="1">
      <stop offset="0%" stop-color="#d1d5db" stop-opacity=".85"/>
      <stop offset="100%" stop-color="#9ca3af" stop-opacity=".75"/>
    </linearGradient>
    <filter id="hdrGlow" x="-50%" y="-50%" width="200%" height="200%">
      <feGaussianBlur stdDeviation="1.2" result="b"/>
      <feMerge><feMergeNode in="b"/><feMergeNode in="SourceGraphic"/></feMerge>
    </filter>
  </defs>

  <text x="{L_X}" y="{TITLE_Y}" class="title" text-anchor="middle">Total Contributions</text>
  {_left(s.timeline)}

  <text x="{C_X}" y="{TITLE_Y}" class="title" text-anchor="middle">Current Streak</text>
  {_ring(s.current)}

  <text x="{R_X}" y="{TITLE_Y}" class="title" text-anchor="middle">Longest Streaks</text>
  {_right(s.top)}
</svg>
"""

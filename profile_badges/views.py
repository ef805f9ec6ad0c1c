# -*- coding: utf-8 -*-
"""Solid dark-red "profile views" pill built from the komarev counter."""
from __future__ import annotations

import logging
import re
import time
from typing import Optional

import requests

from .svg import FONT_STACK

logger = logging.getLogger(__name__)

COUNTER_URL = "https://komarev.com/ghpvc/"
RED = "#8B0000"
HEIGHT = 28
PAD_X = 12
CHAR_W = 12
MIN_WIDTH = 42

_NUMBER = re.compile(r">(\d+)<")


class ViewCountError(RuntimeError):
    pass


def parse_count(svg: str) -> str:
    """The last number rendered as text in the counter SVG."""
    nums = _NUMBER.findall(svg)
    if not nums:
        raise ViewCountError("could not parse view count from counter SVG")
    return nums[-1]


def fetch_count(user: str, now_ms: Optional[int] = None) -> str:
    params = {
        "username": user,
        "style": "for-the-badge",
        # cache-buster
        "t": now_ms if now_ms is not None else int(time.time() * 1000),
    }
    r = requests.get(COUNTER_URL, params=params, timeout=30)
    r.raise_for_status()
    count = parse_count(r.text)
    logger.info("views: %s", count)
    return count


def build_svg(count: str) -> str:
    w = max(MIN_WIDTH, PAD_X * 2 + len(count) * CHAR_W)
    h = HEIGHT
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}" role="img" aria-label="Profile views: {count}">
  <rect x="0" y="0" width="{w}" height="{h}" rx="14" ry="14" fill="{RED}"/>
  <text x="{w / 2:g}" y="{h // 2 + 5}" text-anchor="middle"
        font-family="{FONT_STACK}"
        font-size="14" font-weight="700" fill="#fff">{count}</text>
</svg>
"""

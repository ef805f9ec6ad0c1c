# -*- coding: utf-8 -*-
"""Small helpers shared by the badge renderers."""
from __future__ import annotations

import logging
import os
from typing import List, Tuple

logger = logging.getLogger(__name__)

FONT_STACK = "ui-sans-serif,system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,Arial"


def fmt_int(x: int) -> str:
    return f"{int(x):,}"


def carousel_keyframes(index: int, frames: int) -> Tuple[str, str]:
    """
    keyTimes/values for one carousel slot: visible for its own keyframe and
    the next one, transparent otherwise.
    """
    key_times: List[str] = []
    values: List[str] = []
    for k in range(frames + 1):
        key_times.append(f"{k / frames:.6f}")
        values.append("1" if k in (index, index + 1) else "0")
    return ";".join(key_times), ";".join(values)


def seconds(x: float) -> str:
    # 1.60 -> "1.6", 3.00 -> "3"
    return f"{round(x, 2):g}"


def write_svg(path: str, svg: str) -> str:
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(svg)
    logger.info("wrote %s (%d bytes)", path, os.path.getsize(path))
    return path

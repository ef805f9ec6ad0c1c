# -*- coding: utf-8 -*-
"""
Contribution timeline analysis.

Turns the raw (date, count) days returned by the contribution calendar into:
- a cumulative running-total series
- the current streak ending at a reference "now"
- the longest historical streaks

Missing dates count as zero-activity days: they are never synthesized, but a
calendar gap between two samples breaks a streak.
"""
from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence, Tuple, TypeVar, Union

T = TypeVar("T")


class InvalidSampleError(ValueError):
    """A record with an unparseable date or a negative/non-numeric count."""


@dataclass(frozen=True)
class DailySample:
    date: _dt.date
    count: int


@dataclass(frozen=True)
class TimelinePoint:
    date: _dt.date
    total: int


@dataclass(frozen=True)
class StreakRun:
    start: _dt.date
    end: _dt.date
    length: int


def _parse_date(value: Any) -> _dt.date:
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    if isinstance(value, str):
        try:
            return _dt.date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise InvalidSampleError(f"invalid sample date: {value!r}")


def _parse_count(value: Any, day: _dt.date) -> int:
    # bool is an int subclass; a flag is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSampleError(f"non-numeric count for {day.isoformat()}: {value!r}")
    if value < 0:
        raise InvalidSampleError(f"negative count for {day.isoformat()}: {value}")
    return value


def _unpack(record: Any) -> Tuple[Any, Any]:
    if isinstance(record, DailySample):
        return record.date, record.count
    if isinstance(record, dict):
        try:
            return record["date"], record["count"]
        except KeyError as e:
            raise InvalidSampleError(f"sample is missing {e.args[0]!r}: {record!r}") from None
    if isinstance(record, (tuple, list)) and len(record) == 2:
        return record[0], record[1]
    raise InvalidSampleError(f"unrecognised sample record: {record!r}")


def normalize(samples: Iterable[Any]) -> List[DailySample]:
    """Merge duplicate days (summing counts) and sort ascending by date."""
    by_date: dict = {}
    for record in samples:
        raw_date, raw_count = _unpack(record)
        day = _parse_date(raw_date)
        by_date[day] = by_date.get(day, 0) + _parse_count(raw_count, day)
    return [DailySample(d, c) for d, c in sorted(by_date.items())]


def cumulative_timeline(days: Sequence[DailySample]) -> List[TimelinePoint]:
    run = 0
    timeline = []
    for d in days:
        run += d.count
        timeline.append(TimelinePoint(d.date, run))
    return timeline


def _as_date(now: Union[_dt.date, _dt.datetime]) -> _dt.date:
    if isinstance(now, _dt.datetime):
        if now.tzinfo is not None:
            now = now.astimezone(_dt.timezone.utc)
        return now.date()
    return now


def current_streak(days: Sequence[DailySample], now: Union[_dt.date, _dt.datetime]) -> int:
    """
    Consecutive active days counted back from the latest sample not after `now`.

    Samples dated after `now` (calendar days ahead of the reference instant in
    UTC) are skipped rather than treated as breaks.
    """
    today = _as_date(now)
    streak = 0
    prev = None
    for d in reversed(days):
        if d.date > today:
            continue
        if d.count <= 0:
            break
        if prev is not None and (prev - d.date).days != 1:
            break
        streak += 1
        prev = d.date
    return streak


def _runs(days: Sequence[DailySample]) -> List[StreakRun]:
    runs = []
    start = None
    length = 0
    prev = None
    for d in days:
        gap = prev is not None and (d.date - prev.date).days != 1
        if length and (d.count <= 0 or gap):
            runs.append(StreakRun(start, prev.date, length))
            length = 0
            start = None
        if d.count > 0:
            if length == 0:
                start = d.date
            length += 1
        prev = d
    if length:
        runs.append(StreakRun(start, prev.date, length))
    return runs


def longest_streaks(days: Sequence[DailySample], top_n: int = 3) -> List[StreakRun]:
    """Top `top_n` runs, longest first; equal lengths keep chronological order."""
    if top_n <= 0:
        return []
    return sorted(_runs(days), key=lambda r: r.length, reverse=True)[:top_n]


def streak_summary(days: Sequence[DailySample], now: Union[_dt.date, _dt.datetime]) -> Tuple[int, int]:
    best = longest_streaks(days, 1)
    return current_streak(days, now), (best[0].length if best else 0)


def sample_points(points: Sequence[T], max_frames: int) -> List[T]:
    """Evenly downsample to at most `max_frames` items, keeping both ends."""
    n = len(points)
    if n <= max_frames:
        return list(points)
    if max_frames <= 1:
        return list(points[-1:]) if max_frames == 1 else []
    step = (n - 1) / (max_frames - 1)
    return [points[int(math.floor(i * step + 0.5))] for i in range(max_frames)]

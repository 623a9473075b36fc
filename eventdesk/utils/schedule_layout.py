"""
Calendar layout math for the schedule view.

Sessions are drawn on a fixed day grid starting at 06:00 UTC with one row per
hour. A session block's vertical offset and height are derived from its start
and end times; blocks are grouped into one column per track.

All functions are pure and work on any objects exposing ``start_time``,
``end_time`` and ``track_id`` attributes.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Iterable, List, Optional, Sequence

GRID_START_HOUR = 6
HOUR_HEIGHT_PX = 60
MIN_BLOCK_HEIGHT_PX = 30
SLOT_COUNT = 17  # 06:00 .. 22:00

NO_TRACK = "no-track"
ALL_TRACKS = "all"


@dataclass(frozen=True)
class BlockPosition:
    top: float
    height: float


@dataclass(frozen=True)
class TimeSlot:
    hour: int
    label: str


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def fractional_hour(value: datetime) -> float:
    """Return the UTC hour of ``value`` including minutes as a fraction."""
    v = _utc(value)
    return v.hour + v.minute / 60


def session_date(value: datetime) -> str:
    """Return the ISO date (UTC) a session starting at ``value`` is listed under."""
    return _utc(value).date().isoformat()


def block_position(start: datetime, end: datetime) -> BlockPosition:
    """Map a session's time span to a pixel offset and height on the grid."""
    start_hour = fractional_hour(start)
    end_hour = fractional_hour(end)
    top = (start_hour - GRID_START_HOUR) * HOUR_HEIGHT_PX
    height = max((end_hour - start_hour) * HOUR_HEIGHT_PX, MIN_BLOCK_HEIGHT_PX)
    return BlockPosition(top=top, height=height)


def time_slots() -> List[TimeSlot]:
    slots = []
    for i in range(SLOT_COUNT):
        hour = GRID_START_HOUR + i
        display = hour - 12 if hour > 12 else hour
        suffix = "PM" if hour >= 12 else "AM"
        slots.append(TimeSlot(hour=hour, label=f"{display}:00 {suffix}"))
    return slots


def available_dates(sessions: Iterable) -> List[str]:
    return sorted({session_date(s.start_time) for s in sessions})


def filter_sessions(sessions: Iterable, date: Optional[str], track_id: Optional[str] = ALL_TRACKS) -> list:
    """Keep sessions starting on ``date`` (UTC) and belonging to ``track_id``.

    ``track_id`` of ``None`` or ``"all"`` keeps every track.
    """
    selected = []
    for s in sessions:
        if date is not None and session_date(s.start_time) != date:
            continue
        if track_id not in (None, ALL_TRACKS) and str(s.track_id) != str(track_id):
            continue
        selected.append(s)
    return selected


def group_by_track(sessions: Sequence) -> "OrderedDict[str, list]":
    """Group sessions into columns keyed by track id, ``no-track`` as fallback.

    Column order follows the first appearance of each track in start-time
    order; sessions keep start-time order within a column.
    """
    grouped: "OrderedDict[str, list]" = OrderedDict()
    for s in sorted(sessions, key=lambda item: _utc(item.start_time)):
        key = str(s.track_id) if s.track_id else NO_TRACK
        grouped.setdefault(key, []).append(s)
    return grouped

"""
Time utilities for StopWise.

All scheduling arithmetic is done in minutes since midnight. These helpers
convert between that representation and the ``HH:MM`` clock strings used
in the user interface and in the schedule output.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Optional

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def is_clock_time(value: Optional[str]) -> bool:
    """Return ``True`` if ``value`` is a valid ``HH:MM`` string (00:00–23:59)."""
    if not value:
        return False
    match = _CLOCK_RE.match(value)
    if not match:
        return False
    hours, minutes = int(match.group(1)), int(match.group(2))
    return 0 <= hours < 24 and 0 <= minutes < 60


def clock_time_to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight.

    Raises:
        ValueError: if ``value`` is not a valid clock time.
    """
    if not is_clock_time(value):
        raise ValueError(f"Invalid clock time: {value!r}")
    hours, minutes = map(int, value.strip().split(":"))
    return hours * 60 + minutes


def round_minutes(minutes: float) -> int:
    """Round fractional minutes to the nearest whole minute, halves up."""
    return int(math.floor(minutes + 0.5))


def minutes_to_clock_time(minutes: float) -> str:
    """Convert minutes since midnight to an ``HH:MM`` string.

    Fractional minutes are rounded to the nearest whole minute. Values past
    midnight wrap around to the next day.
    """
    total = round_minutes(minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def format_duration(minutes: float) -> str:
    """Format a duration in minutes as e.g. ``"45 min"`` or ``"2 h 05 min"``."""
    total = round_minutes(minutes)
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, mins = divmod(total, 60)
    if hours == 0:
        return f"{sign}{mins} min"
    return f"{sign}{hours} h {mins:02d} min"


def current_clock_time(now: Optional[datetime] = None) -> str:
    """Return the current local time as ``HH:MM`` (used as a default departure)."""
    now = now or datetime.now()
    return now.strftime("%H:%M")

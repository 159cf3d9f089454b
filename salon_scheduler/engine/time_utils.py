"""Local calendar helpers shared by the scheduling engine.

All dates are naive local calendar days and all times are "HH:MM" strings
relative to local midnight. Nothing here converts through UTC.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from salon_scheduler.services.exceptions import InvalidTimeFormatError

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")

MINUTES_PER_DAY = 24 * 60


def to_minutes(hhmm: str) -> int:
    """Convert "HH:MM" into minutes since midnight."""

    if not isinstance(hhmm, str):
        raise InvalidTimeFormatError(hhmm)
    match = _HHMM.match(hhmm.strip())
    if not match:
        raise InvalidTimeFormatError(hhmm)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormatError(hhmm)
    return hours * 60 + minutes


def from_minutes(minutes: int) -> str:
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ValueError(f"{minutes} is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(hhmm: str) -> str:
    """Return the zero-padded form of a valid time ("9:00" -> "09:00")."""

    return from_minutes(to_minutes(hhmm))


def week_day_of(day: date) -> int:
    """Return the weekday with Sunday = 0 ... Saturday = 6."""

    return (day.weekday() + 1) % 7


def local_date_key(moment: datetime | date) -> str:
    # Built from the calendar fields so an aware datetime keeps its own local day.
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def local_now() -> datetime:
    return datetime.now()


def local_today() -> date:
    return local_now().date()


def minute_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval overlap: touching intervals do not overlap."""

    return start_a < end_b and end_a > start_b

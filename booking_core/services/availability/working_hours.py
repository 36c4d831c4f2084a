# booking_core/services/availability/working_hours.py
"""Resolve an employee's nominal (pre-override) working hours for a calendar date"""
import logging
from datetime import date, time
from typing import Iterable, List, Tuple

from booking_core.services.availability.intervals import Interval, merge
from booking_core.services.calendar.calendar_math import TimezoneLike, local_to_instant

logger = logging.getLogger(__name__)

LocalInterval = Tuple[time, time]


def resolve_nominal_hours(working_hours: Iterable, day: date) -> List[LocalInterval]:
    """
    Local wall-clock intervals the employee nominally works on `day`.

    Rows are matched on weekday (0=Monday). An `is_off` row closes the whole
    day; a weekday without rows is closed as well. Overlapping rows are
    merged and the result is ordered by start time.
    """
    weekday = day.weekday()
    rows = [wh for wh in working_hours if wh.day_of_week == weekday]

    if not rows or any(wh.is_off for wh in rows):
        return []

    intervals: List[LocalInterval] = []
    for wh in rows:
        if wh.start_time is None or wh.end_time is None or wh.start_time >= wh.end_time:
            logger.warning(f"Skipping malformed working hours row {wh!r}")
            continue
        intervals.append((wh.start_time, wh.end_time))

    intervals.sort()
    merged: List[LocalInterval] = []
    for start, end in intervals:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def to_instant_intervals(day: date, local_intervals: Iterable[LocalInterval], tz: TimezoneLike) -> List[Interval]:
    """Convert wall-clock intervals on `day` into absolute intervals."""
    intervals = []
    for start, end in local_intervals:
        start_instant = local_to_instant(day, start, tz)
        end_instant = local_to_instant(day, end, tz)
        # a shift starting inside a DST gap can come out empty or inverted
        if end_instant > start_instant:
            intervals.append(Interval(start=start_instant, end=end_instant))
    return merge(intervals)

# booking_core/services/calendar/calendar_math.py
"""
Conversions between a business's wall-clock calendar and absolute instants.

All DST handling in the booking core lives here. Instants are timezone-aware
datetimes in UTC; local values are naive date/time pairs interpreted in an
IANA timezone.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple, Union

import pytz
from pytz.tzinfo import BaseTzInfo

from booking_core.core.exceptions import InvalidTimezone

TimezoneLike = Union[str, BaseTzInfo]


def validate_timezone(tz: TimezoneLike) -> BaseTzInfo:
    """Return the pytz timezone for an IANA identifier, raising InvalidTimezone if unknown."""
    if isinstance(tz, BaseTzInfo) or tz is pytz.UTC:
        return tz
    if not isinstance(tz, str) or not tz:
        raise InvalidTimezone(str(tz))
    try:
        return pytz.timezone(tz)
    except pytz.UnknownTimeZoneError:
        raise InvalidTimezone(tz)


def local_to_instant(day: date, wall_time: time, tz: TimezoneLike) -> datetime:
    """
    Interpret `wall_time` on `day` in `tz` and return the UTC instant.

    Wall times skipped by a spring-forward transition are moved forward by
    the size of the gap (02:30 becomes 03:30). Wall times repeated by a
    fall-back transition resolve to their first occurrence.
    """
    zone = validate_timezone(tz)
    naive = datetime.combine(day, wall_time.replace(tzinfo=None))
    try:
        local = zone.localize(naive, is_dst=None)
    except pytz.AmbiguousTimeError:
        local = zone.localize(naive, is_dst=True)
    except pytz.NonExistentTimeError:
        # standard-time offset lands past the gap
        local = zone.localize(naive, is_dst=False)
    return local.astimezone(timezone.utc)


def local_date_to_instant_range(day: date, tz: TimezoneLike) -> Tuple[datetime, datetime]:
    """
    UTC instants for local 00:00 on `day` up to local 00:00 of the next day.

    The range is 23 or 25 hours long on DST transition days.
    """
    start = local_to_instant(day, time.min, tz)
    end = local_to_instant(day + timedelta(days=1), time.min, tz)
    return start, end


def instant_to_local_time(instant: datetime, tz: TimezoneLike) -> Tuple[date, time]:
    """Project an absolute instant onto the wall clock of `tz`."""
    zone = validate_timezone(tz)
    if instant.tzinfo is None:
        # Assume UTC if no timezone info
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(zone)
    return local.date(), local.time().replace(tzinfo=None)


def local_dates_covering(range_start: datetime, range_end: datetime, tz: TimezoneLike):
    """Every local calendar date in `tz` that overlaps [range_start, range_end)."""
    first, _ = instant_to_local_time(range_start, tz)
    last, _ = instant_to_local_time(range_end - timedelta(microseconds=1), tz)
    days = []
    current = first
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days

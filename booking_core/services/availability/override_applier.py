# booking_core/services/availability/override_applier.py
"""Apply one-off availability overrides on top of nominal working hours"""
from typing import Iterable, List

from booking_core.services.availability.intervals import Interval, merge, subtract, union


def apply_overrides(nominal_intervals: Iterable[Interval], overrides: Iterable) -> List[Interval]:
    """
    Adjust nominal intervals with overrides.

    Unavailability overrides are subtracted first and extra-availability
    overrides are unioned afterwards, so an extra slot granted on a blocked
    day is never re-closed by the block. Overrides of the same kind are
    merged before they are applied.
    """
    blocked = []
    extra = []
    for override in overrides:
        interval = Interval(start=override.start_time, end=override.end_time)
        if override.is_unavailable:
            blocked.append(interval)
        else:
            extra.append(interval)

    adjusted = subtract(nominal_intervals, merge(blocked))
    return union(adjusted, merge(extra))

# booking_core/services/availability/slot_generator.py
"""
Discretize open intervals into candidate booking slots.

A candidate occupies `buffer_before + duration + buffer_after` minutes of
an open interval. Blocks begin on the step grid of each interval; the slot
handed out is the service part of the block.
"""
from datetime import timedelta
from typing import Iterable, Iterator, List

from booking_core.core.exceptions import InvalidServiceConfiguration
from booking_core.services.availability.intervals import Interval


def validate_service_configuration(
        duration_minutes,
        buffer_before_minutes=0,
        buffer_after_minutes=0,
        step_minutes=None,
) -> None:
    """Raise InvalidServiceConfiguration for values no schedule can be built from."""
    details = {
        "duration_minutes": duration_minutes,
        "buffer_before_minutes": buffer_before_minutes,
        "buffer_after_minutes": buffer_after_minutes,
    }
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidServiceConfiguration("Service duration must be positive", details=details)
    if (buffer_before_minutes or 0) < 0 or (buffer_after_minutes or 0) < 0:
        raise InvalidServiceConfiguration("Service buffers cannot be negative", details=details)
    if step_minutes is not None and step_minutes <= 0:
        details["step_minutes"] = step_minutes
        raise InvalidServiceConfiguration("Slot step must be positive", details=details)


def buffered_window(slot: Interval, buffer_before_minutes: int, buffer_after_minutes: int) -> Interval:
    """The span of time a booking of `slot` keeps the employee busy."""
    return Interval(
        start=slot.start - timedelta(minutes=buffer_before_minutes),
        end=slot.end + timedelta(minutes=buffer_after_minutes),
    )


class SlotSequence:
    """
    Lazy, finite sequence of candidate slots.

    Iterating twice yields the same slots; no iterator state is shared
    between iterations.
    """

    def __init__(
            self,
            intervals: Iterable[Interval],
            duration_minutes: int,
            buffer_before_minutes: int = 0,
            buffer_after_minutes: int = 0,
            step_minutes: int = 30,
    ):
        validate_service_configuration(
            duration_minutes, buffer_before_minutes, buffer_after_minutes, step_minutes
        )
        self.intervals: List[Interval] = sorted(intervals, key=lambda i: i.start)
        self.duration = timedelta(minutes=duration_minutes)
        self.buffer_before = timedelta(minutes=buffer_before_minutes)
        self.buffer_after = timedelta(minutes=buffer_after_minutes)
        self.step = timedelta(minutes=step_minutes)

    def __iter__(self) -> Iterator[Interval]:
        footprint = self.buffer_before + self.duration + self.buffer_after
        for interval in self.intervals:
            block_start = interval.start
            while block_start + footprint <= interval.end:
                slot_start = block_start + self.buffer_before
                yield Interval(start=slot_start, end=slot_start + self.duration)
                block_start += self.step


def generate_slots(
        intervals: Iterable[Interval],
        duration_minutes: int,
        buffer_before_minutes: int = 0,
        buffer_after_minutes: int = 0,
        step_minutes: int = 30,
) -> SlotSequence:
    return SlotSequence(
        intervals,
        duration_minutes,
        buffer_before_minutes,
        buffer_after_minutes,
        step_minutes,
    )

# booking_core/services/availability/intervals.py
"""
Half-open interval algebra over absolute instants.

Every function returns a new sorted list of non-overlapping intervals and
never mutates its inputs.
"""
from datetime import datetime
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, model_validator


class Interval(BaseModel):
    """[start, end) between two UTC instants"""
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def end_after_start(self) -> "Interval":
        if self.end <= self.start:
            raise ValueError("Interval end must be after start")
        return self

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end


def merge(intervals: Iterable[Interval]) -> List[Interval]:
    """Union of the given intervals; overlapping and touching intervals are coalesced."""
    ordered = sorted(intervals, key=lambda i: (i.start, i.end))
    merged: List[Interval] = []

    for interval in ordered:
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            if interval.end > last.end:
                merged[-1] = Interval(start=last.start, end=interval.end)
        else:
            merged.append(interval)

    return merged


def subtract(base: Iterable[Interval], removed: Iterable[Interval]) -> List[Interval]:
    """
    Interval difference: base minus removed.

    Each base interval is split into 0, 1 or 2 pieces per removed interval.
    """
    result = merge(base)
    for cut in merge(removed):
        pieces: List[Interval] = []
        for interval in result:
            if not interval.overlaps(cut):
                pieces.append(interval)
                continue
            if interval.start < cut.start:
                pieces.append(Interval(start=interval.start, end=cut.start))
            if cut.end < interval.end:
                pieces.append(Interval(start=cut.end, end=interval.end))
        result = pieces
    return result


def union(base: Iterable[Interval], added: Iterable[Interval]) -> List[Interval]:
    return merge(list(base) + list(added))


# booking_core/schemas/availability.py
from __future__ import annotations
from pydantic import BaseModel, Field, field_serializer
from typing import List, Optional
from datetime import datetime, timezone


class TimeSlot(BaseModel):
    """Bookable time slot (advisory until committed)"""
    start_time: datetime = Field(..., description="Service start, UTC")
    end_time: datetime = Field(..., description="Service end, UTC")
    employee_id: Optional[str] = Field(None, description="Set when availability was requested for one employee")
    employee_ids: List[str] = Field(default_factory=list, description="Employees free for this slot")
    is_available: bool = Field(True, description="Whether slot is available")

    @field_serializer("start_time", "end_time")
    def serialize_instant(self, value: datetime) -> str:
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class TimeSlotListResponse(BaseModel):
    data: List[TimeSlot]


class SlotCheckResult(BaseModel):
    is_available: bool


class SlotCheckResponse(BaseModel):
    data: SlotCheckResult

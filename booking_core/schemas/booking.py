"""
Pydantic schemas for booking requests and responses
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union, Literal
from datetime import datetime
from uuid import UUID

from booking_core.models.booking import BookingStatus


# ============================================================================
# Request Schemas
# ============================================================================

class BookingCreate(BaseModel):
    """Request to book a slot returned by the availability endpoint"""
    service_id: UUID
    start_time: datetime = Field(..., description="Slot start (ISO 8601, offset required)")
    employee_id: Optional[Union[UUID, Literal["any"]]] = Field(
        None, description="Employee ID, or 'any' / omitted to let the system choose"
    )
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_id: Optional[UUID] = None
    customer_email: Optional[str] = Field(None, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    @field_validator("employee_id", mode="before")
    @classmethod
    def normalize_any_employee(cls, v):
        # "any" is matched case-insensitively, like the query parameter
        if isinstance(v, str):
            v = v.strip()
            if v == "":
                return None
            if v.lower() == "any":
                return "any"
        return v

    @field_validator("start_time")
    @classmethod
    def require_offset(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("start_time must include a UTC offset")
        return v

    @property
    def resolved_employee_id(self) -> Optional[UUID]:
        return None if self.employee_id == "any" else self.employee_id


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


# ============================================================================
# Response Schemas
# ============================================================================

class BookingResponse(BaseModel):
    id: str
    business_id: str
    employee_id: str
    service_id: str
    customer_id: Optional[str] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    start_time: str
    end_time: str
    status: str
    notes: Optional[str] = None
    business_timezone: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    cancelled_at: Optional[str] = None


class PageInfo(BaseModel):
    skip: int
    limit: int
    total_pages: int


class BookingListResponse(BaseModel):
    business_id: str
    total_bookings: int
    page: PageInfo
    bookings: List[BookingResponse]

# ============================================================================
# FILE: booking_core/api/v1/public/availability.py
# Public availability endpoints - thin HTTP layer
# Results are advisory; only POST /bookings reserves time
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from booking_core.config.database import get_db
from booking_core.api.dependencies import optional_employee_id
from booking_core.schemas.availability import (
    SlotCheckResponse,
    SlotCheckResult,
    TimeSlotListResponse,
)
from booking_core.services.availability.availability_service import AvailabilityService

router = APIRouter(prefix="/businesses/{business_id}/availability", tags=["public-availability"])


@router.get("/slots", response_model=TimeSlotListResponse)
def list_available_slots(
        business_id: UUID = Path(..., description="The business ID"),
        service_id: UUID = Query(..., description="Service to book"),
        day: date = Query(..., alias="date", description="Calendar date (YYYY-MM-DD)"),
        timezone: Optional[str] = Query(None, description="IANA timezone the date is read in (defaults to the business timezone)"),
        employee_id: Optional[UUID] = Depends(optional_employee_id),
        db: Session = Depends(get_db)
):
    """
    Get bookable slots for a service on one calendar date.
    Without an employee, each slot lists every employee able to take it.
    """
    slots = AvailabilityService.get_available_slots(
        db=db,
        business_id=business_id,
        service_id=service_id,
        day=day,
        employee_id=employee_id,
        timezone_name=timezone,
    )
    return TimeSlotListResponse(data=slots)


@router.get("/check", response_model=SlotCheckResponse)
def check_slot(
        business_id: UUID = Path(..., description="The business ID"),
        service_id: UUID = Query(..., description="Service to book"),
        start_time: datetime = Query(..., description="Slot start (ISO 8601)"),
        employee_id: Optional[UUID] = Depends(optional_employee_id),
        db: Session = Depends(get_db)
):
    """
    Lock-free pre-check before showing a confirmation screen.
    A positive answer does not reserve the slot.
    """
    is_available = AvailabilityService.is_slot_still_available(
        db=db,
        business_id=business_id,
        service_id=service_id,
        start_time=start_time,
        employee_id=employee_id,
    )
    return SlotCheckResponse(data=SlotCheckResult(is_available=is_available))

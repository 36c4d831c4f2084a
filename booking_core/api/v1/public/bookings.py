# ============================================================================
# FILE: booking_core/api/v1/public/bookings.py
# Public booking endpoints - thin HTTP layer
# IMPORTANT: Specific routes MUST come before parameterized routes
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from booking_core.config.database import get_db
from booking_core.api.dependencies import ensure_found, optional_employee_id
from booking_core.models.booking import BookingStatus
from booking_core.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from booking_core.services.booking.booking_query_service import BookingQueryService
from booking_core.services.booking.booking_service import BookingService

router = APIRouter(prefix="/businesses/{business_id}/bookings", tags=["public-bookings"])


@router.post("", response_model=BookingResponse, status_code=201)
def create_booking(
        payload: BookingCreate,
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    """
    Book a slot.

    Returns 409 when the slot was taken in the meantime and 503 with
    Retry-After when the commit could not finish in time.
    """
    booking = BookingService.commit_booking(
        db=db,
        business_id=business_id,
        service_id=payload.service_id,
        start_time=payload.start_time,
        customer_name=payload.customer_name,
        employee_id=payload.resolved_employee_id,
        customer_id=payload.customer_id,
        customer_email=payload.customer_email,
        customer_phone=payload.customer_phone,
        notes=payload.notes,
    )
    return booking.to_dict()


@router.get("", response_model=BookingListResponse)
def list_bookings(
        business_id: UUID = Path(..., description="The business ID"),
        start_date: Optional[date] = Query(None, description="Filter bookings on or after this date"),
        end_date: Optional[date] = Query(None, description="Filter bookings on or before this date"),
        status: Optional[BookingStatus] = Query(None, description="Filter by status"),
        employee_id: Optional[UUID] = Depends(optional_employee_id),
        skip: int = Query(0, ge=0, description="Number of records to skip"),
        limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
        db: Session = Depends(get_db)
):
    """Get a paginated list of bookings for a business."""
    return BookingQueryService.list_bookings(
        db=db,
        business_id=business_id,
        start_date=start_date,
        end_date=end_date,
        status=status.value if status else None,
        employee_id=employee_id,
        skip=skip,
        limit=limit
    )


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
        business_id: UUID = Path(..., description="The business ID"),
        booking_id: UUID = Path(..., description="The booking ID"),
        db: Session = Depends(get_db)
):
    booking = ensure_found(
        BookingQueryService.get_booking(db, business_id, booking_id),
        "Booking not found"
    )
    return booking.to_dict()


@router.patch("/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
        payload: BookingStatusUpdate,
        business_id: UUID = Path(..., description="The business ID"),
        booking_id: UUID = Path(..., description="The booking ID"),
        db: Session = Depends(get_db)
):
    """
    Confirm, reject, cancel, complete or mark a booking as no-show.
    Time held by a booking is released once it leaves pending/confirmed.
    """
    booking = BookingService.update_status(
        db=db,
        business_id=business_id,
        booking_id=booking_id,
        new_status=payload.status.value
    )
    return booking.to_dict()

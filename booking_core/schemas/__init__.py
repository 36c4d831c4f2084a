# booking_core/schemas/__init__.py
from .availability import (
    TimeSlot,
    TimeSlotListResponse,
    SlotCheckResult,
    SlotCheckResponse
)

from .booking import (
    BookingCreate,
    BookingStatusUpdate,
    BookingResponse,
    BookingListResponse,
    PageInfo
)

__all__ = [
    # Availability
    "TimeSlot",
    "TimeSlotListResponse",
    "SlotCheckResult",
    "SlotCheckResponse",

    # Bookings
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingResponse",
    "BookingListResponse",
    "PageInfo",
]

# booking_core/models/__init__.py
from .base import Base
from .business import Business
from .employee import Employee, employee_services
from .service import Service
from .availability import WorkingHour, AvailabilityOverride
from .booking import Booking, BookingStatus, ACTIVE_BOOKING_STATUSES

__all__ = [
    "Base",
    "Business",
    "Employee",
    "employee_services",
    "Service",
    "WorkingHour",
    "AvailabilityOverride",
    "Booking",
    "BookingStatus",
    "ACTIVE_BOOKING_STATUSES",
]

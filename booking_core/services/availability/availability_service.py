# ===== booking_core/services/availability/availability_service.py =====
from typing import Dict, List, Optional, Tuple
from datetime import date, datetime, timedelta, timezone
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from booking_core.config.settings import get_settings
from booking_core.core.exceptions import InvalidBookingRequest
from booking_core.models.business import Business
from booking_core.models.service import Service
from booking_core.schemas.availability import TimeSlot
from booking_core.services.availability.intervals import Interval
from booking_core.services.availability.override_applier import apply_overrides
from booking_core.services.availability.slot_generator import (
    buffered_window,
    generate_slots,
    validate_service_configuration,
)
from booking_core.services.availability.working_hours import resolve_nominal_hours, to_instant_intervals
from booking_core.services.booking.booking_query_service import BookingQueryService
from booking_core.services.calendar.calendar_math import (
    local_date_to_instant_range,
    local_dates_covering,
    validate_timezone,
)
from booking_core.services.directory.directory_service import DirectoryService
from booking_core.services.schedule.schedule_query_service import ScheduleQueryService

logger = logging.getLogger(__name__)


class AvailabilityService:
    """
    Computes bookable slots from working hours, overrides and bookings.

    Results are advisory snapshots. Only BookingService.commit_booking
    decides whether a slot can actually be taken.
    """

    @staticmethod
    def get_available_slots(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            day: date,
            employee_id: Optional[UUID] = None,
            timezone_name: Optional[str] = None,
            now: Optional[datetime] = None
    ) -> List[TimeSlot]:
        """
        Free slots on calendar `day` for one employee or for any qualified employee.

        `day` is read in `timezone_name` (business timezone by default).
        Without an employee, slots are grouped by (start, end) and list every
        employee free for that bucket.
        """
        business = DirectoryService.get_business(db, business_id)
        business_tz = validate_timezone(business.timezone)
        request_tz = validate_timezone(timezone_name) if timezone_name else business_tz

        service = DirectoryService.get_service(db, business_id, service_id)
        step = AvailabilityService.resolve_step_minutes(business)
        validate_service_configuration(
            service.duration, service.buffer_before_minutes, service.buffer_after_minutes, step
        )

        if employee_id is not None:
            DirectoryService.get_employee(db, business_id, employee_id)
            if not DirectoryService.is_qualified(db, business_id, service_id, employee_id):
                raise InvalidBookingRequest(
                    "Employee is not qualified for this service",
                    details={"employee_id": str(employee_id), "service_id": str(service_id)},
                )
            employee_ids = [employee_id]
        else:
            employee_ids = DirectoryService.get_qualified_employees(db, business_id, service_id)

        range_start, range_end = local_date_to_instant_range(day, request_tz)

        buckets: Dict[Tuple[datetime, datetime], List[str]] = {}
        for emp_id in employee_ids:
            for slot in AvailabilityService.free_slots_for_employee(
                    db, business, service, emp_id, range_start, range_end, now=now
            ):
                buckets.setdefault((slot.start, slot.end), []).append(str(emp_id))

        slots = [
            TimeSlot(
                start_time=start,
                end_time=end,
                employee_id=str(employee_id) if employee_id is not None else None,
                employee_ids=sorted(emp_ids),
                is_available=True,
            )
            for (start, end), emp_ids in sorted(buckets.items())
        ]

        logger.info(
            f"Computed {len(slots)} slots for business {business_id}, service {service_id}, "
            f"date {day.isoformat()} across {len(employee_ids)} employee(s)"
        )
        return slots

    @staticmethod
    def is_slot_still_available(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            start_time: datetime,
            employee_id: Optional[UUID] = None,
            now: Optional[datetime] = None
    ) -> bool:
        """
        Lightweight, lock-free pre-check for the UI.

        Never rely on this for correctness; commit_booking re-checks inside
        its own transaction.
        """
        business = DirectoryService.get_business(db, business_id)
        validate_timezone(business.timezone)
        service = DirectoryService.get_service(db, business_id, service_id)
        validate_service_configuration(
            service.duration,
            service.buffer_before_minutes,
            service.buffer_after_minutes,
            AvailabilityService.resolve_step_minutes(business),
        )

        qualified = DirectoryService.get_qualified_employees(db, business_id, service_id)
        if employee_id is not None:
            if employee_id not in qualified:
                return False
            candidates = [employee_id]
        else:
            candidates = qualified

        for emp_id in candidates:
            if AvailabilityService.find_free_slot(db, business, service, emp_id, start_time, now=now):
                return True
        return False

    @staticmethod
    def find_free_slot(
            db: Session,
            business: Business,
            service: Service,
            employee_id: UUID,
            start_time: datetime,
            now: Optional[datetime] = None
    ) -> Optional[Interval]:
        """The slot starting exactly at `start_time` if the employee can take it, else None."""
        start_time = _as_utc(start_time)
        slots = AvailabilityService.free_slots_for_employee(
            db, business, service, employee_id,
            start_time, start_time + timedelta(microseconds=1),
            now=now,
        )
        return next((slot for slot in slots if slot.start == start_time), None)

    @staticmethod
    def free_slots_for_employee(
            db: Session,
            business: Business,
            service: Service,
            employee_id: UUID,
            range_start: datetime,
            range_end: datetime,
            now: Optional[datetime] = None
    ) -> List[Interval]:
        """
        Slots of one employee starting in [range_start, range_end) that are free right now.

        Working hours are resolved for every business-local date touching the
        range plus one date on each side, so intervals crossing midnight
        produce the same step grid regardless of the range asked for.
        """
        settings = get_settings()
        business_tz = validate_timezone(business.timezone)
        buffer_before = service.buffer_before_minutes or 0
        buffer_after = service.buffer_after_minutes or 0

        days = local_dates_covering(range_start, range_end, business_tz)
        days = [days[0] - timedelta(days=1)] + days + [days[-1] + timedelta(days=1)]
        window_start, _ = local_date_to_instant_range(days[0], business_tz)
        _, window_end = local_date_to_instant_range(days[-1], business_tz)

        working_hours = ScheduleQueryService.get_working_hours(db, business.id, employee_id)
        nominal: List[Interval] = []
        for day in days:
            nominal.extend(to_instant_intervals(day, resolve_nominal_hours(working_hours, day), business_tz))

        overrides = ScheduleQueryService.get_overrides(db, employee_id, window_start, window_end)
        adjusted = apply_overrides(nominal, overrides)

        earliest = (now or datetime.now(timezone.utc)) + timedelta(minutes=settings.MIN_BOOKING_NOTICE_MINUTES)
        candidates = [
            slot for slot in generate_slots(
                adjusted,
                service.duration,
                buffer_before,
                buffer_after,
                AvailabilityService.resolve_step_minutes(business),
            )
            if range_start <= slot.start < range_end and slot.start >= earliest
        ]
        if not candidates:
            return []

        windows = [buffered_window(slot, buffer_before, buffer_after) for slot in candidates]
        bookings = BookingQueryService.get_active_bookings(
            db,
            employee_id,
            min(w.start for w in windows),
            max(w.end for w in windows),
        )
        busy = [Interval(start=b.blocked_start, end=b.blocked_end) for b in bookings]

        return [
            slot for slot, window in zip(candidates, windows)
            if not any(window.overlaps(b) for b in busy)
        ]

    @staticmethod
    def resolve_step_minutes(business: Business) -> int:
        step = business.slot_step_minutes
        if step is None:
            return get_settings().DEFAULT_SLOT_STEP_MINUTES
        return int(step)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        # Assume UTC if no timezone info
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

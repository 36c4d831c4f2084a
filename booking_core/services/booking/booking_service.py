# ============================================================================
# booking_core/services/booking/booking_service.py
# ============================================================================
"""
Authoritative booking commit.

A slot shown by AvailabilityService is only a proposal. commit_booking
locks the employee's booking set, re-runs the availability pipeline against
fresh data inside the same transaction and inserts the booking only if the
slot is still free:

    Proposed -> Validated -> Committed
    Proposed -> Rejected (SlotNoLongerAvailable)
"""
import logging
import time
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from booking_core.config.settings import get_settings
from booking_core.core.exceptions import (
    BookingTimedOut,
    InvalidBookingRequest,
    NotFoundError,
    SlotNoLongerAvailable,
)
from booking_core.models.booking import Booking, BookingStatus
from booking_core.services.availability.availability_service import AvailabilityService
from booking_core.services.availability.slot_generator import buffered_window, validate_service_configuration
from booking_core.services.booking.booking_query_service import BookingQueryService
from booking_core.services.calendar.calendar_math import validate_timezone
from booking_core.services.directory.directory_service import DirectoryService

logger = logging.getLogger(__name__)

EXCLUSION_CONSTRAINT_NAME = "bookings_no_overlap_per_employee"

# PostgreSQL lock_not_available / query_canceled
TIMEOUT_SQLSTATES = {"55P03", "57014"}

ALLOWED_STATUS_TRANSITIONS = {
    BookingStatus.PENDING.value: {
        BookingStatus.CONFIRMED.value,
        BookingStatus.REJECTED.value,
        BookingStatus.CANCELLED.value,
    },
    BookingStatus.CONFIRMED.value: {
        BookingStatus.COMPLETED.value,
        BookingStatus.CANCELLED.value,
        BookingStatus.NO_SHOW.value,
    },
}


class BookingService:
    """Handles booking commits and status transitions"""

    @staticmethod
    def commit_booking(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            start_time: datetime,
            customer_name: str,
            employee_id: Optional[UUID] = None,
            customer_id: Optional[UUID] = None,
            customer_email: Optional[str] = None,
            customer_phone: Optional[str] = None,
            notes: Optional[str] = None,
            now: Optional[datetime] = None
    ) -> Booking:
        """
        Book `start_time` for the given employee, or for any qualified employee.

        With no employee, qualified employees are tried in a stable order,
        each in its own transaction, and the first successful commit wins.

        Raises:
            SlotNoLongerAvailable: the slot is taken or no longer open
            BookingTimedOut: the transaction exceeded its time budget
            NotFoundError / InvalidBookingRequest: bad references
        """
        if start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=timezone.utc)
        start_time = start_time.astimezone(timezone.utc)

        # Fail fast on bad input before touching any locks
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
            DirectoryService.get_employee(db, business_id, employee_id)
            if employee_id not in qualified:
                raise InvalidBookingRequest(
                    "Employee is not qualified for this service",
                    details={"employee_id": str(employee_id), "service_id": str(service_id)},
                )
            candidates = [employee_id]
        else:
            candidates = qualified

        for emp_id in candidates:
            try:
                return BookingService._commit_for_employee(
                    db,
                    business_id=business_id,
                    service_id=service_id,
                    employee_id=emp_id,
                    start_time=start_time,
                    customer_name=customer_name,
                    customer_id=customer_id,
                    customer_email=customer_email,
                    customer_phone=customer_phone,
                    notes=notes,
                    now=now,
                )
            except SlotNoLongerAvailable:
                if employee_id is not None:
                    raise
                logger.info(f"Employee {emp_id} cannot take {start_time.isoformat()}, trying next")

        raise SlotNoLongerAvailable(
            "Selected slot is no longer available",
            details={"service_id": str(service_id), "start_time": start_time.isoformat()},
        )

    @staticmethod
    def _commit_for_employee(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            employee_id: UUID,
            start_time: datetime,
            customer_name: str,
            customer_id: Optional[UUID],
            customer_email: Optional[str],
            customer_phone: Optional[str],
            notes: Optional[str],
            now: Optional[datetime]
    ) -> Booking:
        settings = get_settings()
        details = {
            "employee_id": str(employee_id),
            "service_id": str(service_id),
            "start_time": start_time.isoformat(),
        }

        # Start from a fresh transaction so nothing read earlier is trusted
        if db.in_transaction():
            db.rollback()

        started = time.monotonic()
        try:
            BookingQueryService.lock_employee(db, employee_id)

            # Re-read everything under the lock
            business = DirectoryService.get_business(db, business_id)
            service = DirectoryService.get_service(db, business_id, service_id)

            slot = AvailabilityService.find_free_slot(db, business, service, employee_id, start_time, now=now)
            if slot is None:
                raise SlotNoLongerAvailable("Selected slot is no longer available", details=details)

            window = buffered_window(slot, service.buffer_before_minutes or 0, service.buffer_after_minutes or 0)
            conflicts = BookingQueryService.get_active_bookings(db, employee_id, window.start, window.end)
            if conflicts:
                details["conflicting_booking_ids"] = [str(b.id) for b in conflicts]
                raise SlotNoLongerAvailable("Selected slot is no longer available", details=details)

            status = BookingStatus.CONFIRMED.value if business.auto_confirm else settings.DEFAULT_BOOKING_STATUS
            booking = BookingQueryService.insert_booking(
                db,
                business_id=business_id,
                employee_id=employee_id,
                service_id=service_id,
                start_time=slot.start,
                end_time=slot.end,
                blocked_start=window.start,
                blocked_end=window.end,
                status=status,
                business_timezone=business.timezone,
                customer_name=customer_name,
                customer_id=customer_id,
                customer_email=customer_email,
                customer_phone=customer_phone,
                notes=notes,
            )
            # Load server defaults while the transaction is still open
            db.refresh(booking)

            elapsed = time.monotonic() - started
            if elapsed > settings.BOOKING_COMMIT_TIMEOUT_SECONDS:
                raise BookingTimedOut(
                    f"Booking commit exceeded {settings.BOOKING_COMMIT_TIMEOUT_SECONDS}s",
                    details={**details, "elapsed_seconds": round(elapsed, 3)},
                )

            db.commit()

        except SlotNoLongerAvailable:
            db.rollback()
            logger.warning(f"Booking rejected, slot taken: {details}")
            raise
        except BookingTimedOut:
            db.rollback()
            logger.warning(f"Booking timed out and was rolled back: {details}")
            raise
        except IntegrityError as e:
            db.rollback()
            if _is_exclusion_violation(e):
                logger.warning(f"Exclusion constraint rejected overlapping booking: {details}")
                raise SlotNoLongerAvailable("Selected slot is no longer available", details=details) from e
            logger.error(f"Integrity error committing booking: {e}", exc_info=True)
            raise
        except OperationalError as e:
            db.rollback()
            if _is_timeout(e):
                logger.warning(f"Booking lock wait timed out: {details}")
                raise BookingTimedOut("Booking could not be committed in time", details=details) from e
            logger.error(f"Storage error committing booking: {e}", exc_info=True)
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error committing booking: {e}", exc_info=True)
            raise

        logger.info(
            f"Booking {booking.id} committed for employee {employee_id} "
            f"{booking.start_time.isoformat()}-{booking.end_time.isoformat()} ({booking.status})"
        )
        return booking

    @staticmethod
    def update_status(
            db: Session,
            business_id: UUID,
            booking_id: UUID,
            new_status: str
    ) -> Booking:
        """
        Move a booking along its lifecycle.

        Cancelled, rejected, completed and no-show bookings stop occupying
        time at once; the next commit re-reads them from the database.
        """
        booking = BookingQueryService.get_booking(db, business_id, booking_id)
        if not booking:
            raise NotFoundError("Booking not found", details={"booking_id": str(booking_id)})

        allowed = ALLOWED_STATUS_TRANSITIONS.get(booking.status, set())
        if new_status not in allowed:
            raise InvalidBookingRequest(
                f"Cannot change booking status from {booking.status} to {new_status}",
                details={"booking_id": str(booking_id), "status": booking.status, "requested": new_status},
            )

        try:
            booking.status = new_status
            if new_status == BookingStatus.CANCELLED.value:
                booking.cancelled_at = datetime.now(timezone.utc)
            db.flush()
            db.refresh(booking)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating booking {booking_id} status: {e}", exc_info=True)
            raise

        logger.info(f"Booking {booking_id} status changed to {new_status}")
        return booking


def _is_exclusion_violation(error: IntegrityError) -> bool:
    orig = getattr(error, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) or ""
    return constraint_name == EXCLUSION_CONSTRAINT_NAME or EXCLUSION_CONSTRAINT_NAME in str(orig)


def _is_timeout(error: OperationalError) -> bool:
    orig = getattr(error, "orig", None)
    if getattr(orig, "pgcode", None) in TIMEOUT_SQLSTATES:
        return True
    return "database is locked" in str(orig).lower()

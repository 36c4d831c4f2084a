# ============================================================================
# booking_core/services/booking/booking_query_service.py
# Booking store: reads, the per-employee lock and the raw insert
# ============================================================================
from datetime import date, datetime, time, timezone
from typing import Optional, Dict, Any, List
from uuid import UUID, uuid4

from sqlalchemy import select, text
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import TextClause

from booking_core.config.settings import get_settings
from booking_core.models.booking import Booking, ACTIVE_BOOKING_STATUSES
from booking_core.models.employee import Employee


class BookingQueryService:
    """Service layer for booking storage. No business rules live here."""

    @staticmethod
    def get_active_bookings(
            db: Session,
            employee_id: UUID,
            range_start: datetime,
            range_end: datetime
    ) -> List[Booking]:
        """Active bookings of the employee whose buffered window intersects [range_start, range_end)."""
        return db.query(Booking).filter(
            Booking.employee_id == employee_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.blocked_start < range_end,
            Booking.blocked_end > range_start
        ).order_by(Booking.blocked_start).all()

    @staticmethod
    def lock_employee(db: Session, employee_id: UUID) -> None:
        """
        Serialize booking commits for one employee until the transaction ends.

        PostgreSQL takes a row lock on the employee with bounded waits.
        SQLite transactions already hold the database write lock (BEGIN
        IMMEDIATE), so the SELECT only pins the row.
        """
        for statement in BookingQueryService.lock_timeouts(db.get_bind().dialect.name):
            db.execute(statement)

        db.execute(select(Employee.id).where(Employee.id == employee_id).with_for_update()).first()

    @staticmethod
    def lock_timeouts(dialect_name: str) -> List[TextClause]:
        """Per-transaction wait limits for the employee lock; PostgreSQL only."""
        if dialect_name != "postgresql":
            return []
        settings = get_settings()
        lock_timeout_ms = int(settings.BOOKING_LOCK_TIMEOUT_MS)
        statement_timeout_ms = int(settings.BOOKING_COMMIT_TIMEOUT_SECONDS * 1000)
        return [
            text(f"SET LOCAL lock_timeout = '{lock_timeout_ms}ms'"),
            text(f"SET LOCAL statement_timeout = '{statement_timeout_ms}ms'"),
        ]

    @staticmethod
    def insert_booking(
            db: Session,
            business_id: UUID,
            employee_id: UUID,
            service_id: UUID,
            start_time: datetime,
            end_time: datetime,
            blocked_start: datetime,
            blocked_end: datetime,
            status: str,
            business_timezone: str,
            customer_name: str,
            customer_id: Optional[UUID] = None,
            customer_email: Optional[str] = None,
            customer_phone: Optional[str] = None,
            notes: Optional[str] = None
    ) -> Booking:
        """Add and flush a booking row. The caller owns the transaction."""
        booking = Booking(
            id=uuid4(),
            business_id=business_id,
            employee_id=employee_id,
            service_id=service_id,
            customer_id=customer_id,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
            start_time=start_time,
            end_time=end_time,
            blocked_start=blocked_start,
            blocked_end=blocked_end,
            status=status,
            notes=notes,
            business_timezone=business_timezone,
        )
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def get_booking(db: Session, business_id: UUID, booking_id: UUID) -> Optional[Booking]:
        return db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.business_id == business_id
        ).first()

    @staticmethod
    def list_bookings(
            db: Session,
            business_id: UUID,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            status: Optional[str] = None,
            employee_id: Optional[UUID] = None,
            skip: int = 0,
            limit: int = 50
    ) -> Dict[str, Any]:
        """Get paginated list of bookings with filters. Dates are UTC calendar dates."""
        query = db.query(Booking).filter(Booking.business_id == business_id)

        if start_date:
            query = query.filter(
                Booking.start_time >= datetime.combine(start_date, time.min, tzinfo=timezone.utc)
            )
        if end_date:
            query = query.filter(
                Booking.start_time <= datetime.combine(end_date, time.max, tzinfo=timezone.utc)
            )
        if status:
            query = query.filter(Booking.status == status)
        if employee_id:
            query = query.filter(Booking.employee_id == employee_id)

        query = query.order_by(Booking.start_time.asc())
        total = query.count()
        bookings = query.offset(skip).limit(limit).all()

        return {
            "business_id": str(business_id),
            "total_bookings": total,
            "page": {
                "skip": skip,
                "limit": limit,
                "total_pages": (total + limit - 1) // limit if total > 0 else 0
            },
            "bookings": [booking.to_dict() for booking in bookings]
        }

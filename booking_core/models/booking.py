# booking_core/models/booking.py
"""
Booking Model - an employee's time committed to a customer for a service
"""
import enum
import uuid

from sqlalchemy import Column, String, Text, ForeignKey, CheckConstraint, Index, text
from sqlalchemy import Uuid
from sqlalchemy.dialects.postgresql import ExcludeConstraint
from sqlalchemy.sql import func

from booking_core.models.base import Base
from booking_core.models.types import UTCDateTime


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REJECTED = "rejected"
    NO_SHOW = "no_show"


# Only these statuses occupy an employee's time
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id", ondelete="RESTRICT"), nullable=False, index=True)
    customer_id = Column(Uuid(as_uuid=True), nullable=True, index=True)

    # Customer info
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)

    # Service interval
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)

    # Service interval widened by the service buffers at commit time
    blocked_start = Column(UTCDateTime, nullable=False)
    blocked_end = Column(UTCDateTime, nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    notes = Column(Text, nullable=True)
    business_timezone = Column(String(50), nullable=False)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(UTCDateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_booking_time_order"),
        CheckConstraint(
            "blocked_start <= start_time AND blocked_end >= end_time",
            name="check_booking_blocked_window",
        ),
        Index("ix_bookings_employee_blocked", "employee_id", "blocked_start", "blocked_end"),
        ExcludeConstraint(
            (employee_id, "="),
            (func.tstzrange(blocked_start, blocked_end), "&&"),
            name="bookings_no_overlap_per_employee",
            using="gist",
            where=text("status IN ('pending', 'confirmed')"),
        ).ddl_if(dialect="postgresql"),
    )

    def __repr__(self):
        return (
            f"<Booking(id={self.id}, employee_id={self.employee_id}, "
            f"{self.start_time}-{self.end_time}, status={self.status})>"
        )

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "employee_id": str(self.employee_id),
            "service_id": str(self.service_id),
            "customer_id": str(self.customer_id) if self.customer_id else None,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "status": self.status,
            "notes": self.notes,
            "business_timezone": self.business_timezone,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
        }

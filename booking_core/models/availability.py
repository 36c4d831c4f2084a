# booking_core/models/availability.py
from sqlalchemy import Column, String, Integer, Boolean, Time, ForeignKey, CheckConstraint, Index
from sqlalchemy import Uuid
from sqlalchemy.sql import func
import uuid

from booking_core.models.base import Base
from booking_core.models.types import UTCDateTime


class WorkingHour(Base):
    """Recurring weekly working hours (employee_id NULL = business default week)"""
    __tablename__ = "working_hours"
    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="check_day_of_week_range"),
        CheckConstraint("is_off OR start_time < end_time", name="check_working_hours_order"),
        Index("ix_working_hours_employee_day", "employee_id", "day_of_week"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), nullable=True)

    day_of_week = Column(Integer, nullable=False)  # 0=Monday, 6=Sunday
    start_time = Column(Time, nullable=True)  # local wall clock, business timezone
    end_time = Column(Time, nullable=True)
    is_off = Column(Boolean, nullable=False, default=False)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return (
            f"<WorkingHour(employee_id={self.employee_id}, day={self.day_of_week}, "
            f"{self.start_time}-{self.end_time}, is_off={self.is_off})>"
        )


class AvailabilityOverride(Base):
    """One-off exceptions to the weekly hours (vacations, blocks, extra shifts)"""
    __tablename__ = "availability_overrides"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_override_time_order"),
        Index("ix_availability_overrides_employee_range", "employee_id", "start_time", "end_time"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)

    # Absolute instants (UTC), not wall clock
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    is_unavailable = Column(Boolean, nullable=False, default=True)  # False = extra availability
    reason = Column(String, nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

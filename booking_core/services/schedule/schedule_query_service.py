# ============================================================================
# booking_core/services/schedule/schedule_query_service.py
# Read access to weekly working hours and availability overrides
# ============================================================================
from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from booking_core.models.availability import WorkingHour, AvailabilityOverride


class ScheduleQueryService:
    """Reads schedule data; never writes it."""

    @staticmethod
    def get_working_hours(
            db: Session,
            business_id: UUID,
            employee_id: UUID
    ) -> List[WorkingHour]:
        """
        Weekly working hours for an employee.

        Falls back to the business default week (rows without an employee)
        when the employee has no rows of their own.
        """
        rows = db.query(WorkingHour).filter(
            WorkingHour.business_id == business_id,
            WorkingHour.employee_id == employee_id
        ).order_by(WorkingHour.day_of_week, WorkingHour.start_time).all()

        if rows:
            return rows

        return db.query(WorkingHour).filter(
            WorkingHour.business_id == business_id,
            WorkingHour.employee_id.is_(None)
        ).order_by(WorkingHour.day_of_week, WorkingHour.start_time).all()

    @staticmethod
    def get_overrides(
            db: Session,
            employee_id: UUID,
            range_start: datetime,
            range_end: datetime
    ) -> List[AvailabilityOverride]:
        """Overrides of the employee that intersect [range_start, range_end)."""
        return db.query(AvailabilityOverride).filter(
            AvailabilityOverride.employee_id == employee_id,
            AvailabilityOverride.start_time < range_end,
            AvailabilityOverride.end_time > range_start
        ).order_by(AvailabilityOverride.start_time).all()

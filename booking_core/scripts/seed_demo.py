#!/usr/bin/env python3
"""
Script to seed a demo business with staff, services and a weekly schedule
Usage: python -m booking_core.scripts.seed_demo
"""
import logging
import uuid
from datetime import datetime, time, timedelta, timezone

from sqlalchemy.orm import Session

from booking_core.config.database import SessionLocal, create_tables
from booking_core.models import AvailabilityOverride, Business, Employee, Service, WorkingHour
from booking_core.utils.my_logging import setup_logging

logger = logging.getLogger(__name__)


def seed_demo(db: Session) -> Business:
    """Create a demo salon: two stylists, two services, Mon-Sat hours"""
    business = Business(
        id=uuid.uuid4(),
        name="Downtown Hair Studio",
        timezone="America/New_York",
        booking_settings={"slot_step_minutes": 30, "auto_confirm": False},
    )
    db.add(business)

    haircut = Service(
        id=uuid.uuid4(),
        business_id=business.id,
        name="Haircut",
        description="Wash, cut and style",
        duration=30,
        buffer_after_minutes=10,
    )
    coloring = Service(
        id=uuid.uuid4(),
        business_id=business.id,
        name="Coloring",
        description="Full color treatment",
        duration=90,
        buffer_before_minutes=15,
        buffer_after_minutes=15,
    )
    db.add_all([haircut, coloring])

    alice = Employee(id=uuid.uuid4(), business_id=business.id, name="Alice")
    bruno = Employee(id=uuid.uuid4(), business_id=business.id, name="Bruno")
    alice.services = [haircut, coloring]
    bruno.services = [haircut]
    db.add_all([alice, bruno])

    # 1. Business default hours: Mon-Fri 9-17, Sat 10-14, Sun off
    hours = [
        WorkingHour(
            id=uuid.uuid4(),
            business_id=business.id,
            day_of_week=day,
            start_time=time(9, 0),
            end_time=time(17, 0),
        )
        for day in range(0, 5)
    ]
    hours.append(WorkingHour(
        id=uuid.uuid4(), business_id=business.id, day_of_week=5,
        start_time=time(10, 0), end_time=time(14, 0),
    ))
    hours.append(WorkingHour(id=uuid.uuid4(), business_id=business.id, day_of_week=6, is_off=True))

    # 2. Bruno works a split shift on Tuesdays and follows the business hours otherwise
    for day in range(0, 7):
        if day == 1:
            hours.append(WorkingHour(
                id=uuid.uuid4(), business_id=business.id, employee_id=bruno.id, day_of_week=day,
                start_time=time(8, 0), end_time=time(12, 0),
            ))
            hours.append(WorkingHour(
                id=uuid.uuid4(), business_id=business.id, employee_id=bruno.id, day_of_week=day,
                start_time=time(14, 0), end_time=time(19, 0),
            ))
        else:
            source = next(h for h in hours if h.employee_id is None and h.day_of_week == day)
            hours.append(WorkingHour(
                id=uuid.uuid4(), business_id=business.id, employee_id=bruno.id, day_of_week=day,
                start_time=source.start_time, end_time=source.end_time, is_off=source.is_off,
            ))
    db.add_all(hours)

    # 3. Alice takes a long lunch tomorrow
    tomorrow = datetime.now(timezone.utc).replace(hour=16, minute=0, second=0, microsecond=0) + timedelta(days=1)
    db.add(AvailabilityOverride(
        id=uuid.uuid4(),
        business_id=business.id,
        employee_id=alice.id,
        start_time=tomorrow,
        end_time=tomorrow + timedelta(hours=2),
        is_unavailable=True,
        reason="Lunch meeting",
    ))

    db.commit()
    return business


def main():
    setup_logging()
    create_tables()

    db: Session = SessionLocal()
    try:
        business = seed_demo(db)
        logger.info(f"Seeded demo business {business.name} ({business.id})")
    except Exception as e:
        db.rollback()
        logger.error(f"Error seeding demo data: {e}", exc_info=True)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()

import uuid
from datetime import date, datetime, time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from booking_core.config.database import build_engine, get_db
from booking_core.models import (
    AvailabilityOverride,
    Base,
    Business,
    Employee,
    Service,
    WorkingHour,
)
from booking_core.services.calendar.calendar_math import local_to_instant

NEW_YORK = "America/New_York"

# 2030-01-07 is a Monday; 2030-03-10 is the US spring-forward Sunday
MONDAY = date(2030, 1, 7)
SPRING_FORWARD = date(2030, 3, 10)


def ny(day: date, hour: int, minute: int = 0) -> datetime:
    """UTC instant of a New York wall-clock time."""
    return local_to_instant(day, time(hour, minute), NEW_YORK)


@pytest.fixture
def engine():
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_business(db):
    def _make(timezone=NEW_YORK, **booking_settings):
        business = Business(
            id=uuid.uuid4(),
            name="Test Studio",
            timezone=timezone,
            booking_settings=booking_settings,
        )
        db.add(business)
        db.commit()
        return business
    return _make


@pytest.fixture
def make_service(db):
    def _make(business, duration=60, buffer_before=0, buffer_after=0, name="Consultation"):
        service = Service(
            id=uuid.uuid4(),
            business_id=business.id,
            name=name,
            duration=duration,
            buffer_before_minutes=buffer_before,
            buffer_after_minutes=buffer_after,
        )
        db.add(service)
        db.commit()
        return service
    return _make


@pytest.fixture
def make_employee(db):
    def _make(business, services=(), name="Sam", employee_id=None):
        employee = Employee(id=employee_id or uuid.uuid4(), business_id=business.id, name=name)
        employee.services = list(services)
        db.add(employee)
        db.commit()
        return employee
    return _make


@pytest.fixture
def add_hours(db):
    def _add(business, employee, day_of_week, start=None, end=None, is_off=False):
        row = WorkingHour(
            id=uuid.uuid4(),
            business_id=business.id,
            employee_id=employee.id if employee is not None else None,
            day_of_week=day_of_week,
            start_time=start,
            end_time=end,
            is_off=is_off,
        )
        db.add(row)
        db.commit()
        return row
    return _add


@pytest.fixture
def add_override(db):
    def _add(business, employee, start, end, is_unavailable=True, reason=None):
        override = AvailabilityOverride(
            id=uuid.uuid4(),
            business_id=business.id,
            employee_id=employee.id,
            start_time=start,
            end_time=end,
            is_unavailable=is_unavailable,
            reason=reason,
        )
        db.add(override)
        db.commit()
        return override
    return _add


@pytest.fixture
def salon(make_business, make_service, make_employee, add_hours):
    """New York business, 60 minute service, one employee working Mondays 09:00-17:00."""
    business = make_business()
    service = make_service(business)
    employee = make_employee(business, services=[service])
    add_hours(business, employee, 0, time(9, 0), time(17, 0))
    return SimpleNamespace(business=business, service=service, employee=employee)


@pytest.fixture
def client(session_factory):
    from booking_core.main import create_app

    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    return TestClient(app)

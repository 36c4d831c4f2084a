"""PostgreSQL-only schema and locking, checked by compiling against the dialect."""
import uuid
from types import SimpleNamespace

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.schema import CreateTable

from booking_core.config.settings import get_settings
from booking_core.models import Booking
from booking_core.services.booking.booking_query_service import BookingQueryService


def compile_for(statement, dialect):
    return str(statement.compile(dialect=dialect))


class RecordingSession:
    """Stands in for a PostgreSQL session and keeps the SQL it was asked to run."""

    def __init__(self):
        self.statements = []

    def get_bind(self):
        return SimpleNamespace(dialect=postgresql.dialect())

    def execute(self, statement):
        self.statements.append(compile_for(statement, postgresql.dialect()))
        return SimpleNamespace(first=lambda: None)


def test_bookings_table_has_partial_exclusion_constraint_on_postgres():
    ddl = compile_for(CreateTable(Booking.__table__), postgresql.dialect())

    assert "CONSTRAINT bookings_no_overlap_per_employee EXCLUDE USING gist" in ddl
    assert "employee_id WITH =" in ddl
    assert "tstzrange(blocked_start, blocked_end) WITH &&" in ddl
    assert "WHERE (status IN ('pending', 'confirmed'))" in ddl
    assert "blocked_start TIMESTAMP WITH TIME ZONE NOT NULL" in ddl


def test_exclusion_constraint_is_skipped_on_sqlite():
    ddl = compile_for(CreateTable(Booking.__table__), sqlite.dialect())

    assert "EXCLUDE" not in ddl
    assert "check_booking_blocked_window" in ddl


def test_lock_timeouts_only_apply_to_postgres(monkeypatch):
    monkeypatch.setattr(get_settings(), "BOOKING_LOCK_TIMEOUT_MS", 1500)
    monkeypatch.setattr(get_settings(), "BOOKING_COMMIT_TIMEOUT_SECONDS", 2.5)

    statements = [str(s) for s in BookingQueryService.lock_timeouts("postgresql")]

    assert statements == [
        "SET LOCAL lock_timeout = '1500ms'",
        "SET LOCAL statement_timeout = '2500ms'",
    ]
    assert BookingQueryService.lock_timeouts("sqlite") == []


def test_lock_employee_sets_timeouts_then_locks_the_row():
    session = RecordingSession()

    BookingQueryService.lock_employee(session, uuid.uuid4())

    assert len(session.statements) == 3
    assert session.statements[0].startswith("SET LOCAL lock_timeout")
    assert session.statements[1].startswith("SET LOCAL statement_timeout")
    assert session.statements[2].startswith("SELECT employees.id")
    assert session.statements[2].endswith("FOR UPDATE")

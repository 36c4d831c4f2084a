from datetime import date, datetime, time, timedelta, timezone
from types import SimpleNamespace

from booking_core.services.availability.working_hours import resolve_nominal_hours, to_instant_intervals
from booking_core.services.schedule.schedule_query_service import ScheduleQueryService

from conftest import MONDAY, NEW_YORK, SPRING_FORWARD, ny


def row(day_of_week, start=None, end=None, is_off=False):
    return SimpleNamespace(day_of_week=day_of_week, start_time=start, end_time=end, is_off=is_off)


def test_off_day_is_empty():
    rows = [row(0, time(9), time(17)), row(0, is_off=True)]
    assert resolve_nominal_hours(rows, MONDAY) == []


def test_missing_weekday_is_empty():
    assert resolve_nominal_hours([row(1, time(9), time(17))], MONDAY) == []


def test_split_shift_is_sorted_and_merged():
    rows = [
        row(0, time(14), time(18)),
        row(0, time(9), time(12)),
        row(0, time(11), time(13)),
    ]
    assert resolve_nominal_hours(rows, MONDAY) == [(time(9), time(13)), (time(14), time(18))]


def test_malformed_rows_are_skipped():
    rows = [row(0, time(17), time(9)), row(0, time(9), time(10))]
    assert resolve_nominal_hours(rows, MONDAY) == [(time(9), time(10))]


def test_local_hours_become_utc_instants():
    intervals = to_instant_intervals(MONDAY, [(time(9), time(17))], NEW_YORK)
    assert len(intervals) == 1
    assert intervals[0].start == datetime(2030, 1, 7, 14, tzinfo=timezone.utc)
    assert intervals[0].end == datetime(2030, 1, 7, 22, tzinfo=timezone.utc)


def test_shift_across_spring_forward_loses_an_hour():
    intervals = to_instant_intervals(SPRING_FORWARD, [(time(1), time(4))], NEW_YORK)
    assert intervals[0].end - intervals[0].start == timedelta(hours=2)


def test_shift_inside_dst_gap_moves_forward():
    intervals = to_instant_intervals(SPRING_FORWARD, [(time(2, 0), time(2, 30))], NEW_YORK)
    assert intervals[0].start == datetime(2030, 3, 10, 7, 0, tzinfo=timezone.utc)
    assert intervals[0].end - intervals[0].start == timedelta(minutes=30)


def test_shift_ending_at_gap_edge_collapses():
    # 02:30 moves to 03:30 EDT, which is after 03:00
    assert to_instant_intervals(SPRING_FORWARD, [(time(2, 30), time(3, 0))], NEW_YORK) == []


def test_employee_without_rows_uses_business_defaults(db, make_business, make_employee, add_hours):
    business = make_business()
    employee = make_employee(business)
    add_hours(business, None, 0, time(10), time(16))

    rows = ScheduleQueryService.get_working_hours(db, business.id, employee.id)
    assert [(r.start_time, r.end_time) for r in rows] == [(time(10), time(16))]


def test_employee_rows_replace_business_defaults(db, make_business, make_employee, add_hours):
    business = make_business()
    employee = make_employee(business)
    add_hours(business, None, 0, time(10), time(16))
    add_hours(business, employee, 1, time(8), time(12))

    rows = ScheduleQueryService.get_working_hours(db, business.id, employee.id)
    assert [r.day_of_week for r in rows] == [1]
    assert resolve_nominal_hours(rows, MONDAY) == []


def test_overrides_are_filtered_by_range(db, salon, add_override):
    add_override(salon.business, salon.employee, ny(MONDAY, 12), ny(MONDAY, 13))
    add_override(salon.business, salon.employee, ny(date(2030, 1, 9), 12), ny(date(2030, 1, 9), 13))

    start = ny(MONDAY, 0)
    overrides = ScheduleQueryService.get_overrides(db, salon.employee.id, start, start + timedelta(days=1))
    assert len(overrides) == 1
    assert overrides[0].start_time == ny(MONDAY, 12)

from datetime import date, datetime, time, timedelta, timezone

import pytest

from booking_core.core.exceptions import InvalidTimezone
from booking_core.services.calendar.calendar_math import (
    instant_to_local_time,
    local_date_to_instant_range,
    local_dates_covering,
    local_to_instant,
    validate_timezone,
)

from conftest import MONDAY, NEW_YORK, SPRING_FORWARD


def test_local_to_instant_uses_standard_offset_in_winter():
    assert local_to_instant(MONDAY, time(9, 0), NEW_YORK) == datetime(2030, 1, 7, 14, 0, tzinfo=timezone.utc)


def test_local_to_instant_uses_daylight_offset_in_summer():
    assert local_to_instant(date(2030, 7, 1), time(9, 0), NEW_YORK) == datetime(2030, 7, 1, 13, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("day,wall_time", [
    (MONDAY, time(0, 0)),
    (MONDAY, time(9, 30)),
    (date(2030, 7, 1), time(23, 59)),
    (SPRING_FORWARD, time(4, 0)),
])
def test_round_trip_for_unambiguous_times(day, wall_time):
    assert instant_to_local_time(local_to_instant(day, wall_time, NEW_YORK), NEW_YORK) == (day, wall_time)


def test_nonexistent_time_moves_forward_past_the_gap():
    # 02:30 does not exist on the spring-forward date; it lands on 03:30 EDT
    instant = local_to_instant(SPRING_FORWARD, time(2, 30), NEW_YORK)
    assert instant == datetime(2030, 3, 10, 7, 30, tzinfo=timezone.utc)
    assert instant_to_local_time(instant, NEW_YORK) == (SPRING_FORWARD, time(3, 30))


def test_ambiguous_time_resolves_to_first_occurrence():
    # 01:30 happens twice on 2030-11-03; the first one is still EDT
    instant = local_to_instant(date(2030, 11, 3), time(1, 30), NEW_YORK)
    assert instant == datetime(2030, 11, 3, 5, 30, tzinfo=timezone.utc)


def test_spring_forward_day_is_23_hours():
    start, end = local_date_to_instant_range(SPRING_FORWARD, NEW_YORK)
    assert end - start == timedelta(hours=23)


def test_fall_back_day_is_25_hours():
    start, end = local_date_to_instant_range(date(2030, 11, 3), NEW_YORK)
    assert end - start == timedelta(hours=25)


def test_regular_day_is_24_hours():
    start, end = local_date_to_instant_range(MONDAY, NEW_YORK)
    assert start == datetime(2030, 1, 7, 5, 0, tzinfo=timezone.utc)
    assert end - start == timedelta(hours=24)


# Half-hour and 45-minute offsets, a 30-minute DST shift, southern hemisphere DST
@pytest.mark.parametrize("tz", [
    "UTC",
    NEW_YORK,
    "Europe/London",
    "Asia/Kolkata",
    "Australia/Lord_Howe",
    "Pacific/Chatham",
    "America/Sao_Paulo",
])
def test_every_local_day_starts_at_local_midnight(tz):
    day_lengths = {timedelta(hours=h) for h in (23, 23.5, 24, 24.5, 25)}
    day = date(2030, 1, 1)
    while day.year == 2030:
        start, end = local_date_to_instant_range(day, tz)
        assert instant_to_local_time(start, tz) == (day, time(0, 0)), day
        assert end - start in day_lengths, day
        day += timedelta(days=1)


def test_instant_to_local_time_treats_naive_as_utc():
    assert instant_to_local_time(datetime(2030, 1, 7, 14, 0), NEW_YORK) == (MONDAY, time(9, 0))


def test_local_dates_covering_spans_both_local_days():
    # 03:00Z-06:00Z is Jan 6 22:00 to Jan 7 01:00 in New York
    days = local_dates_covering(
        datetime(2030, 1, 7, 3, 0, tzinfo=timezone.utc),
        datetime(2030, 1, 7, 6, 0, tzinfo=timezone.utc),
        NEW_YORK,
    )
    assert days == [date(2030, 1, 6), MONDAY]


def test_local_dates_covering_excludes_end_boundary():
    start, end = local_date_to_instant_range(MONDAY, NEW_YORK)
    assert local_dates_covering(start, end, NEW_YORK) == [MONDAY]


@pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "", "EST5EDT/Nowhere"])
def test_unknown_timezone_raises(name):
    with pytest.raises(InvalidTimezone):
        validate_timezone(name)


def test_unknown_timezone_raises_from_conversions():
    with pytest.raises(InvalidTimezone) as exc_info:
        local_date_to_instant_range(MONDAY, "Not/AZone")
    assert exc_info.value.details == {"timezone": "Not/AZone"}
    assert exc_info.value.status_code == 400

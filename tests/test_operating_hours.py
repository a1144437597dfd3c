from datetime import date

from services.operating_hours import (
    DEFAULT_OPEN_HOURS,
    DEFAULT_OPERATING_HOURS,
    daily_open_hours,
    is_closed,
    weekday_name,
)

MONDAY = date(2024, 1, 1)
SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)


def week(open_="06:00", close="18:00"):
    return {d: {"open": open_, "close": close} for d in
            ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")}


def test_weekday_name_is_calendar_based():
    assert weekday_name(MONDAY) == "monday"
    assert weekday_name(SUNDAY) == "sunday"


def test_open_hours_regular_day():
    assert daily_open_hours(week(), MONDAY) == 12


def test_open_hours_ignores_minutes():
    assert daily_open_hours(week("06:45", "18:15"), MONDAY) == 12


def test_default_schedule_saturday_and_sunday():
    assert daily_open_hours(DEFAULT_OPERATING_HOURS, SATURDAY) == 8
    assert daily_open_hours(DEFAULT_OPERATING_HOURS, SUNDAY) == 0
    assert is_closed(DEFAULT_OPERATING_HOURS, SUNDAY)
    assert not is_closed(DEFAULT_OPERATING_HOURS, MONDAY)


def test_closed_on_either_side():
    sched = {"monday": {"open": "06:00", "close": "closed"}}
    assert daily_open_hours(sched, MONDAY) == 0


def test_missing_or_malformed_data_falls_back():
    assert daily_open_hours(None, MONDAY) == DEFAULT_OPEN_HOURS
    assert daily_open_hours("not a schedule", MONDAY) == DEFAULT_OPEN_HOURS
    assert daily_open_hours({"tuesday": {"open": "06:00", "close": "18:00"}}, MONDAY) == DEFAULT_OPEN_HOURS
    assert daily_open_hours({"monday": {"open": "06:00"}}, MONDAY) == DEFAULT_OPEN_HOURS
    assert daily_open_hours({"monday": {"open": "six", "close": "18:00"}}, MONDAY) == DEFAULT_OPEN_HOURS
    assert not is_closed(None, MONDAY)


def test_close_before_open_is_zero():
    assert daily_open_hours({"monday": {"open": "18:00", "close": "06:00"}}, MONDAY) == 0

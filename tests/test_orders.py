from datetime import date

from services.models import Allocation, Order
from services.operating_hours import DEFAULT_OPERATING_HOURS
from services.orders import (
    allocation_progress,
    derive_status,
    order_progress,
    possible_trips,
    validate_date_range,
    validate_sites,
)


def test_date_range_and_sites():
    assert validate_date_range(date(2024, 1, 1), date(2024, 1, 1)) is None
    assert validate_date_range(date(2024, 1, 2), date(2024, 1, 1)) == "End date must be after start date"
    assert validate_sites("s1", "s2") is None
    assert validate_sites("s1", "s1") is not None


def test_possible_trips_over_a_week():
    # Mon..Sun with default hours: 5 x 12h + 8h Saturday, Sunday closed
    res = possible_trips(DEFAULT_OPERATING_HOURS, 4, date(2024, 1, 1), date(2024, 1, 7))
    assert res.error is None
    assert res.operating_days == 6
    assert round(res.average_open_hours, 2) == 11.33
    assert res.trips_per_day == 2
    assert res.total_trips == 12


def test_possible_trips_no_operating_days():
    res = possible_trips(DEFAULT_OPERATING_HOURS, 4, date(2024, 1, 7), date(2024, 1, 7))
    assert res.total_trips == 0
    assert res.error == "No operating days in selected date range"


def test_allocation_progress():
    prog = allocation_progress(1000, [Allocation("a", 600), Allocation("b", 600)])
    assert prog["remaining_weight"] == -200
    assert prog["percent_allocated"] == 100.0
    assert allocation_progress(1000, [])["remaining_weight"] == 1000


def test_order_progress_and_status():
    order = Order(total_weight=1000, dispatch_start_date=date(2024, 1, 1), dispatch_end_date=date(2024, 1, 2),
                  daily_weight_limit=600, daily_truck_limit=5, completed_weight=333, completed_trips=4)
    prog = order_progress(order)
    assert prog["percentage_complete"] == 33
    assert prog["completed_trips"] == 4

    assert derive_status([]) == "pending"
    assert derive_status([Allocation("a", 1000, 10)]) == "allocated"
    assert derive_status([Allocation("a", 1000, 10)], completed_weight=1000, total_weight=1000) == "completed"
    assert derive_status([], current="cancelled") == "cancelled"


def test_possible_trips_without_schedule():
    res = possible_trips(None, 4, date(2024, 1, 1), date(2024, 1, 7))
    assert res.total_trips == 0
    assert res.operating_days == 0
    assert res.error == "Site not found or operating hours not configured"


def test_possible_trips_skips_days_missing_from_schedule():
    sched = {"monday": {"open": "06:00", "close": "18:00"}}
    res = possible_trips(sched, 4, date(2024, 1, 1), date(2024, 1, 7))
    assert res.error is None
    assert res.operating_days == 1
    assert res.trips_per_day == 3
    assert res.total_trips == 3

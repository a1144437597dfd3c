from datetime import date

import pytest

from services.calculator import (
    capacity_per_truck_over_duration,
    closed_day_warning,
    minimum_trucks,
    order_duration_days,
    transporter_capacity,
)
from services.models import Company, Order, Site, TripConfigMode


def make_order(**kw):
    base = dict(
        total_weight=1000,
        dispatch_start_date=date(2024, 1, 1),
        dispatch_end_date=date(2024, 1, 3),
        daily_weight_limit=10000,
        daily_truck_limit=100,
        trip_config_mode=TripConfigMode.FIXED_TRIPS_PER_DAY,
        trip_limit=2,
    )
    base.update(kw)
    return Order(**base)


def test_duration_counts_both_ends():
    assert order_duration_days(date(2024, 1, 1), date(2024, 1, 1)) == 1
    assert order_duration_days(date(2024, 1, 1), date(2024, 1, 3)) == 3
    assert order_duration_days(date(2024, 1, 31), date(2024, 3, 1)) == 31


def test_capacity_and_minimum_trucks_scenario():
    cap = capacity_per_truck_over_duration(2, 10, 3)
    assert cap == 60
    assert minimum_trucks(125, cap) == 3
    assert minimum_trucks(120, cap) == 2


def test_zero_weight_per_truck_gives_zero_capacity():
    assert capacity_per_truck_over_duration(3, 0, 5) == 0
    assert capacity_per_truck_over_duration(3, None, 5) == 0
    assert minimum_trucks(500, 0) == 0


def test_fractional_trip_rate_not_rounded():
    assert capacity_per_truck_over_duration(0.5, 30, 5) == 30 * 0.5 * 5


def test_minimum_trucks_monotone():
    counts = [minimum_trucks(w, 60) for w in range(0, 1000, 7)]
    assert counts == sorted(counts)


def test_transporter_capacity_fixed_mode_skips_site():
    cap = transporter_capacity(make_order(), Company("t1", "Haul Co", 10))
    assert cap.open_hours is None
    assert cap.trips_per_day == 2
    assert cap.duration_days == 3
    assert cap.capacity_per_truck == 60
    assert cap.minimum_trucks(125) == 3


def test_transporter_capacity_duration_mode_uses_site_hours():
    site = Site("s1", "Pit", {"monday": {"open": "06:00", "close": "18:00"}})
    order = make_order(trip_config_mode=TripConfigMode.TRIP_DURATION, trip_duration=4, collection_site_id="s1")
    cap = transporter_capacity(order, Company("t1", "Haul Co", 10), site)
    assert cap.open_hours == 12
    assert cap.trips_per_day == 3
    assert cap.capacity_per_truck == 90


def test_transporter_capacity_multi_day_trip():
    order = make_order(trip_config_mode=TripConfigMode.TRIP_DURATION, trip_duration=48)
    cap = transporter_capacity(order, Company("t1", "Haul Co", 30))
    assert cap.trips_per_day == 0.5
    assert cap.capacity_per_truck == pytest.approx(30 * 0.5 * 3)


def test_closed_site_is_flagged_not_fixed():
    site = Site("s1", "Pit", {"monday": {"open": "closed", "close": "closed"}})
    order = make_order(trip_config_mode=TripConfigMode.TRIP_DURATION, trip_duration=4)
    cap = transporter_capacity(order, Company("t1", "Haul Co", 10), site)
    assert cap.open_hours == 0
    assert cap.trips_per_day == 1
    assert cap.closed_on_reference_day
    assert "closed" in closed_day_warning(cap, "Haul Co")

import pytest

from services.models import TripConfigMode
from services.trip_rate import trips_per_day

DURATION = TripConfigMode.TRIP_DURATION


def test_fixed_mode_returns_trip_limit():
    assert trips_per_day(TripConfigMode.FIXED_TRIPS_PER_DAY, 3, None, 0) == 3
    assert trips_per_day("fixedTripsPerDay", 2, 99, 12) == 2


def test_several_trips_fit_in_window():
    # 06:00-18:00, 4h trips
    assert trips_per_day(DURATION, None, 4, 12) == 3
    assert trips_per_day(DURATION, None, 5, 12) == 2


def test_trip_longer_than_window_still_one():
    assert trips_per_day(DURATION, None, 16, 12) == 1


def test_multi_day_trip_is_fractional():
    assert trips_per_day(DURATION, None, 48, 12) == 0.5
    assert trips_per_day(DURATION, None, 30, 12) == 0.5
    assert trips_per_day(DURATION, None, 72, 12) == pytest.approx(1 / 3)


def test_exactly_24h_is_same_day_rule():
    assert trips_per_day(DURATION, None, 24, 12) == 1
    assert trips_per_day(DURATION, None, 24, 24) == 1


def test_closed_day_still_gets_one_trip():
    assert trips_per_day(DURATION, None, 4, 0) == 1


def test_bad_inputs_raise():
    with pytest.raises(ValueError):
        trips_per_day("weekly", 1, None, 12)
    with pytest.raises(ValueError):
        trips_per_day(DURATION, None, 0, 12)


def test_unknown_mode_error_has_no_chained_cause():
    with pytest.raises(ValueError) as err:
        trips_per_day("weekly", 1, None, 12)
    assert err.value.__cause__ is None
    assert err.value.__suppress_context__

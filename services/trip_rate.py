# services/trip_rate.py
import math
from typing import Optional, Union

from services.models import TripConfigMode

HOURS_PER_DAY = 24


def _mode(value: Union[TripConfigMode, str]) -> TripConfigMode:
    try:
        return TripConfigMode(value)
    except ValueError:
        raise ValueError(f"Unknown trip config mode: {value!r}") from None


def trips_per_day(
    trip_config_mode: Union[TripConfigMode, str],
    trip_limit: Optional[int],
    trip_duration: Optional[float],
    open_hours: float,
) -> float:
    """
    Trips one truck completes per operating day.

    Fixed mode returns trip_limit as is. Duration mode:
      - duration <= 24h and fits the window: floor(open_hours / duration)
      - duration <= 24h but longer than the window: 1 (the trip starts inside the window)
      - duration > 24h: 1 / ceil(duration / 24), left fractional on purpose so
        capacity over the order isn't distorted by rounding
    """
    mode = _mode(trip_config_mode)
    if mode is TripConfigMode.FIXED_TRIPS_PER_DAY:
        return trip_limit or 0

    duration = float(trip_duration or 0.0)
    if duration <= 0:
        raise ValueError("trip_duration must be positive in tripDuration mode")

    if duration > HOURS_PER_DAY:
        return 1.0 / math.ceil(duration / HOURS_PER_DAY)

    if duration <= open_hours:
        return float(math.floor(open_hours / duration))

    # Closed days (open_hours == 0) land here too and get one trip.
    return 1.0

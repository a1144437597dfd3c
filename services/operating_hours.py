# services/operating_hours.py
"""
Daily open hours of a site from its weekly schedule.

Schedules come from site configuration and are often incomplete, so anything
that can't be read falls back to DEFAULT_OPEN_HOURS instead of failing the
capacity pipeline. Only the hour part of "HH:MM" is used; minutes are dropped.
"""
import logging
from datetime import date
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_OPEN_HOURS = 12.0
CLOSED = "closed"

# date.weekday(): Monday = 0 ... Sunday = 6
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DEFAULT_OPERATING_HOURS = {
    "monday": {"open": "06:00", "close": "18:00"},
    "tuesday": {"open": "06:00", "close": "18:00"},
    "wednesday": {"open": "06:00", "close": "18:00"},
    "thursday": {"open": "06:00", "close": "18:00"},
    "friday": {"open": "06:00", "close": "18:00"},
    "saturday": {"open": "06:00", "close": "14:00"},
    "sunday": {"open": CLOSED, "close": CLOSED},
}


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def _hour_of(value: Any) -> Optional[int]:
    """'06:30' -> 6. None if not an HH:MM string."""
    if not isinstance(value, str) or ":" not in value:
        return None
    head = value.strip().split(":", 1)[0]
    try:
        return int(head)
    except ValueError:
        return None


def _day_entry(schedule: Any, day: date) -> Optional[Mapping[str, Any]]:
    if not isinstance(schedule, Mapping):
        return None
    entry = schedule.get(weekday_name(day))
    if not isinstance(entry, Mapping):
        return None
    if "open" not in entry or "close" not in entry:
        return None
    return entry


def has_hours(schedule: Any, day: date) -> bool:
    """True when the schedule has an open/close entry for the day."""
    return _day_entry(schedule, day) is not None


def is_closed(schedule: Any, day: date) -> bool:
    entry = _day_entry(schedule, day)
    if entry is None:
        return False
    return entry["open"] == CLOSED or entry["close"] == CLOSED


def daily_open_hours(schedule: Any, reference_date: date) -> float:
    """
    Open hours of the site on reference_date's weekday.

    - missing/malformed schedule or day entry -> DEFAULT_OPEN_HOURS
    - "closed" on either side -> 0
    - otherwise close hour - open hour, floored at 0
    """
    entry = _day_entry(schedule, reference_date)
    if entry is None:
        logger.debug("No usable hours for %s, using default %.0fh", weekday_name(reference_date), DEFAULT_OPEN_HOURS)
        return DEFAULT_OPEN_HOURS

    if entry["open"] == CLOSED or entry["close"] == CLOSED:
        return 0.0

    open_h = _hour_of(entry["open"])
    close_h = _hour_of(entry["close"])
    if open_h is None or close_h is None:
        logger.debug("Unparsable hours %r for %s, using default", dict(entry), weekday_name(reference_date))
        return DEFAULT_OPEN_HOURS

    # Misconfigured (close before open) means no capacity that day
    return float(max(0, close_h - open_h))

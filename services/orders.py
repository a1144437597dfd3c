# services/orders.py
"""
Order-level helpers around allocation: precondition checks, the possible-trips
estimate over a dispatch window, and progress/status figures.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Mapping, Optional, Sequence

from services.calculator import order_duration_days
from services.models import Allocation, Order
from services.operating_hours import daily_open_hours, has_hours, is_closed

logger = logging.getLogger(__name__)

# Company order-config fallbacks
DEFAULT_DAILY_TRUCK_LIMIT = 10
DEFAULT_DAILY_WEIGHT_LIMIT = 100.0
DEFAULT_TRIP_LIMIT = 1
DEFAULT_TRIP_DURATION_HOURS = 4.0

STATUS_PENDING = "pending"
STATUS_ALLOCATED = "allocated"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"


def validate_date_range(start: date, end: date) -> Optional[str]:
    if end < start:
        return "End date must be after start date"
    return None


def validate_sites(collection_site_id: Optional[str], destination_site_id: Optional[str]) -> Optional[str]:
    if collection_site_id and collection_site_id == destination_site_id:
        return "Collection and destination sites must be different"
    return None


@dataclass(frozen=True)
class PossibleTrips:
    trips_per_day: int
    total_trips: int
    operating_days: int
    average_open_hours: float
    error: Optional[str] = None


def possible_trips(schedule: Any, trip_duration: float, start: date, end: date) -> PossibleTrips:
    """
    Trips a truck can make across the dispatch window, using the average open
    hours of the days the site actually operates. Days without an entry in the
    schedule don't count as operating (no 12h fallback here).
    """
    if trip_duration <= 0:
        return PossibleTrips(0, 0, 0, 0.0, error="Trip duration must be positive")
    if not isinstance(schedule, Mapping):
        return PossibleTrips(0, 0, 0, 0.0, error="Site not found or operating hours not configured")

    days = order_duration_days(start, end)
    total_hours = 0.0
    operating_days = 0
    for i in range(days):
        day = start + timedelta(days=i)
        if not has_hours(schedule, day) or is_closed(schedule, day):
            continue
        total_hours += daily_open_hours(schedule, day)
        operating_days += 1

    if operating_days == 0:
        return PossibleTrips(0, 0, 0, 0.0, error="No operating days in selected date range")

    avg = total_hours / operating_days
    per_day = math.floor(avg / trip_duration)
    logger.debug("possible trips: %d operating days, avg %.2fh, %d trips/day", operating_days, avg, per_day)
    return PossibleTrips(per_day, per_day * operating_days, operating_days, avg)


def allocation_progress(total_weight: float, allocations: Sequence[Allocation]) -> dict:
    allocated = math.fsum(float(a.allocated_weight) for a in allocations)
    pct = min(allocated / total_weight * 100, 100.0) if total_weight > 0 else 0.0
    return {
        "total_weight": float(total_weight),
        "allocated_weight": allocated,
        "remaining_weight": float(total_weight) - allocated,
        "percent_allocated": round(pct, 2),
    }


def order_progress(order: Order) -> dict:
    completed = float(order.completed_weight or 0.0)
    pct = round(completed / order.total_weight * 100) if order.total_weight > 0 else 0
    return {
        "completed_weight": completed,
        "total_weight": float(order.total_weight),
        "completed_trips": int(order.completed_trips or 0),
        "percentage_complete": pct,
    }


def derive_status(
    allocations: Sequence[Allocation],
    completed_weight: float = 0.0,
    total_weight: Optional[float] = None,
    current: Optional[str] = None,
) -> str:
    if current == STATUS_CANCELLED:
        return current
    if total_weight is not None and total_weight > 0 and completed_weight >= total_weight:
        return STATUS_COMPLETED
    return STATUS_ALLOCATED if allocations else STATUS_PENDING

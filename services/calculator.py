# services/calculator.py
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from services.models import Company, Order, Site, TripConfigMode
from services.operating_hours import daily_open_hours, is_closed
from services.trip_rate import trips_per_day

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

DateLike = Union[date, datetime]


# ---------- Order duration ----------
def order_duration_days(start: DateLike, end: DateLike) -> int:
    """
    Operative days of an order, counting both endpoints.
    Same-day order -> 1, start=1st end=3rd -> 3.
    """
    span = (end - start).total_seconds() / SECONDS_PER_DAY
    return max(1, math.ceil(span) + 1)


# ---------- Capacity ----------
def capacity_per_truck_over_duration(
    trips_per_day: float,
    weight_per_truck_per_trip: Optional[float],
    order_duration_days: int,
) -> float:
    """Total kg one truck can move over the whole order."""
    if not weight_per_truck_per_trip:
        return 0.0
    weight_per_day_per_truck = trips_per_day * float(weight_per_truck_per_trip)
    return weight_per_day_per_truck * order_duration_days


def minimum_trucks(allocated_weight: float, capacity_per_truck: float) -> int:
    """
    Smallest truck count that covers allocated_weight.
    0 when capacity is unknown (<= 0); callers must treat that as blocked,
    not as "no trucks needed".
    """
    if capacity_per_truck <= 0:
        return 0
    return math.ceil(allocated_weight / capacity_per_truck)


# ---------- Composition ----------
@dataclass(frozen=True)
class CapacityBreakdown:
    open_hours: Optional[float]
    trips_per_day: float
    duration_days: int
    weight_per_truck: float
    capacity_per_truck: float
    closed_on_reference_day: bool = False

    def minimum_trucks(self, allocated_weight: float) -> int:
        return minimum_trucks(allocated_weight, self.capacity_per_truck)

    def as_dict(self) -> dict:
        return {
            "open_hours": self.open_hours,
            "trips_per_day": self.trips_per_day,
            "duration_days": self.duration_days,
            "weight_per_truck": self.weight_per_truck,
            "capacity_per_truck": self.capacity_per_truck,
            "closed_on_reference_day": self.closed_on_reference_day,
        }


def transporter_capacity(order: Order, company: Company, site: Optional[Site] = None) -> CapacityBreakdown:
    """
    Open hours -> trips/day -> capacity per truck for one transporter on an order.
    Open hours are only looked up in duration mode, on the dispatch start date.
    """
    mode = TripConfigMode(order.trip_config_mode)
    open_hours: Optional[float] = None
    closed = False
    if mode is TripConfigMode.TRIP_DURATION:
        schedule = site.operating_hours if site else None
        open_hours = daily_open_hours(schedule, order.dispatch_start_date)
        closed = is_closed(schedule, order.dispatch_start_date)

    if mode is TripConfigMode.TRIP_DURATION and not (order.trip_duration and order.trip_duration > 0):
        # No usable duration: zero capacity, reported by the validator as CapacityUnavailable
        rate = 0.0
    else:
        rate = trips_per_day(mode, order.trip_limit, order.trip_duration, open_hours or 0.0)
    days = order_duration_days(order.dispatch_start_date, order.dispatch_end_date)
    capacity = capacity_per_truck_over_duration(rate, company.default_weight_per_truck, days)

    logger.debug(
        "capacity %s: open=%s trips/day=%s days=%d weight/truck=%s -> %s",
        company.id, open_hours, rate, days, company.default_weight_per_truck, capacity,
    )
    return CapacityBreakdown(
        open_hours=open_hours,
        trips_per_day=rate,
        duration_days=days,
        weight_per_truck=float(company.default_weight_per_truck or 0.0),
        capacity_per_truck=capacity,
        closed_on_reference_day=closed,
    )


def closed_day_warning(cap: CapacityBreakdown, label: str) -> Optional[str]:
    """
    A closed collection site still gets one trip/day from the trip-rate rules.
    Surface it instead of changing the rate.
    """
    if not cap.closed_on_reference_day:
        return None
    return (
        f"{label}: collection site is closed on the dispatch start day, "
        f"capacity assumes {cap.trips_per_day:g} trip(s)/day anyway"
    )

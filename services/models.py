# services/models.py
# Domain values shared by the capacity and allocation services.

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional


class TripConfigMode(str, Enum):
    FIXED_TRIPS_PER_DAY = "fixedTripsPerDay"
    TRIP_DURATION = "tripDuration"


# weekday name -> {"open": "HH:MM" | "closed", "close": "HH:MM" | "closed"}
WeeklySchedule = Dict[str, Dict[str, Any]]


@dataclass(frozen=True)
class Site:
    id: str
    name: str = ""
    operating_hours: Optional[WeeklySchedule] = None


@dataclass(frozen=True)
class Company:
    id: str
    name: str = ""
    default_weight_per_truck: float = 0.0  # kg per trip

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Allocation:
    company_id: str
    allocated_weight: float = 0.0
    number_of_trucks: int = 0


@dataclass(frozen=True)
class Order:
    """
    trip_limit is used in fixedTripsPerDay mode, trip_duration (hours) in
    tripDuration mode. A tripDuration order without a positive trip_duration
    gets zero truck capacity rather than an error.
    """
    total_weight: float
    dispatch_start_date: date
    dispatch_end_date: date
    daily_weight_limit: float
    daily_truck_limit: int
    trip_config_mode: TripConfigMode = TripConfigMode.FIXED_TRIPS_PER_DAY
    trip_limit: int = 1
    trip_duration: Optional[float] = None  # hours
    collection_site_id: Optional[str] = None
    destination_site_id: Optional[str] = None
    order_number: str = ""
    completed_weight: float = 0.0
    completed_trips: int = 0
    allocations: tuple = field(default_factory=tuple)

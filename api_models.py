# api_models.py
# Request bodies shared by the capacity and allocation routers.
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from pydantic import BaseModel, Field, model_validator

from services.models import Allocation, Company, Order, Site, TripConfigMode
from services.orders import (
    DEFAULT_DAILY_TRUCK_LIMIT,
    DEFAULT_DAILY_WEIGHT_LIMIT,
    DEFAULT_TRIP_LIMIT,
    validate_date_range,
    validate_sites,
)


class SiteIn(BaseModel):
    id: str
    name: str = ""
    # weekday -> {"open": "HH:MM"|"closed", "close": ...}; left loose, bad entries fall back to defaults
    operating_hours: Optional[Dict[str, Any]] = None

    def to_domain(self) -> Site:
        return Site(id=self.id, name=self.name, operating_hours=self.operating_hours)


class CompanyIn(BaseModel):
    id: str
    name: str = ""
    default_weight_per_truck: float = Field(default=0.0, ge=0)
    available_trucks: Optional[int] = Field(default=None, ge=0)

    def to_domain(self) -> Company:
        return Company(id=self.id, name=self.name, default_weight_per_truck=self.default_weight_per_truck)


class AllocationIn(BaseModel):
    company_id: str = ""
    allocated_weight: float = Field(default=0.0, ge=0)
    number_of_trucks: int = Field(default=0, ge=0)

    def to_domain(self) -> Allocation:
        return Allocation(
            company_id=self.company_id,
            allocated_weight=self.allocated_weight,
            number_of_trucks=self.number_of_trucks,
        )


class OrderIn(BaseModel):
    order_number: str = ""
    total_weight: float = Field(gt=0)
    dispatch_start_date: date
    dispatch_end_date: date
    daily_weight_limit: float = Field(default=DEFAULT_DAILY_WEIGHT_LIMIT, gt=0)
    daily_truck_limit: int = Field(default=DEFAULT_DAILY_TRUCK_LIMIT, gt=0)
    trip_config_mode: TripConfigMode = TripConfigMode.FIXED_TRIPS_PER_DAY
    trip_limit: int = Field(default=DEFAULT_TRIP_LIMIT, gt=0)
    trip_duration: Optional[float] = Field(default=None, gt=0)
    collection_site_id: Optional[str] = None
    destination_site_id: Optional[str] = None
    completed_weight: float = Field(default=0.0, ge=0)
    completed_trips: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_order(self):
        err = validate_date_range(self.dispatch_start_date, self.dispatch_end_date)
        if err:
            raise ValueError(err)
        err = validate_sites(self.collection_site_id, self.destination_site_id)
        if err:
            raise ValueError(err)
        if self.trip_config_mode == TripConfigMode.TRIP_DURATION and not self.trip_duration:
            raise ValueError("trip_duration is required when trip_config_mode is tripDuration")
        return self

    def to_domain(self, allocations: Optional[List[AllocationIn]] = None) -> Order:
        return Order(
            total_weight=self.total_weight,
            dispatch_start_date=self.dispatch_start_date,
            dispatch_end_date=self.dispatch_end_date,
            daily_weight_limit=self.daily_weight_limit,
            daily_truck_limit=self.daily_truck_limit,
            trip_config_mode=self.trip_config_mode,
            trip_limit=self.trip_limit,
            trip_duration=self.trip_duration,
            collection_site_id=self.collection_site_id,
            destination_site_id=self.destination_site_id,
            order_number=self.order_number,
            completed_weight=self.completed_weight,
            completed_trips=self.completed_trips,
            allocations=tuple(a.to_domain() for a in (allocations or [])),
        )


def collection_site(order: OrderIn, sites: List[SiteIn]) -> Optional[Site]:
    """
    The order's collection site from the request, or None when the order
    doesn't reference one. Unknown references are a 404.
    """
    if not order.collection_site_id:
        return None
    for s in sites:
        if s.id == order.collection_site_id:
            return s.to_domain()
    raise HTTPException(status_code=404, detail=f"Collection site not found: {order.collection_site_id}")

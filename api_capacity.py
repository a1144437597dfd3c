# api_capacity.py
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from api_models import CompanyIn, OrderIn, SiteIn, collection_site
from services.calculator import closed_day_warning, transporter_capacity
from services.models import TripConfigMode
from services.operating_hours import daily_open_hours, is_closed, weekday_name
from services.orders import possible_trips, validate_date_range
from services.trip_rate import trips_per_day

capacity_router = APIRouter()


class OpenHoursReq(BaseModel):
    operating_hours: Optional[Dict[str, Any]] = None
    reference_date: date


class TripRateReq(BaseModel):
    trip_config_mode: TripConfigMode
    trip_limit: Optional[int] = Field(default=None, gt=0)
    trip_duration: Optional[float] = Field(default=None, gt=0)
    open_hours: float = Field(default=0.0, ge=0)


class CapacityPlanReq(BaseModel):
    order: OrderIn
    company: CompanyIn
    sites: List[SiteIn] = Field(default_factory=list)
    allocated_weight: float = Field(default=0.0, ge=0)


class PossibleTripsReq(BaseModel):
    operating_hours: Optional[Dict[str, Any]] = None
    trip_duration: float = Field(gt=0)
    dispatch_start_date: date
    dispatch_end_date: date


@capacity_router.post("/capacity/open-hours")
def open_hours(req: OpenHoursReq) -> Dict[str, Any]:
    return {
        "weekday": weekday_name(req.reference_date),
        "open_hours": daily_open_hours(req.operating_hours, req.reference_date),
        "closed": is_closed(req.operating_hours, req.reference_date),
    }


@capacity_router.post("/capacity/trips-per-day")
def trip_rate(req: TripRateReq) -> Dict[str, Any]:
    try:
        rate = trips_per_day(req.trip_config_mode, req.trip_limit, req.trip_duration, req.open_hours)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"trips_per_day": rate}


@capacity_router.post("/capacity/plan")
def capacity_plan(req: CapacityPlanReq) -> Dict[str, Any]:
    """
    Capacity of one transporter's truck over the order and the minimum trucks
    for allocated_weight.
    """
    site = collection_site(req.order, req.sites)
    company = req.company.to_domain()
    cap = transporter_capacity(req.order.to_domain(), company, site)

    warnings = []
    w = closed_day_warning(cap, company.label)
    if w:
        warnings.append(w)
    if cap.capacity_per_truck <= 0:
        warnings.append(f"{company.label}: capacity per truck is 0, set a weight per truck")

    return {
        **cap.as_dict(),
        "allocated_weight": req.allocated_weight,
        "minimum_trucks": cap.minimum_trucks(req.allocated_weight),
        "warnings": warnings,
    }


@capacity_router.post("/orders/possible-trips")
def order_possible_trips(req: PossibleTripsReq) -> Dict[str, Any]:
    err = validate_date_range(req.dispatch_start_date, req.dispatch_end_date)
    if err:
        raise HTTPException(status_code=422, detail=err)
    res = possible_trips(req.operating_hours, req.trip_duration, req.dispatch_start_date, req.dispatch_end_date)
    return {
        "trips_per_day": res.trips_per_day,
        "total_trips": res.total_trips,
        "operating_days": res.operating_days,
        "average_open_hours": round(res.average_open_hours, 2),
        "error": res.error,
    }

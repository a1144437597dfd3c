# api_allocation.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api_models import AllocationIn, CompanyIn, OrderIn, SiteIn, collection_site
from services.allocation_validator import validate_allocations
from services.analytics import log_event, validation_event
from services.calculator import closed_day_warning
from services.fleet import FleetLookup, FleetLookupError
from services.orders import allocation_progress, derive_status

logger = logging.getLogger(__name__)

router = APIRouter()


class AllocationPlanRequest(BaseModel):
    order: OrderIn
    companies: List[CompanyIn] = Field(default_factory=list)
    sites: List[SiteIn] = Field(default_factory=list)
    allocations: List[AllocationIn] = Field(default_factory=list)
    # company_id -> trucks available; overrides CompanyIn.available_trucks
    fleet_availability: Optional[Dict[str, int]] = None


def get_fleet_lookup() -> FleetLookup:
    return FleetLookup()


async def _fleet_counts(req: AllocationPlanRequest, lookup: FleetLookup) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for c in req.companies:
        if c.available_trucks is not None:
            counts[c.id] = c.available_trucks
    counts.update(req.fleet_availability or {})

    # Unknown transporters are reported by the validator; don't ask the fleet source about them
    known = {c.id for c in req.companies}
    missing = [a.company_id for a in req.allocations if a.company_id in known and a.company_id not in counts]
    if missing:
        try:
            counts.update(await lookup.resolve(missing))
        except FleetLookupError as e:
            logger.warning("fleet lookup failed: %s", e)
            raise HTTPException(status_code=502, detail=f"Fleet lookup failed: {e}")
    return counts


@router.post("/allocation/validate")
async def validate_plan(req: AllocationPlanRequest, lookup: FleetLookup = Depends(get_fleet_lookup)) -> Dict[str, Any]:
    """
    Returns:
      {
        ok, state: accepted|rejected, status,
        violations: [{kind, detail, company_id, amount}, ...],
        summary: {progress, duration_days, daily_weight, total_trucks, transporters: [...]},
        fleet_availability: {...}, warnings: [...]
      }
    """
    site = collection_site(req.order, req.sites)
    fleet = await _fleet_counts(req, lookup)

    order = req.order.to_domain(req.allocations)
    companies = [c.to_domain() for c in req.companies]
    result = validate_allocations(order, order.allocations, companies, fleet, site)

    by_id = {c.id: c for c in companies}
    transporters = []
    warnings: List[str] = []
    for t in result.transporters:
        row = {
            "company_id": t.company_id,
            "allocated_weight": t.allocated_weight,
            "number_of_trucks": t.number_of_trucks,
            "available_trucks": t.available_trucks,
            "required_trucks": t.required_trucks,
            "capacity": t.capacity.as_dict() if t.capacity else None,
        }
        transporters.append(row)
        if t.capacity:
            w = closed_day_warning(t.capacity, by_id[t.company_id].label)
            if w and w not in warnings:
                warnings.append(w)

    try:
        log_event(validation_event(order.order_number, result))
    except OSError as e:
        logger.warning("could not write planning event: %s", e)

    return {
        "ok": result.ok,
        "state": "accepted" if result.ok else "rejected",
        "status": derive_status(order.allocations if result.ok else ()),
        "violations": [v.as_dict() for v in result.violations],
        "summary": {
            "progress": allocation_progress(order.total_weight, order.allocations),
            "duration_days": result.duration_days,
            "daily_weight": result.daily_weight,
            "total_trucks": result.total_trucks,
            "transporters": transporters,
        },
        "fleet_availability": fleet,
        "warnings": warnings,
    }

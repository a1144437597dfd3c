# services/allocation_validator.py
# Order allocation checks: per-transporter truck/fleet rules, then order-level ceilings.

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from services.calculator import CapacityBreakdown, order_duration_days, transporter_capacity
from services.models import Allocation, Company, Order, Site

logger = logging.getLogger(__name__)


class ViolationKind(str, Enum):
    MISSING_TRANSPORTER = "MissingTransporter"
    EMPTY_ALLOCATION = "EmptyAllocation"
    CAPACITY_UNAVAILABLE = "CapacityUnavailable"
    INSUFFICIENT_FLEET = "InsufficientFleet"
    BELOW_MINIMUM_TRUCKS = "BelowMinimumTrucks"
    EXCEEDS_FLEET = "ExceedsFleet"
    UNDER_ALLOCATED = "UnderAllocated"
    OVER_ALLOCATED = "OverAllocated"
    DAILY_WEIGHT_LIMIT_EXCEEDED = "DailyWeightLimitExceeded"
    DAILY_TRUCK_LIMIT_EXCEEDED = "DailyTruckLimitExceeded"


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    detail: str
    company_id: Optional[str] = None
    amount: Optional[float] = None

    def as_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "detail": self.detail,
            "company_id": self.company_id,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class TransporterCheck:
    """What the validator worked out for one allocation row."""
    company_id: str
    allocated_weight: float
    number_of_trucks: int
    available_trucks: int
    required_trucks: int
    capacity: Optional[CapacityBreakdown] = None


@dataclass(frozen=True)
class ValidationResult:
    violations: Tuple[Violation, ...] = ()
    transporters: Tuple[TransporterCheck, ...] = ()
    duration_days: int = 1
    total_allocated: float = 0.0
    daily_weight: float = 0.0
    total_trucks: int = 0

    @property
    def ok(self) -> bool:
        return not self.violations

    def kinds(self) -> List[ViolationKind]:
        return [v.kind for v in self.violations]


def _fmt(x: float) -> str:
    x = float(x)
    if x.is_integer():
        return str(int(x))
    return f"{x:.2f}"


def _company_map(companies: Union[Mapping[str, Company], Iterable[Company]]) -> Dict[str, Company]:
    if isinstance(companies, Mapping):
        return dict(companies)
    return {c.id: c for c in companies}


def _check_allocation(
    order: Order,
    alloc: Allocation,
    company: Optional[Company],
    available: int,
    site: Optional[Site],
    out: List[Violation],
) -> TransporterCheck:
    cid = alloc.company_id
    weight = float(alloc.allocated_weight)
    trucks = int(alloc.number_of_trucks)

    if not cid or company is None:
        out.append(Violation(
            ViolationKind.MISSING_TRANSPORTER,
            f"Select a transporter for the allocation of {_fmt(weight)} kg"
            + (f" (unknown company '{cid}')" if cid else ""),
            company_id=cid or None,
        ))
        return TransporterCheck(cid, weight, trucks, available, 0)

    name = company.label

    if weight <= 0:
        out.append(Violation(
            ViolationKind.EMPTY_ALLOCATION,
            f"{name}: allocated weight must be greater than 0",
            company_id=cid,
        ))

    cap = transporter_capacity(order, company, site)
    required = cap.minimum_trucks(weight) if weight > 0 else 0

    if weight > 0 and cap.capacity_per_truck <= 0:
        out.append(Violation(
            ViolationKind.CAPACITY_UNAVAILABLE,
            f"{name}: truck capacity is 0 (check weight per truck and trip settings), cannot allocate {_fmt(weight)} kg",
            company_id=cid,
        ))

    if required > available:
        out.append(Violation(
            ViolationKind.INSUFFICIENT_FLEET,
            f"{name} needs at least {required} trucks for {_fmt(weight)} kg but only {available} are available",
            company_id=cid,
            amount=float(required - available),
        ))

    if trucks < required:
        out.append(Violation(
            ViolationKind.BELOW_MINIMUM_TRUCKS,
            f"{name}: {trucks} trucks is below the minimum of {required} for {_fmt(weight)} kg",
            company_id=cid,
            amount=float(required - trucks),
        ))

    if trucks > available:
        out.append(Violation(
            ViolationKind.EXCEEDS_FLEET,
            f"{name}: {trucks} trucks requested but only {available} available",
            company_id=cid,
            amount=float(trucks - available),
        ))

    return TransporterCheck(cid, weight, trucks, available, required, cap)


def validate_allocations(
    order: Order,
    allocations: Sequence[Allocation],
    companies: Union[Mapping[str, Company], Iterable[Company]],
    fleet_availability: Mapping[str, int],
    site: Optional[Site] = None,
) -> ValidationResult:
    """
    Check a full allocation set against the order.

    Every allocation is checked in order and all of its problems are kept;
    order-level checks (coverage, daily weight, daily trucks) follow.
    No I/O: fleet counts are supplied by the caller, missing ones count as 0.
    """
    company_by_id = _company_map(companies)
    violations: List[Violation] = []
    checks: List[TransporterCheck] = []

    for alloc in allocations:
        available = int(fleet_availability.get(alloc.company_id, 0) or 0)
        company = company_by_id.get(alloc.company_id) if alloc.company_id else None
        checks.append(_check_allocation(order, alloc, company, available, site, violations))

    # ---- order level ----
    total = math.fsum(float(a.allocated_weight) for a in allocations)
    target = float(order.total_weight)
    if total < target:
        violations.append(Violation(
            ViolationKind.UNDER_ALLOCATED,
            f"Allocated {_fmt(total)} kg of {_fmt(target)} kg, {_fmt(target - total)} kg still unallocated",
            amount=target - total,
        ))
    elif total > target:
        violations.append(Violation(
            ViolationKind.OVER_ALLOCATED,
            f"Allocated {_fmt(total)} kg exceeds order total of {_fmt(target)} kg by {_fmt(total - target)} kg",
            amount=total - target,
        ))

    days = order_duration_days(order.dispatch_start_date, order.dispatch_end_date)
    daily_weight = math.fsum(float(a.allocated_weight) / days for a in allocations)
    if daily_weight > order.daily_weight_limit:
        over = daily_weight - order.daily_weight_limit
        violations.append(Violation(
            ViolationKind.DAILY_WEIGHT_LIMIT_EXCEEDED,
            f"Daily weight {_fmt(daily_weight)} kg over {days} days exceeds the limit of "
            f"{_fmt(order.daily_weight_limit)} kg by {_fmt(over)} kg/day",
            amount=over,
        ))

    total_trucks = sum(int(a.number_of_trucks) for a in allocations)
    if total_trucks > order.daily_truck_limit:
        over_trucks = total_trucks - order.daily_truck_limit
        violations.append(Violation(
            ViolationKind.DAILY_TRUCK_LIMIT_EXCEEDED,
            f"{total_trucks} trucks exceeds the daily truck limit of {order.daily_truck_limit} by {over_trucks}",
            amount=float(over_trucks),
        ))

    logger.info(
        "validated %d allocations for order %s: %s",
        len(allocations), order.order_number or "<new>",
        "ok" if not violations else ", ".join(v.kind.value for v in violations),
    )
    return ValidationResult(
        violations=tuple(violations),
        transporters=tuple(checks),
        duration_days=days,
        total_allocated=total,
        daily_weight=daily_weight,
        total_trucks=total_trucks,
    )


# ---------- Planning session ----------
@dataclass(frozen=True)
class PlanningSession:
    """
    Caller-held planning state. Each edit returns a new session with the
    validation re-run; nothing is mutated in place.
    """
    order: Order
    companies: Tuple[Company, ...]
    fleet_availability: Mapping[str, int] = field(default_factory=dict)
    site: Optional[Site] = None
    allocations: Tuple[Allocation, ...] = ()
    result: Optional[ValidationResult] = None

    @property
    def state(self) -> str:
        if self.result is None:
            return "editing"
        return "accepted" if self.result.ok else "rejected"

    def validate(self) -> "PlanningSession":
        res = validate_allocations(self.order, self.allocations, self.companies, self.fleet_availability, self.site)
        return replace(self, result=res)

    def add_transporter(self, company_id: str, fleet_count: Optional[int] = None) -> "PlanningSession":
        fleet = dict(self.fleet_availability)
        if fleet_count is not None:
            fleet[company_id] = fleet_count
        allocs = self.allocations + (Allocation(company_id=company_id),)
        return replace(self, allocations=allocs, fleet_availability=fleet).validate()

    def remove(self, index: int) -> "PlanningSession":
        allocs = tuple(a for i, a in enumerate(self.allocations) if i != index)
        return replace(self, allocations=allocs).validate()

    def set_weight(self, index: int, weight: float) -> "PlanningSession":
        return self._edit(index, allocated_weight=weight)

    def set_trucks(self, index: int, trucks: int) -> "PlanningSession":
        return self._edit(index, number_of_trucks=trucks)

    def _edit(self, index: int, **changes) -> "PlanningSession":
        allocs = list(self.allocations)
        allocs[index] = replace(allocs[index], **changes)
        return replace(self, allocations=tuple(allocs)).validate()

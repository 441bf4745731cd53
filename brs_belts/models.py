# brs_belts/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

DOMESTIC = "DOMESTIC"
CTA = "CTA"
INTERNATIONAL = "INTERNATIONAL"
FLOWS = (DOMESTIC, CTA, INTERNATIONAL)


class InvalidFlowKind(ValueError):
    """Raised for a flow outside DOMESTIC / CTA / INTERNATIONAL."""

    def __init__(self, flow, flight: str = ""):
        self.flow = flow
        self.flight = flight
        where = f" on flight {flight}" if flight else ""
        super().__init__(f"Unknown flow {flow!r}{where}; expected one of {', '.join(FLOWS)}")


@dataclass
class Flight:
    flight: str
    start: datetime  # belt-occupancy window, both ends inclusive
    end: datetime
    flow: str
    requested_belt: Optional[object] = None  # raw caller value, normalised by the allocator
    heavy: bool = False
    reason: str = ""
    assigned_belt: Optional[int] = None
    origin_iata: str = ""
    airline: str = ""
    pax_estimate: Optional[float] = None
    row_id: Optional[int] = None


@dataclass
class BeltSlot:
    start: datetime
    end: datetime
    flight: Flight


# belt id -> committed slots, sorted by start
BeltUsage = Dict[int, List[BeltSlot]]


@dataclass(frozen=True)
class BeltLayout:
    general_belts: Tuple[int, ...]
    domestic_belt: int
    cta_belt: int
    large_belt: Optional[int] = None
    disabled_belts: Tuple[int, ...] = ()

    def __post_init__(self):
        general = tuple(self.general_belts)
        if not general:
            raise ValueError("The general-purpose belt pool is empty")
        if len(set(general)) != len(general):
            raise ValueError(f"Duplicate belts in the general pool: {general}")
        if self.domestic_belt == self.cta_belt:
            raise ValueError(f"Domestic and CTA flows cannot share belt {self.domestic_belt}")
        reserved = {self.domestic_belt, self.cta_belt}
        shared = reserved.intersection(general)
        if shared:
            raise ValueError(f"Reserved belts {sorted(shared)} are also in the general pool")
        disabled = set(self.disabled_belts).intersection(set(general) | reserved)
        if disabled:
            raise ValueError(f"Disabled belts {sorted(disabled)} cannot be allocated")
        if self.large_belt is not None and self.large_belt not in general:
            raise ValueError(f"Large-capacity belt {self.large_belt} is not in the general pool {general}")
        object.__setattr__(self, "general_belts", general)

    def legal_belts(self, flow, flight: str = "") -> Tuple[int, ...]:
        if flow == DOMESTIC:
            return (self.domestic_belt,)
        if flow == CTA:
            return (self.cta_belt,)
        if flow == INTERNATIONAL:
            return self.general_belts
        raise InvalidFlowKind(flow, flight)


@dataclass
class AllocationResult:
    flights: List[Flight] = field(default_factory=list)
    forced_count: int = 0
    auto_assigned_count: int = 0

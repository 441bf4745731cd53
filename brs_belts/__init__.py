# brs_belts/__init__.py
from .allocator import allocate_belts, belt_candidates, conflicts, normalize_requested_belt
from .models import CTA, DOMESTIC, INTERNATIONAL, AllocationResult, Flight, InvalidFlowKind

__all__ = [
    "allocate_belts", "belt_candidates", "conflicts", "normalize_requested_belt",
    "AllocationResult", "Flight", "InvalidFlowKind", "DOMESTIC", "CTA", "INTERNATIONAL",
]

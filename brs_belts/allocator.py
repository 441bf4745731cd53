# brs_belts/allocator.py

from __future__ import annotations
import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import BRS_CONFIG
from .models import (
    CTA, DOMESTIC,
    AllocationResult, BeltLayout, BeltSlot, BeltUsage, Flight,
)

Interval = Tuple[datetime, datetime]

FORCED_REASON = "forced:earliest_clearing"
PRESET_REASON = "preset"


def conflicts(a: Interval, b: Interval, min_gap_minutes: float) -> bool:
    """True when two windows overlap or sit closer than ``min_gap_minutes``."""
    s1, e1 = a
    s2, e2 = b
    if s1 < e2 and s2 < e1:
        return True
    gap1 = abs((s2 - e1).total_seconds()) / 60
    gap2 = abs((s1 - e2).total_seconds()) / 60
    return min(gap1, gap2) < min_gap_minutes


def init_usage(layout: BeltLayout) -> BeltUsage:
    # reserved belts are not tracked
    return {belt: [] for belt in layout.general_belts}


def record_placement(flight: Flight, belt: int, usage: BeltUsage) -> None:
    flight.assigned_belt = belt
    if belt not in usage:
        return
    usage[belt].append(BeltSlot(flight.start, flight.end, flight))
    usage[belt].sort(key=lambda slot: slot.start)


def can_place_on_belt(flight: Flight, belt: int, usage: BeltUsage, min_gap_minutes: float) -> bool:
    for slot in usage.get(belt, []):
        if conflicts((flight.start, flight.end), (slot.start, slot.end), min_gap_minutes):
            return False
    return True


def belt_free_time(slots: Sequence[BeltSlot]) -> Optional[datetime]:
    """End of the most recently started slot, or None for an empty belt."""
    if not slots:
        return None
    return slots[-1].end


def pick_earliest_clearing_belt(candidates: Sequence[int], usage: BeltUsage) -> int:
    best_belt, best_end = None, None
    for belt in candidates:
        end = belt_free_time(usage.get(belt, []))
        if end is None:
            return belt
        if best_end is None or end < best_end:
            best_belt, best_end = belt, end
    return best_belt if best_belt is not None else candidates[0]


def belt_candidates(flight: Flight, layout: BeltLayout) -> List[int]:
    """Belts a flight may use, in the order they should be tried."""
    if flight.flow == DOMESTIC:
        return [layout.domestic_belt]
    if flight.flow == CTA:
        return [layout.cta_belt]
    pool = list(layout.legal_belts(flight.flow, flight.flight))
    if layout.large_belt is None:
        return pool
    rest = [b for b in pool if b != layout.large_belt]
    if flight.heavy:
        return [layout.large_belt] + rest
    return rest + [layout.large_belt]


def normalize_requested_belt(value, flow: str, layout: BeltLayout) -> Optional[int]:
    """Map a caller-supplied belt to a legal belt id, or None when it is unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or not number.is_integer():
        return None
    belt = int(number)
    return belt if belt in layout.legal_belts(flow) else None


def _fit_reason(flight: Flight, belt: int, layout: BeltLayout) -> str:
    if flight.flow == DOMESTIC:
        return "dom_pref"
    if flight.flow == CTA:
        return "cta_pref"
    if flight.heavy and belt == layout.large_belt:
        return "heavy_pref"
    return "spread"


def allocate_belts(
    flights: Iterable[Flight],
    general_belts: Sequence[int] = BRS_CONFIG["GENERAL_BELTS"],
    domestic_belt: int = BRS_CONFIG["DOMESTIC_BELT"],
    cta_belt: int = BRS_CONFIG["CTA_BELT"],
    large_belt: Optional[int] = BRS_CONFIG["LARGE_BELT"],
    disabled_belts: Sequence[int] = BRS_CONFIG["DISABLED_BELTS"],
    min_gap_minutes: float = BRS_CONFIG["MIN_GAP_MINUTES"],
    min_window_minutes: Optional[float] = None,
) -> AllocationResult:
    """Greedy single-pass belt allocator.
    - Valid pre-set belts are kept and only tracked as occupancy.
    - Otherwise the first conflict-free candidate belt wins.
    - If every candidate clashes, the flight is forced onto the earliest-clearing belt.
    Input flights are copied; the result lists them in input order.
    """
    layout = BeltLayout(
        general_belts=tuple(general_belts),
        domestic_belt=domestic_belt,
        cta_belt=cta_belt,
        large_belt=large_belt,
        disabled_belts=tuple(disabled_belts),
    )

    working = [replace(f) for f in flights]
    for f in working:
        layout.legal_belts(f.flow, f.flight)
        if min_window_minutes is not None and f.end - f.start < timedelta(minutes=min_window_minutes):
            f.end = f.start + timedelta(minutes=min_window_minutes)

    # sorted() is stable, so equal starts keep their input order
    order = sorted(range(len(working)), key=lambda i: working[i].start)
    usage = init_usage(layout)
    forced = 0
    auto_assigned = 0

    for i in order:
        f = working[i]
        preset = normalize_requested_belt(f.requested_belt, f.flow, layout)
        f.requested_belt = preset

        if preset is not None:
            record_placement(f, preset, usage)
            f.reason = f.reason or PRESET_REASON
            continue

        candidates = belt_candidates(f, layout)
        auto_assigned += 1
        for belt in candidates:
            if can_place_on_belt(f, belt, usage, min_gap_minutes):
                record_placement(f, belt, usage)
                f.reason = _fit_reason(f, belt, layout)
                break
        else:
            belt = pick_earliest_clearing_belt(candidates, usage)
            record_placement(f, belt, usage)
            f.reason = FORCED_REASON
            forced += 1
            logging.warning(
                "Flight %s (%s-%s) forced onto belt %d; no %s belt was clear",
                f.flight, f.start, f.end, belt, f.flow,
            )

    logging.info("Belt allocation: %d flights, %d auto-assigned, %d forced", len(working), auto_assigned, forced)
    return AllocationResult(flights=working, forced_count=forced, auto_assigned_count=auto_assigned)

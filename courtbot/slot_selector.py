from __future__ import annotations
from typing import List, Optional, Sequence

from .models import Slot


def parse_preferences(raw: str) -> List[str]:
    """Split a comma-separated preference string, keeping order and empty entries."""
    return [p.strip() for p in (raw or "").split(",")]


def available_slots(slots: Sequence[Slot]) -> List[Slot]:
    return [s for s in slots if s.available]


def select_best(
    slots: Sequence[Slot],
    preferred_times: Sequence[str],
    preferred_locations: Sequence[str],
) -> Optional[Slot]:
    """
    Pick the slot to reserve.

    Time preference dominates: the first preferred time with any available slot
    wins, and the location list only chooses among slots at that time (falling
    back to the first of them). With no time match, the first available slot is
    returned. Ties always go to input order.
    """
    available = available_slots(slots)
    if not available:
        return None

    for time_ in preferred_times:
        matching = [s for s in available if s.starttime == time_]
        if not matching:
            continue
        for location in preferred_locations:
            hit = next((s for s in matching if s.location == location), None)
            if hit is not None:
                return hit
        return matching[0]

    return available[0]

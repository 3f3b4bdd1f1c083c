"""
Order consistency checks for fixed arrival times.

After stops are reordered, inserted or removed, fixed arrival times may
no longer be in chronological order. ``check_order`` detects this from
the declared constraints alone (no routing), and ``auto_repair`` pushes
conflicting fixed times forward on request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from stopwise.models import Trip
from stopwise.timeutils import clock_time_to_minutes, minutes_to_clock_time

logger = logging.getLogger(__name__)

REPAIR_OFFSET_MINUTES = 30


@dataclass(frozen=True)
class OrderConflict:
    stop_index: int
    address: str
    fixed_arrival: int
    previous_time: int
    previous_label: str
    minimal_suggested_time: int

    @property
    def message(self) -> str:
        return (
            f"Fixed time of stop {self.stop_index + 1} ({self.address}, "
            f"{minutes_to_clock_time(self.fixed_arrival)}) must be after "
            f"{minutes_to_clock_time(self.previous_time)} ({self.previous_label}); "
            f"earliest possible is {minutes_to_clock_time(self.minimal_suggested_time)}."
        )


@dataclass(frozen=True)
class RepairChange:
    stop_index: int
    address: str
    old_fixed_arrival: str
    new_fixed_arrival: str


def check_order(trip: Trip) -> List[OrderConflict]:
    """Return the fixed-time conflicts of ``trip`` in its current order.

    Only fixed stops move the reference time forward; the arrival at other
    stops is unknown until the route is calculated. The declared fixed time
    is used even when it conflicts, so later conflicts are still reported.
    """
    previous_time = clock_time_to_minutes(trip.departure)
    previous_label = "departure"
    conflicts: List[OrderConflict] = []
    for index, stop in enumerate(trip.stops):
        if not stop.is_time_fixed:
            continue
        fixed = clock_time_to_minutes(stop.fixed_arrival)
        if fixed <= previous_time:
            conflicts.append(
                OrderConflict(
                    stop_index=index,
                    address=stop.address,
                    fixed_arrival=fixed,
                    previous_time=previous_time,
                    previous_label=previous_label,
                    minimal_suggested_time=previous_time + 1,
                )
            )
        previous_time = fixed + stop.break_minutes
        previous_label = stop.label
    if conflicts:
        logger.warning("%d order conflict(s) found", len(conflicts))
    return conflicts


def auto_repair(trip: Trip) -> List[RepairChange]:
    """Move conflicting fixed arrival times forward, in place.

    A conflicting stop gets ``previous time + 30 minutes``. Returns the
    changes made; an empty list means the order was already consistent.
    """
    previous_time = clock_time_to_minutes(trip.departure)
    changes: List[RepairChange] = []
    for index, stop in enumerate(trip.stops):
        if not stop.is_time_fixed:
            continue
        fixed = clock_time_to_minutes(stop.fixed_arrival)
        if fixed <= previous_time:
            fixed = previous_time + REPAIR_OFFSET_MINUTES
            new_time = minutes_to_clock_time(fixed)
            changes.append(RepairChange(index, stop.address, stop.fixed_arrival, new_time))
            logger.info("Stop %d (%s): fixed arrival %s -> %s", index + 1, stop.address, stop.fixed_arrival, new_time)
            stop.fixed_arrival = new_time
        previous_time = fixed + stop.break_minutes
    return changes

"""
Schedule calculation utilities for StopWise.

This module constructs a time‑based itinerary from a trip and its routed
legs. Times are accumulated in fractional minutes since midnight and only
rounded when rendered as ``HH:MM``. Fixed arrival times are honoured as
declared: when the calculated arrival is later than the fixed time, the
stop is flagged with a ``ScheduleConflict`` warning but the schedule is
still produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from stopwise.models import AggregatedRoute, Schedule, ScheduleEntry, Trip
from stopwise.timeutils import clock_time_to_minutes, minutes_to_clock_time, round_minutes

logger = logging.getLogger(__name__)


@dataclass
class ScheduleConflict:
    """A fixed arrival time earlier than the stop can be reached."""

    stop_index: int
    address: str
    fixed_arrival: str
    calculated_arrival: str
    late_minutes: int

    @property
    def message(self) -> str:
        return (
            f"Stop {self.stop_index + 1} ({self.address}): fixed arrival {self.fixed_arrival} "
            f"is not reachable, calculated arrival is {self.calculated_arrival}"
        )


def build_schedule(trip: Trip, route: AggregatedRoute) -> Schedule:
    """Generate the schedule for ``trip`` from its routed legs.

    Args:
        trip: The trip, with stops in visiting order.
        route: Output of ``routing.aggregate_route`` for ``trip.points()``.

    Returns:
        A ``Schedule`` with one start entry, one entry per stop and one
        end entry, plus totals and any conflict warnings.
    """
    legs = route.legs
    if len(legs) != len(trip.stops) + 1:
        raise ValueError(f"Expected {len(trip.stops) + 1} legs for {len(trip.stops)} stop(s), got {len(legs)}")

    departure = clock_time_to_minutes(trip.departure)
    current_time = float(departure)
    cumulative_km = 0.0
    warnings: List[ScheduleConflict] = []

    entries = [
        ScheduleEntry(kind="start", place=trip.start.address, departure=minutes_to_clock_time(current_time))
    ]

    for index, leg in enumerate(legs):
        calculated = current_time + leg.duration_minutes
        segment_km = leg.distance_km
        cumulative_km += segment_km

        if index == len(trip.stops):
            entries.append(
                ScheduleEntry(
                    kind="end",
                    place=trip.end.address,
                    calculated_arrival=minutes_to_clock_time(calculated),
                    actual_arrival=minutes_to_clock_time(calculated),
                    segment_distance_km=segment_km,
                    cumulative_distance_km=cumulative_km,
                )
            )
            current_time = calculated
            break

        stop = trip.stops[index]
        warning: Optional[ScheduleConflict] = None
        wait = 0
        if stop.is_time_fixed:
            fixed = clock_time_to_minutes(stop.fixed_arrival)
            if fixed <= calculated:
                warning = ScheduleConflict(
                    stop_index=index,
                    address=stop.address,
                    fixed_arrival=stop.fixed_arrival,
                    calculated_arrival=minutes_to_clock_time(calculated),
                    late_minutes=round_minutes(calculated) - fixed,
                )
                warnings.append(warning)
                logger.warning(warning.message)
            else:
                wait = fixed - round_minutes(calculated)
            arrival = float(fixed)
            kind = "fixed-stop"
        else:
            arrival = calculated
            kind = "stop"

        current_time = arrival + stop.break_minutes
        entries.append(
            ScheduleEntry(
                kind=kind,
                place=stop.address,
                calculated_arrival=minutes_to_clock_time(calculated),
                actual_arrival=minutes_to_clock_time(arrival),
                departure=minutes_to_clock_time(current_time),
                wait_minutes=wait,
                break_minutes=stop.break_minutes,
                segment_distance_km=segment_km,
                cumulative_distance_km=cumulative_km,
                warning=warning,
            )
        )

    return Schedule(
        entries=entries,
        total_distance_km=cumulative_km,
        total_trip_minutes=round_minutes(current_time) - departure,
        warnings=warnings,
        route=route,
    )

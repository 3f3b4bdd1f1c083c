"""
Pre-flight validation of a trip.

Runs before any network call and fails fast with the first problem
found. Stop positions in messages are 1-based for display.
"""

from __future__ import annotations

from stopwise.errors import ValidationError
from stopwise.models import Trip
from stopwise.timeutils import is_clock_time


def validate_trip(trip: Trip) -> None:
    """Raise ``ValidationError`` if ``trip`` is not ready for planning."""
    if not trip.start.address.strip():
        raise ValidationError("Please enter a start address.", field="start")
    if not trip.end.address.strip():
        raise ValidationError("Please enter a destination address.", field="end")
    if not (trip.departure or "").strip():
        raise ValidationError("Please enter a departure time.", field="departure")
    if not is_clock_time(trip.departure):
        raise ValidationError(
            f"Departure time {trip.departure!r} is not a valid HH:MM time.", field="departure"
        )

    for position, stop in enumerate(trip.stops, start=1):
        if not stop.address.strip():
            raise ValidationError(
                f"Please enter an address for stop {position}.", field="address", stop_position=position
            )
        if stop.break_minutes < 0:
            raise ValidationError(
                f"The break at stop {position} must not be negative.",
                field="break_minutes",
                stop_position=position,
            )
        if stop.is_time_fixed:
            if not (stop.fixed_arrival or "").strip():
                raise ValidationError(
                    f"Please enter the fixed arrival time for stop {position}.",
                    field="fixed_arrival",
                    stop_position=position,
                )
            if not is_clock_time(stop.fixed_arrival):
                raise ValidationError(
                    f"Fixed arrival time {stop.fixed_arrival!r} at stop {position} is not a valid HH:MM time.",
                    field="fixed_arrival",
                    stop_position=position,
                )

"""Read-only renderings of a schedule for tables and text export."""

from __future__ import annotations

from typing import Dict, List

from stopwise.models import Schedule, ScheduleEntry
from stopwise.timeutils import format_duration

KIND_LABELS = {
    "start": "Start",
    "stop": "Stop",
    "fixed-stop": "Stop (fixed)",
    "end": "Destination",
}


def _km(value: float) -> str:
    return f"{value:.1f} km" if value > 0 else "-"


def _status(entry: ScheduleEntry) -> str:
    if entry.warning is not None:
        return "not reachable in time"
    return "ok"


def schedule_rows(schedule: Schedule) -> List[Dict[str, str]]:
    """Return one display row per schedule entry."""
    rows = []
    for entry in schedule.entries:
        rows.append(
            {
                "Type": KIND_LABELS[entry.kind],
                "Place": entry.place,
                "Arrival": entry.actual_arrival or "-",
                "Departure": entry.departure or "-",
                "Wait": format_duration(entry.wait_minutes) if entry.wait_minutes else "-",
                "Break": format_duration(entry.break_minutes) if entry.break_minutes else "-",
                "Segment": _km(entry.segment_distance_km),
                "Total": _km(entry.cumulative_distance_km),
                "Status": _status(entry),
            }
        )
    return rows


def format_schedule_text(schedule: Schedule) -> str:
    """Format the itinerary as plain text for copying or printing."""
    lines = [
        "TRIP PLAN",
        "",
        f"Total distance: {schedule.total_distance_km:.1f} km",
        f"Total time: {format_duration(schedule.total_trip_minutes)}",
        "",
        "-" * 50,
        "",
    ]
    for entry in schedule.entries:
        lines.append(f"* {entry.place}")
        if entry.actual_arrival:
            lines.append(f"   Arrival: {entry.actual_arrival}")
        if entry.wait_minutes:
            lines.append(f"   Wait: {format_duration(entry.wait_minutes)}")
        if entry.departure:
            lines.append(f"   Departure: {entry.departure}")
        if entry.segment_distance_km > 0:
            lines.append(f"   Segment: {entry.segment_distance_km:.1f} km")
        if entry.warning is not None:
            lines.append(f"   Warning: {entry.warning.message}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"

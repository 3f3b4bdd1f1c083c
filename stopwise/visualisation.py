"""
Map visualisation utilities for StopWise.

This module provides a helper function to build an interactive map
using the Folium library. It renders colour-coded, numbered markers for
the start, each stop and the destination, and draws the routed geometry
as a polyline. The map can be embedded directly in a Streamlit app via
``streamlit_folium``.
"""

from __future__ import annotations

from typing import List, Tuple

import folium

from stopwise.models import Point, Schedule

MARKER_COLOURS = {
    "start": "#00b074",
    "stop": "#2c7be5",
    "fixed-stop": "#fd7e14",
    "end": "#e63757",
}


def _marker_icon(colour: str, text: str) -> folium.DivIcon:
    return folium.DivIcon(
        html=(
            f"<div style='font-size: 12px; color: white; background-color: {colour}; "
            "border-radius: 50%; width: 24px; height: 24px; text-align: center; "
            f"line-height: 24px; box-shadow: 0 2px 6px rgba(0,0,0,0.3);'>{text}</div>"
        ),
        icon_size=(24, 24),
        icon_anchor=(12, 12),
    )


def route_points(schedule: Schedule) -> List[Point]:
    """Return the routed points ``[start, *stops, end]`` of ``schedule``."""
    route = schedule.route
    if route is None or not route.legs:
        return []
    return [route.legs[0].origin] + [leg.destination for leg in route.legs]


def create_folium_map(schedule: Schedule) -> folium.Map:
    """Create a Folium map with markers for every point and the route polyline.

    Args:
        schedule: Planned schedule; its ``route`` supplies the points and
            the geometry.

    Returns:
        A Folium Map object ready for display.
    """
    points = route_points(schedule)
    coords: List[Tuple[float, float]] = [p.coordinates.as_tuple() for p in points if p.coordinates is not None]
    if not coords:
        return folium.Map(location=[0, 0], zoom_start=2)
    avg_lat = sum(lat for lat, _ in coords) / len(coords)
    avg_lon = sum(lon for _, lon in coords) / len(coords)
    m = folium.Map(location=[avg_lat, avg_lon], zoom_start=12, tiles="OpenStreetMap")

    for position, (point, entry) in enumerate(zip(points, schedule.entries)):
        if point.coordinates is None:
            continue
        if entry.kind == "start":
            text, title = "S", "Start"
        elif entry.kind == "end":
            text, title = "E", "Destination"
        else:
            text, title = str(position), f"Stop {position}"
        popup = f"<strong>{title}:</strong><br>{point.address}"
        if entry.actual_arrival:
            popup += f"<br>Arrival {entry.actual_arrival}"
        folium.Marker(
            location=list(point.coordinates.as_tuple()),
            popup=folium.Popup(popup, parse_html=False),
            icon=_marker_icon(MARKER_COLOURS[entry.kind], text),
        ).add_to(m)

    line = schedule.route.combined_geometry or coords
    folium.PolyLine([[lat, lon] for lat, lon in line], color="#2c7be5", weight=5, opacity=0.7).add_to(m)
    m.fit_bounds([[min(c[0] for c in coords), min(c[1] for c in coords)],
                  [max(c[0] for c in coords), max(c[1] for c in coords)]], padding=(50, 50))
    return m

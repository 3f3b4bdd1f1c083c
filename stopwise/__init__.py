"""
StopWise package initialization.

This package provides the core functionality for the StopWise trip
planner: a multi-stop driving itinerary with fixed arrival times and
breaks at each stop.

Modules:
    timeutils     – Clock time / minutes conversions and duration formatting.
    models        – Trip, stop, leg and schedule data types.
    validation    – Pre-flight checks on the trip input.
    ordering      – Order consistency checks and repair for fixed times.
    geocode       – Functions to geocode addresses using Nominatim.
    routing       – Per-leg routing via OSRM and route aggregation.
    schedule      – Schedule generation from routed legs and stop constraints.
    planner       – End-to-end planning of one trip.
    export        – Table rows and plain-text itinerary.
    visualisation – Folium based map creation utilities.
"""

__all__ = [
    "timeutils",
    "models",
    "validation",
    "ordering",
    "geocode",
    "routing",
    "schedule",
    "planner",
    "export",
    "visualisation",
]

"""
Streamlit application for StopWise trip planning.

This script defines the user interface and orchestrates the underlying
modules to validate the trip, check the order of fixed arrival times,
geocode addresses, route every leg, build the schedule and display it
as a table, an interactive map and a plain-text itinerary.

To run this app locally for development, install the package and execute:

    streamlit run stopwise/app.py

Routing and geocoding settings are read from the environment (or a
``.env`` file), see ``stopwise.config``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Tuple

import streamlit as st
from streamlit_folium import folium_static

# `streamlit run stopwise/app.py` executes this file as a script, so make
# the parent directory importable when the package is not installed.
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.append(parent_dir)

from stopwise.config import get_log_level
from stopwise.errors import GeocodeError, OrderConflictError, PlannerError, RoutingError, ValidationError
from stopwise.export import format_schedule_text, schedule_rows
from stopwise.models import Point, Stop, Trip
from stopwise.ordering import auto_repair, check_order
from stopwise.planner import plan_trip
from stopwise.timeutils import current_clock_time, format_duration
from stopwise.visualisation import create_folium_map

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_BREAK_MINUTES = 30


def init_state() -> None:
    if "stop_ids" not in st.session_state:
        st.session_state["stop_ids"] = []
        st.session_state["next_stop_id"] = 0
    if "departure" not in st.session_state:
        st.session_state["departure"] = current_clock_time()


def build_trip() -> Tuple[Trip, List[int]]:
    """Build a fresh ``Trip`` from the current widget values.

    Returns the trip and the widget ids of its stops, in the same order.
    """
    state = st.session_state
    ids = list(state["stop_ids"])
    stops = []
    for stop_id in ids:
        fixed = bool(state.get(f"fixed_{stop_id}", False))
        stops.append(
            Stop(
                address=state.get(f"addr_{stop_id}", "").strip(),
                is_time_fixed=fixed,
                fixed_arrival=(state.get(f"time_{stop_id}", "").strip() or None) if fixed else None,
                break_minutes=int(state.get(f"break_{stop_id}", DEFAULT_BREAK_MINUTES)),
            )
        )
    trip = Trip(
        start=Point(state.get("start", "").strip()),
        end=Point(state.get("end", "").strip()),
        departure=state.get("departure", "").strip(),
        stops=stops,
    )
    return trip, ids


def add_stop() -> None:
    stop_id = st.session_state["next_stop_id"]
    st.session_state["next_stop_id"] = stop_id + 1
    st.session_state["stop_ids"].append(stop_id)
    st.session_state[f"break_{stop_id}"] = DEFAULT_BREAK_MINUTES


def remove_stop(index: int) -> None:
    trip, ids = build_trip()
    trip.remove_stop(index)
    ids.pop(index)
    st.session_state["stop_ids"] = ids


def move_stop(index: int, new_index: int) -> None:
    trip, ids = build_trip()
    trip.move_stop(index, new_index)
    ids.insert(new_index, ids.pop(index))
    st.session_state["stop_ids"] = ids


def repair_order() -> None:
    trip, ids = build_trip()
    for change in auto_repair(trip):
        st.session_state[f"time_{ids[change.stop_index]}"] = change.new_fixed_arrival
    st.session_state["repaired"] = True


def reset() -> None:
    for key in list(st.session_state.keys()):
        del st.session_state[key]


def render_stop(index: int, stop_id: int, count: int) -> None:
    with st.expander(f"Stop {index + 1}", expanded=True):
        st.text_input("Address", key=f"addr_{stop_id}")
        col_fixed, col_time, col_break = st.columns(3)
        with col_fixed:
            fixed = st.checkbox("Fixed arrival time", key=f"fixed_{stop_id}")
        with col_time:
            st.text_input("Arrival (HH:MM)", key=f"time_{stop_id}", disabled=not fixed)
        with col_break:
            st.number_input("Break (minutes)", min_value=0, step=5, key=f"break_{stop_id}")
        col_up, col_down, col_remove = st.columns(3)
        with col_up:
            st.button("Move up", key=f"up_{stop_id}", disabled=index == 0,
                      on_click=move_stop, args=(index, index - 1))
        with col_down:
            st.button("Move down", key=f"down_{stop_id}", disabled=index == count - 1,
                      on_click=move_stop, args=(index, index + 1))
        with col_remove:
            st.button("Remove", key=f"remove_{stop_id}", on_click=remove_stop, args=(index,))


def render_schedule(schedule) -> None:
    col_dist, col_time = st.columns(2)
    col_dist.metric("Total distance", f"{schedule.total_distance_km:.1f} km")
    col_time.metric("Total time", format_duration(schedule.total_trip_minutes))
    for warning in schedule.warnings:
        st.warning(warning.message)
    st.table(schedule_rows(schedule))
    folium_static(create_folium_map(schedule), width=700, height=500)
    st.text_area("Itinerary", format_schedule_text(schedule), height=300)


def main():
    st.set_page_config(page_title="StopWise", layout="wide")
    st.title("StopWise trip planner")
    init_state()

    st.subheader("Trip")
    st.text_input("Start", key="start")
    st.text_input("Destination", key="end")
    st.text_input("Departure (HH:MM)", key="departure")

    st.subheader("Stops")
    ids = st.session_state["stop_ids"]
    for index, stop_id in enumerate(ids):
        render_stop(index, stop_id, len(ids))
    col_add, col_reset = st.columns(2)
    col_add.button("Add stop", on_click=add_stop)
    col_reset.button("Reset", on_click=reset)

    trip, _ = build_trip()
    if st.session_state.pop("repaired", False):
        st.success("Fixed arrival times were moved forward. Check them and plan the route again.")

    allow_conflicts = False
    try:
        conflicts = check_order(trip)
    except ValueError:
        # malformed times are reported by validation when planning
        conflicts = []
    if conflicts:
        for conflict in conflicts:
            st.warning(conflict.message)
        col_repair, col_proceed = st.columns(2)
        col_repair.button("Fix times automatically", on_click=repair_order)
        allow_conflicts = col_proceed.checkbox("Plan anyway")

    if st.button("Plan route", type="primary"):
        with st.spinner("Calculating route and schedule…"):
            try:
                schedule = plan_trip(trip, allow_order_conflicts=allow_conflicts)
            except ValidationError as exc:
                st.error(str(exc))
                st.stop()
            except OrderConflictError:
                st.error("Fixed arrival times are out of order. Fix them or choose to plan anyway.")
                st.stop()
            except (GeocodeError, RoutingError) as exc:
                logger.error("Planning failed: %s", exc)
                st.error(str(exc))
                st.stop()
            except PlannerError as exc:
                logger.error("Planning failed: %s", exc)
                st.error(str(exc))
                st.stop()
        st.success("Route planned.")
        render_schedule(schedule)


if __name__ == "__main__":
    main()

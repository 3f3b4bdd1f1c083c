"""
Plan a trip end to end.

Input checks run first so that no network call is made for a trip that
cannot be planned. Geocoding and routing failures abort the whole plan.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from stopwise.config import get_max_parallel_legs, get_routing_provider
from stopwise.errors import OrderConflictError
from stopwise.geocode import Geocoder, resolve_coordinates
from stopwise.models import Schedule, Trip
from stopwise.ordering import check_order
from stopwise.routing import LegFetcher, aggregate_route, get_leg_fetcher
from stopwise.schedule import build_schedule
from stopwise.validation import validate_trip

logger = logging.getLogger(__name__)


def plan_trip(
    trip: Trip,
    geocoder: Optional[Geocoder] = None,
    leg_fetcher: Optional[LegFetcher] = None,
    allow_order_conflicts: bool = False,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Schedule:
    """Validate, route and schedule ``trip``.

    Args:
        trip: The trip as entered by the user.
        geocoder: Address resolver, defaults to Nominatim.
        leg_fetcher: Leg router, defaults to the configured provider.
        allow_order_conflicts: Plan even if fixed times are out of order.
        max_workers: Concurrent leg requests, defaults to configuration.
        cancel_event: Cancels routing between legs when set.

    Raises:
        ValidationError, OrderConflictError: before any network call.
        GeocodeError, RoutingError: when a collaborator fails.
    """
    validate_trip(trip)
    conflicts = check_order(trip)
    if conflicts and not allow_order_conflicts:
        raise OrderConflictError(conflicts)

    leg_fetcher = leg_fetcher or get_leg_fetcher(get_routing_provider())
    max_workers = max_workers or get_max_parallel_legs()

    logger.info("Planning trip %s -> %s with %d stop(s)", trip.start.address, trip.end.address, len(trip.stops))
    resolved = resolve_coordinates(trip, geocoder)
    route = aggregate_route(resolved.points(), leg_fetcher, max_workers=max_workers, cancel_event=cancel_event)
    schedule = build_schedule(resolved, route)
    logger.info(
        "Planned %.1f km in %d min with %d warning(s)",
        schedule.total_distance_km,
        schedule.total_trip_minutes,
        len(schedule.warnings),
    )
    return schedule

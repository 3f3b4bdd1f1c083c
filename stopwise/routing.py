"""
Routing utilities for StopWise.

This module wraps network calls to OSRM (Open Source Routing Machine)
to route a single leg between two coordinates, and aggregates the legs
of a whole trip. A Haversine estimate with a constant average speed is
available as an explicit offline provider; it is never used as a silent
fallback when OSRM fails.

Example usage:

    legs = aggregate_route(trip.points(), fetch_osrm_leg)

A leg fetcher is any callable ``fetch_leg(origin, destination)`` taking
two ``Coordinates`` and returning a dict with ``distance_meters``,
``duration_seconds`` and ``geometry`` (a list of (lat, lon) pairs).
"""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import requests

from stopwise.config import get_osrm_config
from stopwise.errors import NotFoundError, PlanCancelled, ProviderError, RoutingError
from stopwise.models import AggregatedRoute, Coordinates, Leg, Point

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
# Straight-line distance underestimates road distance.
ROAD_DISTANCE_FACTOR = 1.3
DEFAULT_SPEED_KMH = 60.0

LegFetcher = Callable[[Coordinates, Coordinates], Dict]


def haversine_distance(coord1: Tuple[float, float], coord2: Tuple[float, float]) -> float:
    """Compute the great‑circle distance between two coordinates in kilometers."""
    lat1, lon1 = coord1
    lat2, lon2 = coord2
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def estimate_haversine_leg(
    origin: Coordinates, destination: Coordinates, speed_kmh: float = DEFAULT_SPEED_KMH
) -> Dict:
    """Estimate a leg from the great-circle distance at a constant speed.

    This is a degraded mode for offline use. The geometry is a straight
    line between the two points.
    """
    distance_km = haversine_distance(origin.as_tuple(), destination.as_tuple()) * ROAD_DISTANCE_FACTOR
    return {
        "distance_meters": distance_km * 1000.0,
        "duration_seconds": distance_km / speed_kmh * 3600.0,
        "geometry": [origin.as_tuple(), destination.as_tuple()],
    }


def fetch_osrm_leg(
    origin: Coordinates,
    destination: Coordinates,
    base_url: Optional[str] = None,
    profile: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Dict:
    """Call the OSRM route service for a single leg.

    Args:
        origin: Start of the leg.
        destination: End of the leg.
        base_url: OSRM server, defaults to the configured one.
        profile: OSRM profile, defaults to the configured one ('driving').
        timeout: Request timeout in seconds.

    Returns:
        A dict with ``distance_meters``, ``duration_seconds`` and
        ``geometry`` as a list of (lat, lon) pairs.

    Raises:
        NotFoundError: if OSRM finds no route between the points.
        ProviderError: on network errors, timeouts or malformed responses.
    """
    cfg = get_osrm_config()
    base_url = base_url or cfg["base_url"]
    profile = profile or cfg["profile"]
    timeout = timeout if timeout is not None else cfg["timeout"]
    # OSRM expects lon,lat order and semicolon separated list
    locs = ";".join(f"{c.longitude},{c.latitude}" for c in (origin, destination))
    url = f"{base_url}/route/v1/{profile}/{locs}"
    params = {"overview": "full", "geometries": "geojson"}
    try:
        resp = requests.get(url, params=params, timeout=timeout)
    except requests.Timeout as exc:
        raise ProviderError(f"routing request timed out after {timeout:g} s") from exc
    except requests.RequestException as exc:
        raise ProviderError(f"routing request failed: {exc}") from exc

    try:
        data = resp.json()
    except ValueError:
        data = {}
    code = data.get("code")
    if code in ("NoRoute", "NoSegment"):
        raise NotFoundError(data.get("message") or f"OSRM returned {code}")
    if resp.status_code != 200 or code != "Ok":
        raise ProviderError(f"OSRM error (HTTP {resp.status_code}, code {code})")

    routes = data.get("routes") or []
    if not routes:
        raise NotFoundError("OSRM returned no routes")
    route = routes[0]
    coordinates = (route.get("geometry") or {}).get("coordinates") or []
    return {
        "distance_meters": route.get("distance"),
        "duration_seconds": route.get("duration"),
        "geometry": [(lat, lon) for lon, lat in coordinates],
    }


def get_leg_fetcher(provider: str) -> LegFetcher:
    """Return the leg fetcher for ``provider`` ('osrm' or 'haversine')."""
    if provider == "osrm":
        return fetch_osrm_leg
    if provider == "haversine":
        return estimate_haversine_leg
    raise ValueError(f"Unknown routing provider: {provider!r}")


def _fetch_leg(fetch_leg: LegFetcher, index: int, origin: Point, destination: Point) -> Leg:
    """Fetch leg ``index`` (0-based) and convert failures into ``RoutingError``."""
    leg_number = index + 1
    if origin.coordinates is None or destination.coordinates is None:
        raise RoutingError(leg_number, origin.address, destination.address, "missing coordinates")
    try:
        result = fetch_leg(origin.coordinates, destination.coordinates)
    except ProviderError as exc:
        logger.error("Leg %d (%s -> %s) failed: %s", leg_number, origin.address, destination.address, exc)
        raise RoutingError(leg_number, origin.address, destination.address, str(exc)) from exc

    distance = result.get("distance_meters")
    duration = result.get("duration_seconds")
    if distance is None or duration is None or (not distance and not duration):
        logger.error("Leg %d (%s -> %s) returned no distance/duration", leg_number, origin.address, destination.address)
        raise RoutingError(leg_number, origin.address, destination.address, "no distance or duration returned")
    return Leg(
        origin=origin,
        destination=destination,
        distance_meters=float(distance),
        duration_seconds=float(duration),
        geometry=list(result.get("geometry") or []),
    )


def aggregate_route(
    points: Sequence[Point],
    fetch_leg: LegFetcher,
    max_workers: int = 1,
    cancel_event: Optional[threading.Event] = None,
) -> AggregatedRoute:
    """Route every consecutive pair of ``points`` and combine the legs.

    Legs are fetched one after another by default. With ``max_workers``
    greater than one they are fetched concurrently; the resulting legs
    are always in trip order. Any failing leg aborts the whole route.

    Args:
        points: ``[start, *stops, end]``; at least two points.
        fetch_leg: Leg fetcher, see module docstring.
        max_workers: Number of concurrent leg requests.
        cancel_event: When set, aborts the run before the next leg.

    Raises:
        RoutingError: naming the 1-based index of the failing leg.
        PlanCancelled: if ``cancel_event`` was set.
    """
    if len(points) < 2:
        raise ValueError("At least two points are required to build a route.")
    pairs = list(zip(points[:-1], points[1:]))
    logger.info("Routing %d leg(s)", len(pairs))

    def check_cancelled() -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise PlanCancelled("Route calculation was cancelled.")

    legs: List[Leg]
    if max_workers <= 1 or len(pairs) == 1:
        legs = []
        for index, (origin, destination) in enumerate(pairs):
            check_cancelled()
            legs.append(_fetch_leg(fetch_leg, index, origin, destination))
    else:
        def run(index: int) -> Leg:
            check_cancelled()
            return _fetch_leg(fetch_leg, index, *pairs[index])

        with ThreadPoolExecutor(max_workers=min(max_workers, len(pairs))) as executor:
            futures = [executor.submit(run, index) for index in range(len(pairs))]
            # Results are collected in submission order, so the first
            # exception raised here belongs to the lowest failing leg.
            legs = [future.result() for future in futures]

    combined: List[Tuple[float, float]] = []
    for leg in legs:
        combined.extend(leg.geometry)
    route = AggregatedRoute(
        legs=legs,
        total_distance_meters=sum(leg.distance_meters for leg in legs),
        total_duration_seconds=sum(leg.duration_seconds for leg in legs),
        combined_geometry=combined,
    )
    logger.info(
        "Route: %.1f km, %.0f min", route.total_distance_meters / 1000.0, route.total_duration_seconds / 60.0
    )
    return route

"""
Geocoding utilities for StopWise.

This module provides a thin wrapper around the `geopy` library to
convert free‑form addresses into geographic coordinates. It uses
OpenStreetMap's Nominatim service via geopy's API. A small cache is
maintained in memory to avoid repeated queries for the same address.

Example usage:

    from stopwise.geocode import geocode_address
    coords = geocode_address("Václavské náměstí, Praha")

``geocode_address`` raises ``GeocodeError`` if the address cannot be
resolved. Retrying is left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache
from typing import Callable, Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.geocoders import Nominatim

from stopwise.config import get_geocoder_config
from stopwise.errors import GeocodeError, ProviderError
from stopwise.models import Coordinates, Point, Trip

logger = logging.getLogger(__name__)

Geocoder = Callable[[str], Coordinates]

_geocoder: Optional[Nominatim] = None


def _get_geocoder() -> Nominatim:
    """Return a singleton Nominatim geocoder instance."""
    global _geocoder
    if _geocoder is None:
        cfg = get_geocoder_config()
        # Nominatim's usage policy requires a custom user agent.
        _geocoder = Nominatim(user_agent=cfg["user_agent"], timeout=cfg["timeout"])
    return _geocoder


@lru_cache(maxsize=128)
def geocode_address(address: str) -> Coordinates:
    """Geocode an address and return its ``Coordinates``.

    Results are cached in memory. Failed lookups raise and are therefore
    not cached.

    Args:
        address: Free form text to geocode.

    Raises:
        GeocodeError: if the address is unknown or the service fails.
    """
    geocoder = _get_geocoder()
    try:
        location = geocoder.geocode(address)
    except GeocoderTimedOut:
        logger.error("Geocoding timed out for %r", address)
        raise GeocodeError(address, "the geocoding service timed out") from None
    except GeocoderServiceError as exc:
        logger.error("Geocoding service error for %r: %s", address, exc)
        raise GeocodeError(address, f"geocoding service error: {exc}") from exc
    if location is None:
        logger.warning("No geocoding result for %r", address)
        raise GeocodeError(address, "address not found")
    logger.debug("Geocoded %r to %s, %s", address, location.latitude, location.longitude)
    return Coordinates(location.latitude, location.longitude)


def _resolve_point(point: Point, geocoder: Geocoder) -> Point:
    if point.coordinates is not None:
        return point
    try:
        coordinates = geocoder(point.address)
    except ProviderError as exc:
        logger.error("Geocoding %r failed: %s", point.address, exc)
        raise GeocodeError(point.address, str(exc)) from exc
    return point.with_coordinates(coordinates)


def resolve_coordinates(trip: Trip, geocoder: Optional[Geocoder] = None) -> Trip:
    """Return a copy of ``trip`` in which every point carries coordinates.

    Points that already have coordinates (e.g. picked from a suggestion
    list) are not geocoded again.
    """
    geocoder = geocoder or geocode_address
    return replace(
        trip,
        start=_resolve_point(trip.start, geocoder),
        end=_resolve_point(trip.end, geocoder),
        stops=[_resolve_point(stop, geocoder) for stop in trip.stops],
    )

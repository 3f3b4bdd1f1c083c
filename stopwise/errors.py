"""
Exceptions raised by the StopWise planner.

Input problems (``ValidationError``, ``OrderConflictError``) are raised
before any network call. Collaborator failures surface as
``GeocodeError`` or ``RoutingError`` and abort the whole plan.
"""

from __future__ import annotations

from typing import Optional


class PlannerError(Exception):
    """Base class for all planner errors."""


class ValidationError(PlannerError):
    """A required field is missing or a constraint is invalid."""

    def __init__(self, message: str, field: str, stop_position: Optional[int] = None):
        super().__init__(message)
        self.field = field
        # 1-based, for display; None for trip-level fields
        self.stop_position = stop_position


class ProviderError(PlannerError):
    """The external geocoding or routing service failed."""


class NotFoundError(ProviderError):
    """The external service answered but found nothing."""


class GeocodeError(PlannerError):
    """An address could not be resolved to coordinates."""

    def __init__(self, address: str, reason: str = ""):
        message = f"Could not geocode address {address!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.address = address
        self.reason = reason


class RoutingError(PlannerError):
    """A single leg of the trip could not be routed."""

    def __init__(self, leg_index: int, origin_address: str, destination_address: str, reason: str = ""):
        message = f"Leg {leg_index} ({origin_address} -> {destination_address}) could not be routed"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.leg_index = leg_index
        self.origin_address = origin_address
        self.destination_address = destination_address
        self.reason = reason


class OrderConflictError(PlannerError):
    """Fixed arrival times are out of chronological order."""

    def __init__(self, conflicts):
        super().__init__(f"{len(conflicts)} fixed arrival time(s) conflict with the stop order")
        self.conflicts = list(conflicts)


class PlanCancelled(PlannerError):
    """The plan computation was cancelled between legs."""

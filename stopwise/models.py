"""
Data model for StopWise.

A ``Trip`` is built fresh from user input for every plan request. Routing
produces one ``Leg`` per consecutive pair of points, and the schedule
builder turns those legs into ``ScheduleEntry`` rows. Entries and the
``Schedule`` are read-only data for presentation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    @classmethod
    def parse(cls, value: str) -> "Coordinates":
        """Parse a ``"lat,lon"`` string."""
        try:
            lat_str, lon_str = value.split(",")
            return cls(float(lat_str), float(lon_str))
        except ValueError:
            raise ValueError(f"Invalid coordinates: {value!r}") from None

    def to_param(self) -> str:
        """Serialise as ``"lat,lon"``."""
        return f"{self.latitude},{self.longitude}"

    def as_tuple(self) -> Tuple[float, float]:
        return self.latitude, self.longitude


@dataclass
class Point:
    address: str
    coordinates: Optional[Coordinates] = None

    def with_coordinates(self, coordinates: Coordinates) -> "Point":
        """Return a copy of this point carrying ``coordinates``."""
        return replace(self, coordinates=coordinates)


@dataclass
class Stop(Point):
    is_time_fixed: bool = False
    fixed_arrival: Optional[str] = None  # "HH:MM"
    break_minutes: int = 0
    order: int = 0

    @property
    def label(self) -> str:
        return f"stop {self.order + 1} ({self.address})"


@dataclass
class Trip:
    start: Point
    end: Point
    departure: str  # "HH:MM"
    stops: List[Stop] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._renumber()

    def _renumber(self) -> None:
        for index, stop in enumerate(self.stops):
            stop.order = index

    def points(self) -> List[Point]:
        """Return ``[start, *stops, end]`` in visiting order."""
        return [self.start, *self.stops, self.end]

    def add_stop(self, stop: Stop, position: Optional[int] = None) -> Stop:
        """Insert ``stop`` at ``position`` (appended when ``None``)."""
        if position is None:
            self.stops.append(stop)
        else:
            self.stops.insert(position, stop)
        self._renumber()
        return stop

    def remove_stop(self, index: int) -> Stop:
        stop = self.stops.pop(index)
        self._renumber()
        return stop

    def move_stop(self, old_index: int, new_index: int) -> None:
        """Move the stop at ``old_index`` so that it ends up at ``new_index``."""
        if not 0 <= new_index < len(self.stops):
            raise IndexError(f"Stop position {new_index} out of range")
        stop = self.stops.pop(old_index)
        self.stops.insert(new_index, stop)
        self._renumber()


@dataclass
class Leg:
    origin: Point
    destination: Point
    distance_meters: float
    duration_seconds: float
    geometry: List[Tuple[float, float]] = field(default_factory=list)

    @property
    def distance_km(self) -> float:
        return self.distance_meters / 1000.0

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60.0


@dataclass
class AggregatedRoute:
    legs: List[Leg]
    total_distance_meters: float
    total_duration_seconds: float
    combined_geometry: List[Tuple[float, float]]


@dataclass
class ScheduleEntry:
    kind: str  # "start", "stop", "fixed-stop" or "end"
    place: str
    calculated_arrival: Optional[str] = None
    actual_arrival: Optional[str] = None
    departure: Optional[str] = None
    wait_minutes: int = 0
    break_minutes: int = 0
    segment_distance_km: float = 0.0
    cumulative_distance_km: float = 0.0
    warning: Optional[object] = None  # schedule.ScheduleConflict


@dataclass
class Schedule:
    entries: List[ScheduleEntry]
    total_distance_km: float
    total_trip_minutes: int
    warnings: list = field(default_factory=list)
    route: Optional[AggregatedRoute] = None

import threading
import unittest

from stopwise.errors import (
    GeocodeError,
    NotFoundError,
    OrderConflictError,
    PlanCancelled,
    PlannerError,
    ProviderError,
    RoutingError,
    ValidationError,
)
from stopwise.models import Coordinates, Point, Stop, Trip
from stopwise.planner import plan_trip

PLACES = {
    "Praha": Coordinates(50.0755, 14.4378),
    "Jihlava": Coordinates(49.3961, 15.5912),
    "Humpolec": Coordinates(49.5415, 15.3593),
    "Brno": Coordinates(49.1951, 16.6068),
}
# (meters, seconds) keyed by destination
LEGS = {
    "Humpolec": (95000, 3600),
    "Jihlava": (25000, 1200),
    "Brno": (90000, 3300),
}


class Collaborators:
    def __init__(self, failing_leg=None):
        self.geocoded = []
        self.fetched = []
        self.failing_leg = failing_leg
        self.names = {coords: name for name, coords in PLACES.items()}

    def geocode(self, address):
        self.geocoded.append(address)
        if address not in PLACES:
            raise GeocodeError(address, "address not found")
        return PLACES[address]

    def fetch_leg(self, origin, destination):
        name = self.names[destination]
        self.fetched.append((self.names[origin], name))
        if name == self.failing_leg:
            raise ProviderError("service unavailable")
        meters, seconds = LEGS[name]
        return {"distance_meters": meters, "duration_seconds": seconds, "geometry": [destination.as_tuple()]}


def _trip(stops=None, departure="09:00"):
    if stops is None:
        stops = [Stop("Humpolec", break_minutes=15), Stop("Jihlava", is_time_fixed=True, fixed_arrival="10:45")]
    return Trip(start=Point("Praha"), end=Point("Brno"), departure=departure, stops=stops)


class TestPlanTrip(unittest.TestCase):
    def _plan(self, trip, collab, **kwargs):
        return plan_trip(trip, geocoder=collab.geocode, leg_fetcher=collab.fetch_leg, max_workers=1, **kwargs)

    def test_full_plan(self):
        collab = Collaborators()
        schedule = self._plan(_trip(), collab)

        self.assertEqual(collab.fetched, [("Praha", "Humpolec"), ("Humpolec", "Jihlava"), ("Jihlava", "Brno")])
        self.assertEqual([e.kind for e in schedule.entries], ["start", "stop", "fixed-stop", "end"])
        humpolec, jihlava, brno = schedule.entries[1:]
        self.assertEqual((humpolec.actual_arrival, humpolec.departure), ("10:00", "10:15"))
        self.assertEqual(jihlava.calculated_arrival, "10:35")
        self.assertEqual((jihlava.actual_arrival, jihlava.wait_minutes, jihlava.departure), ("10:45", 10, "10:45"))
        self.assertEqual(brno.actual_arrival, "11:40")
        self.assertAlmostEqual(schedule.total_distance_km, 210.0)
        self.assertEqual(schedule.total_trip_minutes, 160)
        self.assertEqual(len(schedule.route.legs), 3)

    def test_validation_happens_before_network(self):
        collab = Collaborators()
        with self.assertRaises(ValidationError):
            self._plan(_trip([Stop("Humpolec", break_minutes=-1)]), collab)
        self.assertEqual(collab.geocoded, [])
        self.assertEqual(collab.fetched, [])

    def test_order_conflict_blocks_network(self):
        collab = Collaborators()
        trip = _trip([
            Stop("Humpolec", is_time_fixed=True, fixed_arrival="10:30", break_minutes=10),
            Stop("Jihlava", is_time_fixed=True, fixed_arrival="10:00"),
        ])
        with self.assertRaises(OrderConflictError) as ctx:
            self._plan(trip, collab)
        self.assertEqual(len(ctx.exception.conflicts), 1)
        self.assertEqual(collab.geocoded, [])

        schedule = self._plan(trip, collab, allow_order_conflicts=True)
        self.assertEqual(len(schedule.warnings), 1)
        self.assertEqual(schedule.entries[2].actual_arrival, "10:00")

    def test_geocode_failure_aborts(self):
        collab = Collaborators()
        with self.assertRaises(GeocodeError):
            self._plan(_trip([Stop("Atlantis")]), collab)
        self.assertEqual(collab.fetched, [])

    def test_routing_failure_aborts(self):
        collab = Collaborators(failing_leg="Jihlava")
        with self.assertRaises(RoutingError) as ctx:
            self._plan(_trip(), collab)
        self.assertEqual(ctx.exception.leg_index, 2)
        self.assertEqual((ctx.exception.origin_address, ctx.exception.destination_address), ("Humpolec", "Jihlava"))

    def test_direct_trip(self):
        collab = Collaborators()
        schedule = self._plan(_trip([]), collab)
        self.assertEqual(len(collab.fetched), 1)
        self.assertEqual(len(schedule.entries), 2)

    def test_every_planning_failure_is_a_planner_error(self):
        collab = Collaborators()
        cancel = threading.Event()
        cancel.set()
        with self.assertRaises(PlanCancelled) as ctx:
            self._plan(_trip(), collab, cancel_event=cancel)
        self.assertIsInstance(ctx.exception, PlannerError)
        self.assertEqual(collab.fetched, [])

        def geocode(address):
            raise NotFoundError("no match")

        with self.assertRaises(PlannerError):
            plan_trip(_trip(), geocoder=geocode, leg_fetcher=collab.fetch_leg, max_workers=1)


if __name__ == "__main__":
    unittest.main()

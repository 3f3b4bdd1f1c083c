import unittest

from stopwise.models import Coordinates, Leg, Point, Stop, Trip


def _trip(*addresses):
    return Trip(
        start=Point("Praha"),
        end=Point("Brno"),
        departure="08:00",
        stops=[Stop(address) for address in addresses],
    )


class TestCoordinates(unittest.TestCase):
    def test_parse_and_format(self):
        coords = Coordinates.parse("50.0755,14.4378")
        self.assertEqual(coords, Coordinates(50.0755, 14.4378))
        self.assertEqual(coords.to_param(), "50.0755,14.4378")
        self.assertEqual(coords.as_tuple(), (50.0755, 14.4378))

    def test_parse_invalid(self):
        for value in ("50.0755", "a,b", "1,2,3"):
            with self.assertRaises(ValueError):
                Coordinates.parse(value)


class TestTrip(unittest.TestCase):
    def test_orders_are_numbered_on_creation(self):
        trip = _trip("A", "B", "C")
        self.assertEqual([s.order for s in trip.stops], [0, 1, 2])

    def test_add_stop_renumbers(self):
        trip = _trip("A", "B")
        trip.add_stop(Stop("X"), position=1)
        trip.add_stop(Stop("Z"))
        self.assertEqual([s.address for s in trip.stops], ["A", "X", "B", "Z"])
        self.assertEqual([s.order for s in trip.stops], [0, 1, 2, 3])

    def test_remove_stop_renumbers(self):
        trip = _trip("A", "B", "C")
        removed = trip.remove_stop(0)
        self.assertEqual(removed.address, "A")
        self.assertEqual([(s.address, s.order) for s in trip.stops], [("B", 0), ("C", 1)])

    def test_move_stop_renumbers(self):
        trip = _trip("A", "B", "C")
        trip.move_stop(2, 0)
        self.assertEqual([(s.address, s.order) for s in trip.stops], [("C", 0), ("A", 1), ("B", 2)])
        trip.move_stop(0, 1)
        self.assertEqual([s.address for s in trip.stops], ["A", "C", "B"])

    def test_move_stop_out_of_range(self):
        trip = _trip("A", "B")
        with self.assertRaises(IndexError):
            trip.move_stop(0, 2)
        self.assertEqual([s.address for s in trip.stops], ["A", "B"])

    def test_points(self):
        trip = _trip("A")
        self.assertEqual([p.address for p in trip.points()], ["Praha", "A", "Brno"])

    def test_with_coordinates_keeps_stop_fields(self):
        stop = Stop("A", is_time_fixed=True, fixed_arrival="10:30", break_minutes=15, order=2)
        resolved = stop.with_coordinates(Coordinates(49.0, 16.0))
        self.assertIsInstance(resolved, Stop)
        self.assertEqual(resolved.fixed_arrival, "10:30")
        self.assertEqual(resolved.break_minutes, 15)
        self.assertEqual(resolved.coordinates, Coordinates(49.0, 16.0))
        self.assertIsNone(stop.coordinates)


class TestLeg(unittest.TestCase):
    def test_derived_units(self):
        leg = Leg(Point("A"), Point("B"), distance_meters=12500, duration_seconds=900)
        self.assertEqual(leg.distance_km, 12.5)
        self.assertEqual(leg.duration_minutes, 15)


if __name__ == "__main__":
    unittest.main()

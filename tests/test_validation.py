import unittest

from stopwise.errors import ValidationError
from stopwise.models import Point, Stop, Trip
from stopwise.validation import validate_trip


def _trip(stops=(), start="Praha", end="Brno", departure="08:00"):
    return Trip(start=Point(start), end=Point(end), departure=departure, stops=list(stops))


class TestValidation(unittest.TestCase):
    def test_valid_trip(self):
        trip = _trip([Stop("Jihlava", break_minutes=0), Stop("Humpolec", is_time_fixed=True, fixed_arrival="10:00")])
        validate_trip(trip)

    def test_missing_trip_fields(self):
        cases = [
            (_trip(start="  "), "start"),
            (_trip(end=""), "end"),
            (_trip(departure=""), "departure"),
            (_trip(departure="8 am"), "departure"),
        ]
        for trip, field in cases:
            with self.assertRaises(ValidationError) as ctx:
                validate_trip(trip)
            self.assertEqual(ctx.exception.field, field)
            self.assertIsNone(ctx.exception.stop_position)

    def test_missing_stop_address(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_trip(_trip([Stop("Jihlava"), Stop("")]))
        self.assertEqual(ctx.exception.field, "address")
        self.assertEqual(ctx.exception.stop_position, 2)
        self.assertIn("stop 2", str(ctx.exception))

    def test_negative_break(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_trip(_trip([Stop("Jihlava", break_minutes=-5)]))
        self.assertEqual(ctx.exception.field, "break_minutes")
        self.assertEqual(ctx.exception.stop_position, 1)

    def test_fixed_stop_without_time(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_trip(_trip([Stop("Jihlava", is_time_fixed=True)]))
        self.assertEqual(ctx.exception.field, "fixed_arrival")

    def test_fixed_stop_with_malformed_time(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_trip(_trip([Stop("Jihlava", is_time_fixed=True, fixed_arrival="10.30")]))
        self.assertEqual(ctx.exception.field, "fixed_arrival")

    def test_reports_first_violation(self):
        trip = _trip([Stop(""), Stop("Jihlava", break_minutes=-1)])
        with self.assertRaises(ValidationError) as ctx:
            validate_trip(trip)
        self.assertEqual(ctx.exception.stop_position, 1)
        self.assertEqual(ctx.exception.field, "address")

    def test_unfixed_stop_ignores_time(self):
        validate_trip(_trip([Stop("Jihlava", is_time_fixed=False, fixed_arrival=None)]))


if __name__ == "__main__":
    unittest.main()

"""Tests for Location value object."""

import math

from delivery.shared.location import Location


class TestLocation:
    def test_coordinates(self):
        loc = Location(x=1, y=2)
        assert loc.x == 1.0
        assert loc.y == 2.0

    def test_distance(self):
        assert Location(x=0, y=0).distance_to(Location(x=3, y=4)) == 5.0

    def test_distance_is_symmetric(self):
        a = Location(x=2, y=2)
        b = Location(x=1, y=2)
        assert a.distance_to(b) == b.distance_to(a)

    def test_distance_to_self_is_zero(self):
        loc = Location(x=7, y=-3)
        assert loc.distance_to(Location(x=7, y=-3)) == 0.0

    def test_distinct_points_have_positive_distance(self):
        assert Location(x=0, y=0).distance_to(Location(x=0, y=0.5)) > 0

    def test_diagonal_distance(self):
        assert math.isclose(Location(x=2, y=2).distance_to(Location(x=1, y=1)), math.sqrt(2))

    def test_equality_by_value(self):
        assert Location(x=1, y=1) == Location(x=1, y=1)
        assert Location(x=1, y=1) != Location(x=1, y=2)

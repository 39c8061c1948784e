import unittest
from datetime import datetime, timezone

from bodies import (
    ATLAS, KEY_EVENTS, PLANETS, EllipticalOrbit, HyperbolicOrbit, days_since_epoch, find_event,
)
from physics import PhysicsError


class TestOrbitVariants(unittest.TestCase):

    def test_elliptical_rejects_open_orbits(self):
        with self.assertRaises(PhysicsError):
            EllipticalOrbit(1.0, 1.0, 365.0)
        with self.assertRaises(PhysicsError):
            EllipticalOrbit(1.0, 1.4, 365.0)

    def test_elliptical_rejects_bad_size_or_period(self):
        with self.assertRaises(PhysicsError):
            EllipticalOrbit(-1.0, 0.1, 365.0)
        with self.assertRaises(PhysicsError):
            EllipticalOrbit(1.0, 0.1, 0.0)

    def test_hyperbolic_rejects_closed_orbits(self):
        when = datetime(2025, 1, 1, tzinfo=timezone.utc)
        with self.assertRaises(PhysicsError):
            HyperbolicOrbit(1.0, 1.0, when)
        with self.assertRaises(PhysicsError):
            HyperbolicOrbit(1.0, 0.5, when)

    def test_hyperbolic_needs_positive_magnitude(self):
        when = datetime(2025, 1, 1, tzinfo=timezone.utc)
        with self.assertRaises(PhysicsError):
            HyperbolicOrbit(-0.26, 6.0, when)
        orbit = HyperbolicOrbit.from_signed_elements(-0.26, 6.0, when, inclination=10.0)
        self.assertEqual(orbit.semi_major_axis, 0.26)
        self.assertEqual(orbit.inclination, 10.0)

    def test_hyperbolic_needs_aware_datetime(self):
        with self.assertRaises(PhysicsError):
            HyperbolicOrbit(1.0, 2.0, datetime(2025, 1, 1))

    def test_perihelion_distances(self):
        earth = next(p for p in PLANETS if p.name == "Earth")
        self.assertAlmostEqual(earth.orbit.perihelion_distance, 0.983, places=12)
        self.assertAlmostEqual(ATLAS.orbit.perihelion_distance, 1.35, delta=0.01)


class TestCatalogue(unittest.TestCase):

    def test_five_planets_in_order(self):
        self.assertEqual([p.name for p in PLANETS], ["Mercury", "Venus", "Earth", "Mars", "Jupiter"])

    def test_atlas_elements(self):
        orbit = ATLAS.orbit
        self.assertAlmostEqual(orbit.semi_major_axis, 0.26391591751781)
        self.assertEqual(orbit.eccentricity, 6.139)
        self.assertEqual(orbit.perihelion_date, datetime(2025, 10, 29, 12, tzinfo=timezone.utc))

    def test_key_event_offsets(self):
        self.assertEqual([e.days_from_start for e in KEY_EVENTS], [0, 94, 112, 120, 171, 257])

    def test_days_since_epoch(self):
        self.assertEqual(days_since_epoch(datetime(2025, 7, 11, tzinfo=timezone.utc)), 10.0)
        self.assertEqual(days_since_epoch(datetime(2025, 6, 30, 12, tzinfo=timezone.utc)), -0.5)

    def test_find_event(self):
        self.assertEqual(find_event("perihelion").days_from_start, 120)
        self.assertEqual(find_event(" Mars Closest ").planet, "Mars")
        with self.assertRaises(KeyError):
            find_event("Saturn Closest")


if __name__ == '__main__':
    unittest.main()

import unittest

import matplotlib
matplotlib.use("Agg")

from clock import SimulationClock
from ephemeris import SolarSystem
from trajectory_plot import closest_approach, ephemeris_table


class TestEphemerisTable(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.system = SolarSystem(SimulationClock(is_playing=False))
        cls.table = ephemeris_table(cls.system, 118.0, 123.0, 0.5)

    def test_one_row_per_body_per_step(self):
        self.assertEqual(len(self.table), 11 * 6)
        self.assertEqual(set(self.table["body"]), {"Mercury", "Venus", "Earth", "Mars", "Jupiter", "3I/ATLAS"})

    def test_comet_rows_carry_planet_separations(self):
        comet_rows = self.table[self.table["body"] == "3I/ATLAS"]
        self.assertFalse(comet_rows["to_mars_au"].isna().any())
        planet_rows = self.table[self.table["body"] == "Earth"]
        self.assertTrue(planet_rows["to_mars_au"].isna().all())

    def test_perihelion_found_in_table(self):
        row = closest_approach(self.table, "Sun")
        self.assertEqual(row["day"], 120.5)
        self.assertAlmostEqual(row["distance_au"], 1.356, delta=0.001)

    def test_table_does_not_move_the_clock(self):
        self.assertEqual(self.system.clock.simulation_time, 0.0)


if __name__ == '__main__':
    unittest.main()

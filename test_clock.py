import unittest
from datetime import datetime, timezone

from bodies import ATLAS, KEY_EVENTS
from clock import CameraView, SimulationClock


class TestClockTransitions(unittest.TestCase):

    def test_tick_advances_while_playing(self):
        clock = SimulationClock(speed=2.0)
        clock.tick(0.5)
        self.assertEqual(clock.simulation_time, 1.0)

    def test_tick_does_nothing_while_paused(self):
        clock = SimulationClock(simulation_time=5.0, is_playing=False)
        clock.tick(10.0)
        self.assertEqual(clock.simulation_time, 5.0)

    def test_toggle_play(self):
        clock = SimulationClock()
        self.assertFalse(clock.toggle_play())
        self.assertTrue(clock.toggle_play())
        clock.pause()
        self.assertFalse(clock.is_playing)
        clock.play()
        self.assertTrue(clock.is_playing)

    def test_scrub_works_playing_or_paused(self):
        clock = SimulationClock()
        clock.scrub(-1234.5)
        self.assertEqual(clock.simulation_time, -1234.5)
        clock.pause()
        clock.scrub(1e6)
        self.assertEqual(clock.simulation_time, 1e6)

    def test_speed_change_applies_on_next_tick(self):
        clock = SimulationClock(speed=1.0)
        clock.tick(1.0)
        clock.set_speed(4.0)
        self.assertEqual(clock.simulation_time, 1.0)
        clock.tick(1.0)
        self.assertEqual(clock.simulation_time, 5.0)

    def test_speed_is_clamped_to_slider_range(self):
        clock = SimulationClock()
        self.assertEqual(clock.set_speed(50.0), 10.0)
        self.assertEqual(clock.set_speed(0.0), 0.1)
        self.assertEqual(SimulationClock(speed=-3.0).speed, 0.1)

    def test_time_is_never_clamped(self):
        clock = SimulationClock(simulation_time=299.0, speed=10.0)
        for _ in range(100):
            clock.tick(1.0)
        self.assertEqual(clock.simulation_time, 1299.0)


class TestClockJumps(unittest.TestCase):

    def test_jump_to_event(self):
        clock = SimulationClock()
        clock.jump_to_event(KEY_EVENTS[3])
        self.assertEqual(clock.simulation_time, 120)
        clock.jump_to_event("Earth Closest")
        self.assertEqual(clock.simulation_time, 171)

    def test_jump_to_unknown_event(self):
        with self.assertRaises(KeyError):
            SimulationClock().jump_to_event("Pluto Flyby")

    def test_jump_to_present(self):
        clock = SimulationClock(is_playing=False)
        clock.jump_to_present(now=datetime(2025, 7, 11, 13, tzinfo=timezone.utc))
        self.assertEqual(clock.simulation_time, 11)
        clock.jump_to_present(now=datetime(2025, 6, 1, tzinfo=timezone.utc))
        self.assertEqual(clock.simulation_time, -30)


class TestClockView(unittest.TestCase):

    def test_zoom_limits(self):
        clock = SimulationClock()
        for _ in range(20):
            clock.zoom_in()
        self.assertEqual(clock.zoom, 5.0)
        for _ in range(40):
            clock.zoom_out()
        self.assertEqual(clock.zoom, 0.3)

    def test_camera_presets_scale_with_zoom(self):
        clock = SimulationClock()
        self.assertIs(clock.camera_view, CameraView.SIDE)
        self.assertEqual(clock.camera_position(), (-8.0, 5.0, -15.0))
        clock.set_camera_view("top")
        clock.zoom_in()
        x, y, z = clock.camera_position()
        self.assertAlmostEqual(y, 25.0 / 1.3)
        clock.set_camera_view(CameraView.ANGLE)
        self.assertIs(clock.camera_view, CameraView.ANGLE)

    def test_unknown_camera_view(self):
        with self.assertRaises(ValueError):
            SimulationClock().set_camera_view("bottom")


class TestClockDisplay(unittest.TestCase):

    def test_current_date(self):
        self.assertEqual(SimulationClock().current_date(), "Jul 01, 2025")
        self.assertEqual(SimulationClock(simulation_time=120.5).current_date(), "Oct 29, 2025")

    def test_perihelion_countdown(self):
        perihelion = ATLAS.orbit.perihelion_date
        self.assertEqual(SimulationClock(simulation_time=0.5).perihelion_countdown(perihelion), "120 days to perihelion")
        self.assertEqual(SimulationClock(simulation_time=120.5).perihelion_countdown(perihelion), "AT PERIHELION")
        self.assertEqual(SimulationClock(simulation_time=140.5).perihelion_countdown(perihelion), "20 days after perihelion")

    def test_display_survives_times_outside_calendar_range(self):
        perihelion = ATLAS.orbit.perihelion_date
        clock = SimulationClock()
        clock.scrub(1e7)
        self.assertIsNone(clock.current_datetime())
        self.assertEqual(clock.current_date(), "Day 10000000")
        self.assertEqual(clock.perihelion_countdown(perihelion), "9999880 days after perihelion")
        clock.scrub(-1e7)
        self.assertEqual(clock.current_date(), "Day -10000000")
        self.assertEqual(clock.perihelion_countdown(perihelion), "10000120 days to perihelion")


if __name__ == '__main__':
    unittest.main()

import os
import unittest

import numpy as np
from numpy.testing import assert_allclose

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from bodies import find_event
from config import CAMERA_PRESETS, SCREEN_HEIGHT, SCREEN_WIDTH
from renderer import (
    camera_angles_for, camera_view_rotation, comet_tail_points, event_status, initial_world_rotation,
    project_3d_to_2d,
)
from starfield import Starfield


class TestProjection(unittest.TestCase):

    def test_origin_lands_mid_screen(self):
        sx, sy, perspective = project_3d_to_2d(0.0, 0.0, 0.0)
        self.assertEqual((sx, sy), (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2))
        self.assertGreater(perspective, 0)

    def test_huge_values_are_clamped(self):
        sx, sy, _ = project_3d_to_2d(1e30, -1e30, 0.0, scale_factor=1e10)
        self.assertEqual((sx, sy), (32760, -32760))

    def test_scene_up_is_screen_up(self):
        self.assertEqual(initial_world_rotation(1.0, 2.0, 3.0), (1.0, -2.0, 3.0))

    def test_camera_rotation_preserves_length(self):
        rotated = camera_view_rotation(1.0, 2.0, 3.0, 30.0, -70.0)
        self.assertAlmostEqual(np.linalg.norm(rotated), np.linalg.norm([1.0, 2.0, 3.0]), places=12)

    def test_top_view_looks_straight_down(self):
        pitch, _ = camera_angles_for(CAMERA_PRESETS["top"])
        self.assertEqual(pitch, 89)
        pitch, _ = camera_angles_for(CAMERA_PRESETS["side"])
        self.assertGreater(pitch, 0)
        self.assertLess(pitch, 45)


class TestCometTail(unittest.TestCase):

    def test_tail_points_away_from_sun(self):
        nucleus = np.array([2.0, 0.5, -1.0])
        direction = nucleus / np.linalg.norm(nucleus)
        points = comet_tail_points(nucleus, direction, np.random.default_rng(7), count=500)
        self.assertEqual(points.shape, (500, 3))
        along = (points - nucleus) @ direction
        self.assertTrue(np.all(along >= -1e-12))
        self.assertLessEqual(along.max(), 4.0 * 1.2)

    def test_tail_is_reproducible_with_seed(self):
        nucleus = np.array([1.0, 0.0, 0.0])
        first = comet_tail_points(nucleus, nucleus, np.random.default_rng(3), count=50)
        second = comet_tail_points(nucleus, nucleus, np.random.default_rng(3), count=50)
        assert_allclose(first, second)


class TestStarfield(unittest.TestCase):

    def test_stars_sit_on_sphere(self):
        field = Starfield(count=200, seed=1)
        positions = field.calculate_star_positions(radius=60.0)
        self.assertEqual(positions.shape, (200, 3))
        assert_allclose(np.linalg.norm(positions, axis=1), 60.0)
        self.assertTrue(np.all((field.brightness >= 0.3) & (field.brightness <= 1.0)))

    def test_focus_offset_shifts_stars(self):
        field = Starfield(count=10, seed=2)
        centred = field.calculate_star_positions(10.0)
        shifted = field.calculate_star_positions(10.0, focus_offset=[1.0, 0.0, 0.0])
        assert_allclose(centred - shifted, np.tile([1.0, 0.0, 0.0], (10, 1)))

    def test_empty_starfield(self):
        self.assertEqual(Starfield(count=0).calculate_star_positions().shape, (0, 3))

    def test_star_colors_follow_brightness(self):
        field = Starfield(count=50, seed=4)
        colors = field.star_colors(base_color=(200, 100, 0))
        self.assertEqual(len(colors), 50)
        for (r, g, b), brightness in zip(colors, field.brightness):
            self.assertEqual(r, int(200 * brightness))
            self.assertLessEqual(g, 100)
            self.assertEqual(b, 0)


class TestEventStatus(unittest.TestCase):

    def test_current_within_three_days(self):
        perihelion = find_event("Perihelion")
        for offset in [-2.9, 0.0, 2.5]:
            self.assertEqual(event_status(perihelion.days_from_start + offset, perihelion), "current")

    def test_past_and_upcoming(self):
        perihelion = find_event("Perihelion")
        self.assertEqual(event_status(perihelion.days_from_start - 3.0, perihelion), "upcoming")
        self.assertEqual(event_status(perihelion.days_from_start + 3.0, perihelion), "past")
        self.assertEqual(event_status(perihelion.days_from_start + 200.0, perihelion), "past")

    def test_custom_window(self):
        perihelion = find_event("Perihelion")
        self.assertEqual(event_status(perihelion.days_from_start + 5.0, perihelion, window=10), "current")


if __name__ == '__main__':
    unittest.main()

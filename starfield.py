import logging

import numpy as np

from config import STARFIELD_COUNT, STARFIELD_RADIUS, WHITE

logger = logging.getLogger(__name__)


class Starfield:
    """Background stars scattered over a sphere around the Sun, fixed for the whole run."""

    def __init__(self, count=STARFIELD_COUNT, seed=None):
        self.stars = np.empty((0, 3))
        self.brightness = np.empty(0)
        if count:
            self.generate(count, seed)

    def generate(self, count, seed=None):
        """
        Picks `count` directions uniformly over the unit sphere.

        Normalising 3D gaussian samples gives a uniform spread with no clumping at the poles.
        """
        rng = np.random.default_rng(seed)
        directions = rng.normal(size=(count, 3))
        norms = np.linalg.norm(directions, axis=1)
        # A zero-length sample has no direction
        directions = directions[norms > 0] / norms[norms > 0][:, None]
        self.stars = directions
        self.brightness = rng.uniform(0.3, 1.0, size=len(directions))
        logger.debug(f"Generated {len(self.stars)} background stars.")

    def calculate_star_positions(self, radius=STARFIELD_RADIUS, focus_offset=None):
        """
        Stars projected onto a sphere of `radius` scene units around the Sun.

        Args:
            radius (float): The radius of the sphere.
            focus_offset (array-like): Scene position the camera is centred on; the sphere
                stays put around the Sun, so positions are returned relative to the focus.

        Returns:
            np.ndarray: shape (N, 3).
        """
        positions = self.stars * radius
        if focus_offset is not None:
            positions = positions - np.asarray(focus_offset, dtype=float)
        return positions

    def star_colors(self, base_color=WHITE):
        """One RGB tuple per star, `base_color` dimmed by that star's brightness."""
        scaled = np.outer(self.brightness, base_color).astype(int)
        return [tuple(c) for c in scaled.tolist()]

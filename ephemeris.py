# ephemeris.py
"""
Body state providers: where every body is at a given simulation time.

Positions are recomputed from the static orbital elements on every call. There
is no stored velocity or integrator state, so jumping the clock to any time is
O(1) and lands on exactly the same answer as getting there frame by frame.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

import numpy as np

from bodies import ATLAS, KEY_EVENTS, PLANETS, Comet, Planet
from config import AU_SCALE, MISSION_EPOCH, SECONDS_PER_DAY
from physics import (
    calculate_hyperbolic_orbit_points, calculate_orbit_points, hyperbolic_mean_motion,
    orbital_to_cartesian, solve_kepler_ellipse, solve_kepler_hyperbola, true_anomaly,
    vis_viva_speed, TWO_PI,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BodyPosition:
    name: str
    position: np.ndarray  # Scene units, Y up
    distance_au: float  # From the Sun
    velocity_km_s: Optional[float] = None
    anti_sun_direction: Optional[np.ndarray] = None  # Comets only, unit vector


def distance_from_sun(position, scale=AU_SCALE):
    return float(np.linalg.norm(position)) / scale


def _unit_vector(vector):
    norm = np.linalg.norm(vector)
    if norm == 0:
        return np.zeros(3)
    return vector / norm


class PlanetStateProvider:
    """
    Elliptical orbit driven by mean motion n = 2*pi / period.

    Only the inclination is applied; argument of perihelion and ascending node
    are left at zero, which is enough for a display orbit.
    """

    def __init__(self, planet: Planet):
        self.planet = planet
        self.name = planet.name
        self.mean_motion = TWO_PI / planet.orbit.period  # rad/day

    def mean_anomaly(self, simulation_time):
        return (self.mean_motion * simulation_time) % TWO_PI

    def position(self, simulation_time) -> BodyPosition:
        orbit = self.planet.orbit
        E = solve_kepler_ellipse(self.mean_anomaly(simulation_time), orbit.eccentricity)
        nu = true_anomaly(E, orbit.eccentricity)
        pos = orbital_to_cartesian(orbit.semi_major_axis, orbit.eccentricity, nu,
                                   0.0, 0.0, orbit.inclination)
        r = distance_from_sun(pos)
        return BodyPosition(self.name, pos, r, vis_viva_speed(r, orbit.semi_major_axis, hyperbolic=False))

    def orbit_path(self):
        return calculate_orbit_points(self.planet.orbit.semi_major_axis, self.planet.orbit.eccentricity)


class CometStateProvider:
    """
    Hyperbolic trajectory, timed from the perihelion passage.

    Simulation time is days since `epoch`; mean anomaly is n * (seconds since perihelion)
    with n = sqrt(mu / a^3). Full 3D orientation (omega, Omega, i) is used.
    """

    def __init__(self, comet: Comet, epoch: datetime = MISSION_EPOCH):
        self.comet = comet
        self.name = comet.name
        self.epoch = epoch
        self.mean_motion = hyperbolic_mean_motion(comet.orbit.semi_major_axis, comet.orbit.mu)  # rad/s

    def instant(self, simulation_time) -> Optional[datetime]:
        try:
            return self.epoch + timedelta(days=simulation_time)
        except OverflowError:
            return None

    @property
    def perihelion_time(self) -> float:
        """Simulation time (days) of the perihelion passage."""
        return (self.comet.orbit.perihelion_date - self.epoch).total_seconds() / SECONDS_PER_DAY

    def days_since_perihelion(self, simulation_time):
        # Plain float arithmetic, so times far outside datetime's range still work
        return simulation_time - self.perihelion_time

    def mean_anomaly(self, simulation_time):
        return self.mean_motion * self.days_since_perihelion(simulation_time) * SECONDS_PER_DAY

    def position(self, simulation_time) -> BodyPosition:
        orbit = self.comet.orbit
        H = solve_kepler_hyperbola(self.mean_anomaly(simulation_time), orbit.eccentricity)
        nu = true_anomaly(H, orbit.eccentricity)
        pos = orbital_to_cartesian(orbit.semi_major_axis, orbit.eccentricity, nu,
                                   orbit.arg_perihelion, orbit.ascending_node, orbit.inclination)
        r = distance_from_sun(pos)
        v = vis_viva_speed(r, orbit.semi_major_axis, hyperbolic=True, mu=orbit.mu)
        return BodyPosition(self.name, pos, r, v, _unit_vector(pos))

    def anti_sunward(self, simulation_time):
        """Unit vector from the Sun through the nucleus; the tail points this way."""
        return self.position(simulation_time).anti_sun_direction

    def orbit_path(self):
        orbit = self.comet.orbit
        return calculate_hyperbolic_orbit_points(orbit.semi_major_axis, orbit.eccentricity,
                                                 orbit.arg_perihelion, orbit.ascending_node,
                                                 orbit.inclination)


class SolarSystem:
    """
    All body providers bound to one simulation clock.

    The clock is the only source of time. `snapshot()` reads it once and
    evaluates every body at that instant; orbit paths are computed here once,
    since the orbital elements never change.
    """

    def __init__(self, clock, planets=PLANETS, comet=ATLAS, key_events=KEY_EVENTS):
        self.clock = clock
        self.planets = [PlanetStateProvider(p) for p in planets]
        self.comet = CometStateProvider(comet, clock.epoch)
        self.key_events = tuple(key_events)
        self.orbit_paths = {provider.name: provider.orbit_path() for provider in self.providers}
        logger.info(f"Solar system ready: {len(self.planets)} planets + {self.comet.name}")

    @property
    def providers(self):
        return [*self.planets, self.comet]

    def positions_at(self, simulation_time) -> Dict[str, BodyPosition]:
        return {provider.name: provider.position(simulation_time) for provider in self.providers}

    def snapshot(self) -> Dict[str, BodyPosition]:
        return self.positions_at(self.clock.simulation_time)

# bodies.py
"""
Static catalogue of everything the orrery shows: the planets, the interstellar
comet 3I/ATLAS and the timeline of key events along its passage.

Orbits are one of two explicit variants. Which solver a body uses follows
from the variant it was built as, never from the sign of its semi-major axis.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from config import MISSION_EPOCH, MU_SUN_KM3_S2, SECONDS_PER_DAY
from physics import PhysicsError


@dataclass(frozen=True)
class EllipticalOrbit:
    semi_major_axis: float  # AU
    eccentricity: float  # 0 <= e < 1
    period: float  # days
    inclination: float = 0.0  # degrees
    arg_perihelion: float = 0.0  # degrees (ω)
    ascending_node: float = 0.0  # degrees (Ω)

    def __post_init__(self):
        if self.semi_major_axis <= 0:
            raise PhysicsError(f"Semi-major axis must be positive, got {self.semi_major_axis}")
        if not 0 <= self.eccentricity < 1:
            raise PhysicsError(f"Elliptical orbit needs 0 <= e < 1, got e={self.eccentricity}")
        if self.period <= 0:
            raise PhysicsError(f"Orbital period must be positive, got {self.period}")

    @property
    def perihelion_distance(self) -> float:
        return self.semi_major_axis * (1 - self.eccentricity)


@dataclass(frozen=True)
class HyperbolicOrbit:
    semi_major_axis: float  # AU, magnitude
    eccentricity: float  # e > 1
    perihelion_date: datetime
    inclination: float = 0.0
    arg_perihelion: float = 0.0
    ascending_node: float = 0.0
    mu: float = MU_SUN_KM3_S2  # km^3/s^2

    def __post_init__(self):
        if self.semi_major_axis <= 0:
            raise PhysicsError(f"Semi-major axis must be a positive magnitude, got {self.semi_major_axis}")
        if not self.eccentricity > 1:
            raise PhysicsError(f"Hyperbolic orbit needs e > 1, got e={self.eccentricity}")
        if self.perihelion_date.tzinfo is None:
            raise PhysicsError("perihelion_date must be timezone-aware")

    @classmethod
    def from_signed_elements(cls, semi_major_axis, eccentricity, perihelion_date, **kwargs):
        """Builds from catalogues that store a hyperbolic semi-major axis as a negative number."""
        return cls(abs(semi_major_axis), eccentricity, perihelion_date, **kwargs)

    @property
    def perihelion_distance(self) -> float:
        return self.semi_major_axis * (self.eccentricity - 1)


@dataclass(frozen=True)
class Planet:
    name: str
    orbit: EllipticalOrbit
    color: Tuple[int, int, int]
    size: float  # Display radius, scene units


@dataclass(frozen=True)
class Comet:
    name: str
    orbit: HyperbolicOrbit
    perihelion_distance_au: float  # Published value, for the HUD
    hyperbolic_excess_velocity: float  # km/s (v∞)
    max_velocity_at_perihelion: float  # km/s
    nucleus_diameter_min: float  # km
    nucleus_diameter_max: float  # km
    discovery_date: datetime
    discovered_by: str


@dataclass(frozen=True)
class KeyEvent:
    name: str
    date: datetime
    days_from_start: float
    description: str
    distance: Optional[str] = None
    planet: Optional[str] = None


def days_since_epoch(instant: datetime, epoch: datetime = MISSION_EPOCH) -> float:
    """Simulation time (days) that corresponds to a calendar instant."""
    return (instant - epoch).total_seconds() / SECONDS_PER_DAY


def _utc(year, month, day, hour=0):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


def _event(name, date, description, distance=None, planet=None):
    return KeyEvent(name, date, round(days_since_epoch(date)), description, distance, planet)


# Planet orbital data (NASA/JPL values, rounded for display)
PLANETS = (
    Planet("Mercury", EllipticalOrbit(0.387, 0.206, 88, inclination=7.0), (160, 130, 109), 0.08),
    Planet("Venus", EllipticalOrbit(0.723, 0.007, 225, inclination=3.4), (231, 205, 171), 0.12),
    Planet("Earth", EllipticalOrbit(1.000, 0.017, 365.25, inclination=0.0), (79, 148, 205), 0.12),
    Planet("Mars", EllipticalOrbit(1.524, 0.093, 687, inclination=1.9), (205, 92, 92), 0.10),
    Planet("Jupiter", EllipticalOrbit(5.203, 0.049, 4333, inclination=1.3), (212, 165, 116), 0.40),
)

# 3I/ATLAS, epoch MJD 60977.5 (2025-10-29 TDB)
ATLAS = Comet(
    name="3I/ATLAS",
    orbit=HyperbolicOrbit.from_signed_elements(
        -0.26391591751781, 6.139, _utc(2025, 10, 29, 12),
        inclination=175.0,  # retrograde, near the ecliptic
        arg_perihelion=128.01,
        ascending_node=322.16,
    ),
    perihelion_distance_au=1.35,
    hyperbolic_excess_velocity=60.0,
    max_velocity_at_perihelion=68.0,
    nucleus_diameter_min=0.44,
    nucleus_diameter_max=5.6,
    discovery_date=_utc(2025, 7, 1),
    discovered_by="ATLAS (Rio Hurtado, Chile)",
)

KEY_EVENTS = (
    _event("Discovery", _utc(2025, 7, 1), "First observation by ATLAS survey"),
    _event("Mars Closest", _utc(2025, 10, 3), "Closest approach to Mars", "0.194 AU (29M km)", "Mars"),
    _event("Solar Conjunction", _utc(2025, 10, 21), "Hidden behind the Sun from Earth"),
    _event("Perihelion", _utc(2025, 10, 29), "Closest approach to Sun", "1.35 AU (203M km)"),
    _event("Earth Closest", _utc(2025, 12, 19), "Closest approach to Earth", "1.8 AU (270M km)", "Earth"),
    _event("Jupiter Closest", _utc(2026, 3, 15), "Closest approach to Jupiter", "~4.5 AU", "Jupiter"),
)


def find_event(name: str) -> KeyEvent:
    """Looks up a key event by name (case-insensitive). Raises KeyError if unknown."""
    wanted = name.strip().lower()
    for event in KEY_EVENTS:
        if event.name.lower() == wanted:
            return event
    raise KeyError(name)

import logging
from dataclasses import dataclass

import numpy as np

from config import (
    AU_KM, AU_SCALE, ELLIPSE_SEGMENTS, HYPERBOLA_ASYMPTOTE_FRACTION,
    HYPERBOLA_MAX_DISPLAY_AU, HYPERBOLA_POINTS, KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE, MU_SUN_KM3_S2,
)

"""
PHYSICS MODULE
--------------
This module handles all the orbital mechanics calculations required to position the Sun's
planets and the interstellar comet 3I/ATLAS in 3D space at a specific simulated instant.

Key Concepts:
1.  **Orbital Elements**: The numbers that define an orbit.
    - Semi-Major Axis (a): The size of the orbit (always a positive magnitude here).
    - Eccentricity (e): The shape (0 <= e < 1 = ellipse, e > 1 = hyperbola, e = 1 unsupported).
    - Inclination (i), Longitude of Ascending Node (Omega), Argument of Perihelion (omega):
      the orientation of the orbit in space.

2.  **Kepler's Equation**: Relates time to position in the orbit.
    - Ellipse:   M = E - e * sin(E)
    - Hyperbola: M = e * sinh(H) - H
    Mean Anomaly (M) grows linearly with time; we solve for E (or H) numerically.

3.  **Coordinate Transformation**:
    - Position in the 2D "Orbital Plane" (x', y') from radius and True Anomaly.
    - Rotated by (omega, i, Omega) into heliocentric ecliptic coordinates.
    - Mapped into the scene, where Y is "up" (out of the ecliptic) and 1 AU = AU_SCALE units.

Everything here is a pure function: same inputs, same outputs, no hidden state.
"""

logger = logging.getLogger(__name__)

TWO_PI = 2 * np.pi


class PhysicsError(Exception):
    """Raised for orbital data the solvers cannot handle (e.g. a parabolic e == 1 orbit)."""
    pass


@dataclass(frozen=True)
class KeplerSolution:
    """Outcome of a Newton-Raphson solve, so callers can judge convergence quality."""
    anomaly: float
    residual: float  # |f(anomaly)|, in radians of mean anomaly
    iterations: int
    converged: bool


def _check_elliptical(eccentricity):
    if not 0 <= eccentricity < 1:
        raise PhysicsError(f"Eccentricity e={eccentricity} is not elliptical (need 0 <= e < 1).")


def _check_hyperbolic(eccentricity):
    if not eccentricity > 1:
        raise PhysicsError(f"Eccentricity e={eccentricity} is not hyperbolic (need e > 1).")


def _elliptic_initial_guess(M, eccentricity):
    # For highly eccentric orbits, starting at E = M can overshoot and wander off.
    if eccentricity >= 0.8:
        return np.pi
    return M


def kepler_ellipse_solution(mean_anomaly_rad, eccentricity, tolerance=KEPLER_TOLERANCE,
                            max_iterations=KEPLER_MAX_ITERATIONS):
    """
    Solves Kepler's Equation: M = E - e * sin(E) for E (Eccentric Anomaly).

    The mean anomaly may be any real number; it is reduced into [0, 2*pi) first.
    Newton-Raphson starts at E = M (E = pi for e >= 0.8) and stops when the step
    is below `tolerance`.
    If `max_iterations` is reached the best value so far is returned anyway
    (fail-soft), with `converged=False` and a warning in the log.

    Args:
        mean_anomaly_rad (float): The Mean Anomaly in radians (M).
        eccentricity (float): The orbital eccentricity (e), 0 <= e < 1.
        tolerance (float): Step size at which we call it done.
        max_iterations (int): Safety limit to prevent infinite loops.

    Returns:
        KeplerSolution: The Eccentric Anomaly (E) plus convergence details.
    """
    _check_elliptical(eccentricity)
    M = float(mean_anomaly_rad) % TWO_PI

    # Newton-Raphson Iteration
    # f(E) = E - e*sin(E) - M, f'(E) = 1 - e*cos(E)
    E = _elliptic_initial_guess(M, eccentricity)
    converged = False
    iterations = 0
    for iterations in range(1, max_iterations + 1):
        delta_E = (E - eccentricity * np.sin(E) - M) / (1 - eccentricity * np.cos(E))
        E -= delta_E
        if abs(delta_E) < tolerance:
            converged = True
            break

    residual = abs(E - eccentricity * np.sin(E) - M)
    if not converged:
        logger.warning(f"Elliptic Kepler solver hit {max_iterations} iterations (M={M}, e={eccentricity}, residual={residual:.3e})")
    return KeplerSolution(float(E), float(residual), iterations, converged)


def _hyperbolic_initial_guess(M, eccentricity):
    # H = M is fine near perihelion, but sinh(M) overflows long before |M| gets large.
    # asinh(M/e) sits just below the root for large |M|, and Newton climbs up from there.
    if abs(M) <= 1.0:
        return M
    return float(np.arcsinh(M / eccentricity))


def kepler_hyperbola_solution(mean_anomaly_rad, eccentricity, tolerance=KEPLER_TOLERANCE,
                              max_iterations=KEPLER_MAX_ITERATIONS):
    """
    Solves the hyperbolic Kepler Equation: M = e * sinh(H) - H for H (Hyperbolic Anomaly).

    M is not periodic here, so no reduction is done. Same tolerance and
    iteration cap policy as the elliptic solver.

    Returns:
        KeplerSolution: The Hyperbolic Anomaly (H) plus convergence details.
    """
    _check_hyperbolic(eccentricity)
    M = float(mean_anomaly_rad)

    # f(H) = e*sinh(H) - H - M, f'(H) = e*cosh(H) - 1
    H = _hyperbolic_initial_guess(M, eccentricity)
    converged = False
    iterations = 0
    for iterations in range(1, max_iterations + 1):
        delta_H = (eccentricity * np.sinh(H) - H - M) / (eccentricity * np.cosh(H) - 1)
        H -= delta_H
        if abs(delta_H) < tolerance:
            converged = True
            break

    residual = abs(eccentricity * np.sinh(H) - H - M)
    if not converged:
        logger.warning(f"Hyperbolic Kepler solver hit {max_iterations} iterations (M={M}, e={eccentricity}, residual={residual:.3e})")
    return KeplerSolution(float(H), float(residual), iterations, converged)


def solve_kepler_ellipse(mean_anomaly_rad, eccentricity, tolerance=KEPLER_TOLERANCE,
                         max_iterations=KEPLER_MAX_ITERATIONS):
    """Eccentric Anomaly (E) in radians. See `kepler_ellipse_solution`."""
    return kepler_ellipse_solution(mean_anomaly_rad, eccentricity, tolerance, max_iterations).anomaly


def solve_kepler_hyperbola(mean_anomaly_rad, eccentricity, tolerance=KEPLER_TOLERANCE,
                           max_iterations=KEPLER_MAX_ITERATIONS):
    """Hyperbolic Anomaly (H) in radians. See `kepler_hyperbola_solution`."""
    return kepler_hyperbola_solution(mean_anomaly_rad, eccentricity, tolerance, max_iterations).anomaly


def true_anomaly(anomaly_rad, eccentricity):
    """
    Converts an Eccentric (e < 1) or Hyperbolic (e > 1) Anomaly to the True Anomaly (nu).

    Half-angle forms keep the full range and are odd in the anomaly: nu(-E) = -nu(E).
    """
    if eccentricity == 1:
        raise PhysicsError("Parabolic orbits (e = 1) have no eccentric or hyperbolic anomaly.")
    if eccentricity < 1:
        return 2 * np.arctan2(np.sqrt(1 + eccentricity) * np.sin(anomaly_rad / 2),
                              np.sqrt(1 - eccentricity) * np.cos(anomaly_rad / 2))
    return 2 * np.arctan2(np.sqrt(eccentricity + 1) * np.sinh(anomaly_rad / 2),
                          np.sqrt(eccentricity - 1) * np.cosh(anomaly_rad / 2))


def orbit_radius(semi_major_axis, eccentricity, true_anomaly_rad):
    """
    Distance from the Sun (same unit as `semi_major_axis`) at a True Anomaly.

    The conic equation: r = p / (1 + e*cos(nu)), with the semi-latus rectum
    p = a(1 - e^2) for ellipses and p = a(e^2 - 1) for hyperbolas.
    Not guarded near the hyperbolic asymptote, where 1 + e*cos(nu) -> 0.
    """
    a = np.abs(semi_major_axis)
    if eccentricity < 1:
        p = a * (1 - eccentricity ** 2)
    else:
        p = a * (eccentricity ** 2 - 1)
    return p / (1 + eccentricity * np.cos(true_anomaly_rad))


def orbital_to_cartesian(semi_major_axis, eccentricity, true_anomaly_rad,
                         arg_perihelion_deg=0.0, lon_asc_node_deg=0.0, inclination_deg=0.0,
                         scale=AU_SCALE):
    """
    Converts a point on an orbit into a 3D scene position.

    Steps:
    1. Radius from the conic equation.
    2. Position in the flat plane of the orbit (x', y').
    3. Rotate to heliocentric ecliptic coordinates. We apply 3 rotations in sequence:
       argument of perihelion (omega) around Z, inclination (i) around X,
       longitude of ascending node (Omega) around Z. The formulas below are the
       combined rotation matrix applied to (x', y', 0).
    4. Swap into scene axes: scene Y (up) = ecliptic Z, scene Z = ecliptic Y, then scale.

    `true_anomaly_rad` may be a scalar (returns shape (3,)) or an array (returns shape (N, 3)).
    """
    r = orbit_radius(semi_major_axis, eccentricity, true_anomaly_rad)
    xp = r * np.cos(true_anomaly_rad)
    yp = r * np.sin(true_anomaly_rad)

    omega = np.radians(arg_perihelion_deg)
    Omega = np.radians(lon_asc_node_deg)
    i = np.radians(inclination_deg)

    cos_O, sin_O = np.cos(Omega), np.sin(Omega)
    cos_w, sin_w = np.cos(omega), np.sin(omega)
    cos_i, sin_i = np.cos(i), np.sin(i)

    x = (cos_O * cos_w - sin_O * sin_w * cos_i) * xp + (-cos_O * sin_w - sin_O * cos_w * cos_i) * yp
    y = (sin_O * cos_w + cos_O * sin_w * cos_i) * xp + (-sin_O * sin_w + cos_O * cos_w * cos_i) * yp
    z = (sin_w * sin_i) * xp + (cos_w * sin_i) * yp

    return np.stack([x, z, y], axis=-1) * scale


def hyperbolic_mean_motion(semi_major_axis_au, mu=MU_SUN_KM3_S2):
    """Mean motion n = sqrt(mu / a^3) in rad/s, with a converted to km."""
    a_km = abs(semi_major_axis_au) * AU_KM
    return np.sqrt(mu / a_km ** 3)


def vis_viva_speed(distance_au, semi_major_axis_au, hyperbolic, mu=MU_SUN_KM3_S2):
    """
    Orbital speed in km/s from the vis-viva equation.

    Ellipse:   v = sqrt(mu * (2/r - 1/a))
    Hyperbola: v = sqrt(mu * (2/r + 1/a))   (a taken as a positive magnitude)
    """
    r_km = distance_au * AU_KM
    a_km = abs(semi_major_axis_au) * AU_KM
    if hyperbolic:
        return float(np.sqrt(mu * (2 / r_km + 1 / a_km)))
    return float(np.sqrt(mu * (2 / r_km - 1 / a_km)))


def calculate_orbit_points(semi_major_axis, eccentricity, segments=ELLIPSE_SEGMENTS, scale=AU_SCALE):
    """
    Generates the points of a full elliptical orbit, for drawing orbit lines.

    Instead of calculating for a specific time, this iterates the True Anomaly
    through the full 0 to 2*pi (endpoint included, so the loop closes) to trace the shape.
    The ellipse is drawn flat in the ecliptic with its perihelion on +X.

    Returns:
        np.ndarray: shape (segments + 1, 3) in scene units.
    """
    _check_elliptical(eccentricity)
    nu_anomalies = np.linspace(0, TWO_PI, segments + 1)
    return orbital_to_cartesian(semi_major_axis, eccentricity, nu_anomalies, scale=scale)


def calculate_hyperbolic_orbit_points(semi_major_axis, eccentricity, arg_perihelion_deg,
                                      lon_asc_node_deg, inclination_deg,
                                      num_points=HYPERBOLA_POINTS,
                                      asymptote_fraction=HYPERBOLA_ASYMPTOTE_FRACTION,
                                      max_distance_au=HYPERBOLA_MAX_DISPLAY_AU, scale=AU_SCALE):
    """
    Generates the visible stretch of a hyperbolic trajectory.

    The True Anomaly of a hyperbola never reaches the asymptote angle acos(-1/e),
    so we sample symmetrically a little inside it, and drop any point farther
    than `max_distance_au` so the runaway tails stay off screen.

    Returns:
        np.ndarray: shape (N, 3) in scene units, N <= num_points.
    """
    _check_hyperbolic(eccentricity)
    nu_max = np.arccos(-1 / eccentricity) * asymptote_fraction
    nu_anomalies = np.linspace(-nu_max, nu_max, num_points)

    r_distances = orbit_radius(semi_major_axis, eccentricity, nu_anomalies)
    visible = (r_distances > 0) & (r_distances < max_distance_au)

    return orbital_to_cartesian(semi_major_axis, eccentricity, nu_anomalies[visible],
                                arg_perihelion_deg, lon_asc_node_deg, inclination_deg, scale=scale)

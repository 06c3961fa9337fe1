"""Keplerian orbital position solver.

Solves Kepler's equation for the eccentric anomaly and transforms
classical orbital elements into Cartesian positions in the reference
frame of the central body. Only bound (elliptical) orbits are supported.

All angles in radians. Lengths are in whatever unit the semi-major
axis is given in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np

from utils.constants import (
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    SECONDS_PER_DAY,
    TWO_PI,
)

if TYPE_CHECKING:
    from core.bodies import OrbitalElements


class OrbitalMechanicsError(Exception):
    """Base class for orbit computation failures."""


class UnsupportedOrbitError(OrbitalMechanicsError):
    """Raised for elements outside the bound-orbit domain (e >= 1, a <= 0)."""

    def __init__(self, message: str, eccentricity: float = float("nan"),
                 semi_major_axis: float = float("nan")):
        self.eccentricity = eccentricity
        self.semi_major_axis = semi_major_axis
        super().__init__(message)


class KeplerConvergenceError(OrbitalMechanicsError):
    """Raised when Newton-Raphson hits its iteration cap."""

    def __init__(self, message: str, solution: "KeplerSolution"):
        self.solution = solution
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class KeplerSolution:
    """Outcome of solving E - e*sin(E) = M."""

    eccentric_anomaly: float  # radians
    iterations: int
    residual: float  # |E - e*sin(E) - M| at the returned E
    converged: bool


def check_bound_orbit(semi_major_axis: float, eccentricity: float) -> None:
    """Raise UnsupportedOrbitError unless 0 <= e < 1 and a is positive and finite."""
    if not 0.0 <= eccentricity < 1.0:
        raise UnsupportedOrbitError(
            f"Eccentricity {eccentricity} is outside [0, 1); "
            "parabolic and hyperbolic trajectories are not supported",
            eccentricity=eccentricity,
            semi_major_axis=semi_major_axis,
        )
    if not (math.isfinite(semi_major_axis) and semi_major_axis > 0.0):
        raise UnsupportedOrbitError(
            f"Semi-major axis {semi_major_axis} must be positive and finite",
            eccentricity=eccentricity,
            semi_major_axis=semi_major_axis,
        )


def solve_kepler(
    mean_anomaly: float,
    eccentricity: float,
    tolerance: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> KeplerSolution:
    """Solve Kepler's equation for the eccentric anomaly.

    Newton-Raphson from E0 = M. Stops as soon as the residual of the
    current estimate is below ``tolerance``; after ``max_iterations``
    updates the result is returned with ``converged=False``.

    Args:
        mean_anomaly: M in radians
        eccentricity: e in [0, 1)
        tolerance: residual threshold
        max_iterations: cap on Newton updates

    Returns:
        KeplerSolution for the last estimate.

    Raises:
        UnsupportedOrbitError: e outside [0, 1).
    """
    if not 0.0 <= eccentricity < 1.0:
        raise UnsupportedOrbitError(
            f"Cannot solve Kepler's equation for e={eccentricity}",
            eccentricity=eccentricity,
        )

    e = eccentricity
    m = mean_anomaly
    ecc_anomaly = m

    for iteration in range(max_iterations):
        residual = ecc_anomaly - e * math.sin(ecc_anomaly) - m
        if abs(residual) < tolerance:
            return KeplerSolution(ecc_anomaly, iteration, abs(residual), True)
        ecc_anomaly -= residual / (1.0 - e * math.cos(ecc_anomaly))

    residual = abs(ecc_anomaly - e * math.sin(ecc_anomaly) - m)
    return KeplerSolution(
        ecc_anomaly, max_iterations, residual, residual < tolerance
    )


def true_anomaly(eccentric_anomaly: float, eccentricity: float) -> float:
    """True anomaly from eccentric anomaly (radians)."""
    e = eccentricity
    half = eccentric_anomaly / 2.0
    return 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(half),
        math.sqrt(1.0 - e) * math.cos(half),
    )


def orbital_radius(
    semi_major_axis: float, eccentricity: float, eccentric_anomaly: float
) -> float:
    """Distance from the focus: r = a * (1 - e*cos(E))."""
    return semi_major_axis * (1.0 - eccentricity * math.cos(eccentric_anomaly))


def rotation_matrix(
    inclination: float, ascending_node: float, periapsis_arg: float
) -> np.ndarray:
    """Perifocal -> reference frame rotation, R3(-Omega) R1(-i) R3(-omega).

    Returns:
        (3, 3) matrix whose first two columns map (x_orb, y_orb).
    """
    cos_o, sin_o = math.cos(ascending_node), math.sin(ascending_node)
    cos_w, sin_w = math.cos(periapsis_arg), math.sin(periapsis_arg)
    cos_i, sin_i = math.cos(inclination), math.sin(inclination)

    return np.array([
        [cos_o * cos_w - sin_o * sin_w * cos_i,
         -cos_o * sin_w - sin_o * cos_w * cos_i,
         sin_o * sin_i],
        [sin_o * cos_w + cos_o * sin_w * cos_i,
         -sin_o * sin_w + cos_o * cos_w * cos_i,
         -cos_o * sin_i],
        [sin_w * sin_i,
         cos_w * sin_i,
         cos_i],
    ])


def perifocal_to_reference(
    x_orb: float,
    y_orb: float,
    inclination: float,
    ascending_node: float,
    periapsis_arg: float,
) -> np.ndarray:
    """Rotate orbital-plane coordinates into the reference frame."""
    rot = rotation_matrix(inclination, ascending_node, periapsis_arg)
    return rot[:, 0] * x_orb + rot[:, 1] * y_orb


def orbital_position(
    semi_major_axis: float,
    eccentricity: float,
    inclination: float,
    ascending_node: float,
    periapsis_arg: float,
    mean_anomaly: float,
    tolerance: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> np.ndarray:
    """Cartesian position of a body from its classical elements.

    Returns:
        [x, y, z] relative to the central body, in the units of
        ``semi_major_axis``.

    Raises:
        UnsupportedOrbitError: e outside [0, 1) or a not positive.
        KeplerConvergenceError: Kepler's equation did not converge.
    """
    check_bound_orbit(semi_major_axis, eccentricity)

    solution = solve_kepler(mean_anomaly, eccentricity, tolerance, max_iterations)
    if not solution.converged:
        raise KeplerConvergenceError(
            f"Kepler's equation did not converge for e={eccentricity}, "
            f"M={mean_anomaly} after {solution.iterations} iterations "
            f"(residual {solution.residual:.3e})",
            solution,
        )

    nu = true_anomaly(solution.eccentric_anomaly, eccentricity)
    r = orbital_radius(semi_major_axis, eccentricity, solution.eccentric_anomaly)

    return perifocal_to_reference(
        r * math.cos(nu),
        r * math.sin(nu),
        inclination,
        ascending_node,
        periapsis_arg,
    )


def wrap_angle(angle: float) -> float:
    """Reduce an angle to [0, 2*pi)."""
    wrapped = math.fmod(angle, TWO_PI)
    if wrapped < 0.0:
        wrapped += TWO_PI
    return wrapped


def position_from_elements(
    elements: "OrbitalElements", jd: Optional[float] = None
) -> np.ndarray:
    """Position of a body at Julian Date ``jd`` (epoch mean anomaly if None)."""
    mean_anomaly = elements.mean_anomaly if jd is None else elements.mean_anomaly_at(jd)
    return orbital_position(
        elements.semi_major_axis,
        elements.eccentricity,
        elements.inclination,
        elements.ascending_node,
        elements.periapsis_arg,
        wrap_angle(mean_anomaly),
    )


def orbit_path(elements: "OrbitalElements", n_points: int = 180) -> np.ndarray:
    """Sample a full orbit as a closed polyline.

    Points are spaced uniformly in eccentric anomaly, which is denser
    near periapsis than sampling in mean anomaly and needs no solver.

    Returns:
        (n_points + 1, 3) array; the last point repeats the first.
    """
    check_bound_orbit(elements.semi_major_axis, elements.eccentricity)
    if n_points < 3:
        raise ValueError(f"Need at least 3 points for an orbit path, got {n_points}")

    a = elements.semi_major_axis
    e = elements.eccentricity
    ecc_anomalies = np.linspace(0.0, TWO_PI, n_points + 1)

    # Perifocal coordinates straight from E: x = a(cos E - e), y = b sin E
    b = a * math.sqrt(1.0 - e * e)
    x_orb = a * (np.cos(ecc_anomalies) - e)
    y_orb = b * np.sin(ecc_anomalies)

    rot = rotation_matrix(
        elements.inclination, elements.ascending_node, elements.periapsis_arg
    )
    points = np.outer(x_orb, rot[:, 0]) + np.outer(y_orb, rot[:, 1])
    points[-1] = points[0]
    return points


def orbital_period_days(semi_major_axis_km: float, mu: float) -> float:
    """Orbital period in days for semi-major axis (km) and mu (km^3/s^2)."""
    if semi_major_axis_km <= 0 or mu <= 0:
        raise ValueError("Semi-major axis and mu must be positive")
    return TWO_PI * math.sqrt(semi_major_axis_km ** 3 / mu) / SECONDS_PER_DAY


def mean_motion_from_period(period_days: float) -> float:
    """Mean motion in rad/day from an orbital period in days."""
    if not (math.isfinite(period_days) and period_days > 0):
        raise ValueError(f"Orbital period must be positive, got {period_days}")
    return TWO_PI / period_days

"""Tests for the Keplerian position solver."""

import math

import numpy as np
import pytest

from core.bodies import OrbitalElements
from core.kepler import (
    KeplerConvergenceError,
    UnsupportedOrbitError,
    check_bound_orbit,
    mean_motion_from_period,
    orbit_path,
    orbital_period_days,
    orbital_position,
    orbital_radius,
    perifocal_to_reference,
    position_from_elements,
    rotation_matrix,
    solve_kepler,
    true_anomaly,
    wrap_angle,
)
from utils.constants import AU_KM, JD_J2000, MU_SUN

TOL = 1e-6


@pytest.mark.parametrize("e", np.linspace(0.0, 0.9, 10))
@pytest.mark.parametrize("m", np.linspace(0.0, 2 * math.pi, 24, endpoint=False))
def test_solution_satisfies_keplers_equation(e, m):
    sol = solve_kepler(m, e, TOL)
    assert sol.converged
    assert abs(sol.eccentric_anomaly - e * math.sin(sol.eccentric_anomaly) - m) < TOL
    assert sol.residual < TOL


@pytest.mark.parametrize("m", [0.0, 0.3, 1.0, math.pi, 4.5, 6.2])
def test_circular_orbit_returns_mean_anomaly_exactly(m):
    sol = solve_kepler(m, 0.0)
    assert sol.eccentric_anomaly == m
    assert sol.iterations == 0


@pytest.mark.parametrize("e", [0.0, 0.2, 0.6, 0.9])
@pytest.mark.parametrize("m", [0.1, 1.5, 3.0, 5.0])
def test_true_anomaly_reproduces_radius(e, m):
    a = 2.5
    sol = solve_kepler(m, e)
    nu = true_anomaly(sol.eccentric_anomaly, e)
    r_from_e = orbital_radius(a, e, sol.eccentric_anomaly)
    r_from_nu = a * (1 - e * e) / (1 + e * math.cos(nu))
    assert r_from_nu == pytest.approx(r_from_e, rel=1e-9)


def test_zero_angles_give_unrotated_plane_coordinates():
    pos = perifocal_to_reference(3.0, -4.0, 0.0, 0.0, 0.0)
    np.testing.assert_allclose(pos, [3.0, -4.0, 0.0], atol=1e-15)

    pos = orbital_position(1.0, 0.4, 0.0, 0.0, 0.0, 2.0)
    assert pos[2] == 0.0


def test_one_au_circular_at_zero_mean_anomaly():
    pos = orbital_position(AU_KM, 0.0, 0.0, 0.0, 0.0, 0.0)
    np.testing.assert_allclose(pos, [AU_KM, 0.0, 0.0], atol=1e-6)


def test_one_au_circular_at_half_orbit():
    pos = orbital_position(AU_KM, 0.0, 0.0, 0.0, 0.0, math.pi)
    np.testing.assert_allclose(pos, [-AU_KM, 0.0, 0.0], atol=1e-3)


@pytest.mark.parametrize("a, e", [(2.0, 0.5), (AU_KM, 0.0167), (1.0, 0.95)])
def test_periapsis_passage_at_zero_mean_anomaly(a, e):
    pos = orbital_position(a, e, 0.0, 0.0, 0.0, 0.0)
    np.testing.assert_allclose(pos, [a * (1 - e), 0.0, 0.0], atol=1e-9 * a)
    assert solve_kepler(0.0, e).iterations == 0


@pytest.mark.parametrize("shift", [0.5, -1.2, 3.0])
def test_circular_orbit_depends_only_on_argument_of_latitude(shift):
    base = orbital_position(1.0, 0.0, 0.3, 0.7, 0.4, 1.0)
    shifted = orbital_position(1.0, 0.0, 0.3, 0.7, 0.4 + shift, 1.0 - shift)
    np.testing.assert_allclose(shifted, base, atol=1e-12)


def test_rotation_matrix_is_orthonormal():
    rot = rotation_matrix(0.4, 1.2, 2.3)
    np.testing.assert_allclose(rot @ rot.T, np.eye(3), atol=1e-12)
    assert np.linalg.det(rot) == pytest.approx(1.0)


def test_inclined_orbit_leaves_the_plane():
    pos = orbital_position(1.0, 0.0, math.pi / 2, 0.0, 0.0, math.pi / 2)
    np.testing.assert_allclose(pos, [0.0, 0.0, 1.0], atol=1e-9)


def test_position_distance_stays_between_apsides():
    a, e = 3.0, 0.5
    for m in np.linspace(0, 2 * math.pi, 50):
        r = np.linalg.norm(orbital_position(a, e, 0.3, 1.0, 2.0, m))
        assert a * (1 - e) - 1e-9 <= r <= a * (1 + e) + 1e-9


@pytest.mark.parametrize("m", [math.pi, math.pi - 1e-3, math.pi + 1e-3, 0.01])
def test_high_eccentricity_converges_or_reports(m):
    sol = solve_kepler(m, 0.999, max_iterations=50)
    assert sol.iterations <= 50
    if sol.converged:
        assert sol.residual < TOL


def test_iteration_cap_reports_non_convergence():
    sol = solve_kepler(0.1, 0.99, max_iterations=1)
    assert not sol.converged
    assert sol.iterations == 1
    assert sol.residual >= TOL

    with pytest.raises(KeplerConvergenceError) as excinfo:
        orbital_position(1.0, 0.99, 0.0, 0.0, 0.0, 0.1, max_iterations=1)
    assert excinfo.value.solution.converged is False


@pytest.mark.parametrize("e", [1.0, 1.5, -0.1, float("nan")])
def test_unbound_eccentricity_is_rejected(e):
    with pytest.raises(UnsupportedOrbitError) as excinfo:
        orbital_position(1.0, e, 0.0, 0.0, 0.0, 0.0)
    if not math.isnan(e):
        assert excinfo.value.eccentricity == e

    with pytest.raises(UnsupportedOrbitError):
        solve_kepler(0.5, e)


@pytest.mark.parametrize("a", [0.0, -1.0, float("inf")])
def test_non_positive_semi_major_axis_is_rejected(a):
    with pytest.raises(UnsupportedOrbitError):
        check_bound_orbit(a, 0.1)


def test_wrap_angle():
    assert wrap_angle(-0.5) == pytest.approx(2 * math.pi - 0.5)
    assert wrap_angle(7.0) == pytest.approx(7.0 - 2 * math.pi)
    assert wrap_angle(0.0) == 0.0


def test_position_from_elements_advances_with_mean_motion():
    period = 100.0
    elements = OrbitalElements(
        semi_major_axis=AU_KM,
        eccentricity=0.0,
        inclination=0.0,
        ascending_node=0.0,
        periapsis_arg=0.0,
        mean_anomaly=0.0,
        epoch_jd=JD_J2000,
        mean_motion=mean_motion_from_period(period),
    )
    np.testing.assert_allclose(
        position_from_elements(elements), [AU_KM, 0.0, 0.0], atol=1e-3
    )
    quarter = position_from_elements(elements, JD_J2000 + period / 4)
    np.testing.assert_allclose(quarter, [0.0, AU_KM, 0.0], atol=1.0)
    # A full period later the body is back where it started
    full = position_from_elements(elements, JD_J2000 + 10 * period)
    np.testing.assert_allclose(full, [AU_KM, 0.0, 0.0], atol=1.0)


def test_orbit_path_is_closed_and_on_the_ellipse():
    elements = OrbitalElements(2.0, 0.3, 0.2, 0.5, 1.0, 0.0)
    path = orbit_path(elements, 90)
    assert path.shape == (91, 3)
    np.testing.assert_allclose(path[0], path[-1])

    radii = np.linalg.norm(path, axis=1)
    assert radii.min() == pytest.approx(elements.periapsis_distance, rel=1e-6)
    assert radii.max() == pytest.approx(elements.apoapsis_distance, rel=1e-3)


def test_orbit_path_rejects_too_few_points():
    with pytest.raises(ValueError):
        orbit_path(OrbitalElements(1.0, 0.1, 0.0, 0.0, 0.0, 0.0), 2)


def test_earth_period_from_semi_major_axis():
    assert orbital_period_days(AU_KM, MU_SUN) == pytest.approx(365.25, rel=1e-3)


def test_mean_motion_requires_positive_period():
    assert mean_motion_from_period(2 * math.pi) == pytest.approx(1.0)
    with pytest.raises(ValueError):
        mean_motion_from_period(0.0)

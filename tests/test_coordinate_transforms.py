"""Tests for km -> render-unit transformations."""

import numpy as np
import pytest

from core.coordinate_transforms import (
    camera_distance,
    heliocentric_to_render,
    moon_offset_to_render,
    moon_render_radius,
    planet_render_radius,
)
from utils.constants import AU_KM, MIN_BODY_RENDER_RADIUS, MOON_DISTANCE_SCALE, RENDER_UNITS_PER_AU


def test_one_au_maps_to_render_scale():
    np.testing.assert_allclose(
        heliocentric_to_render(np.array([AU_KM, 0.0, -AU_KM])),
        [RENDER_UNITS_PER_AU, 0.0, -RENDER_UNITS_PER_AU],
    )


def test_heliocentric_to_render_accepts_paths():
    path = np.full((5, 3), AU_KM * 2)
    assert heliocentric_to_render(path).shape == (5, 3)


def test_body_radii_have_a_floor():
    assert planet_render_radius(69911.0) > planet_render_radius(6371.0)
    assert planet_render_radius(1.0) == MIN_BODY_RENDER_RADIUS
    assert moon_render_radius(0.5) == MIN_BODY_RENDER_RADIUS


def test_moon_offset_preserves_direction():
    offset = moon_offset_to_render(np.array([0.0, 384400.0, 0.0]), parent_radius_render=2.0)
    assert offset[0] == 0.0
    assert offset[2] == 0.0
    assert offset[1] == pytest.approx(2.0 + 384400.0 * MOON_DISTANCE_SCALE)


def test_moon_offset_clears_parent_surface():
    offsets = moon_offset_to_render(
        np.array([[1.0, 0.0, 0.0], [0.0, 0.0, -50.0]]), parent_radius_render=3.0
    )
    assert np.all(np.linalg.norm(offsets, axis=1) > 3.0)


def test_camera_distance():
    assert camera_distance(np.array([3.0, 4.0, 0.0]), np.zeros(3)) == pytest.approx(5.0)

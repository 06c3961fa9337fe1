"""Physical -> render coordinate transformations.

The scene cannot use one linear scale: at true scale every planet is
sub-pixel and every moon sits inside its planet. Heliocentric
distances use KM_TO_RENDER, body radii are exaggerated separately, and
moon orbits are pushed outside the (exaggerated) parent radius.

All inputs in km, outputs in render units.
"""

from __future__ import annotations

import numpy as np

from utils.constants import (
    KM_TO_RENDER,
    MIN_BODY_RENDER_RADIUS,
    MOON_DISTANCE_SCALE,
    MOON_SIZE_SCALE,
    PLANET_SIZE_SCALE,
)


def heliocentric_to_render(position_km: np.ndarray) -> np.ndarray:
    """Scale heliocentric km (single point or (N, 3) array) to render units."""
    return np.asarray(position_km, dtype=np.float64) * KM_TO_RENDER


def planet_render_radius(mean_radius_km: float) -> float:
    """Exaggerated planet sphere radius."""
    return max(mean_radius_km * PLANET_SIZE_SCALE, MIN_BODY_RENDER_RADIUS)


def moon_render_radius(mean_radius_km: float) -> float:
    return max(mean_radius_km * MOON_SIZE_SCALE, MIN_BODY_RENDER_RADIUS)


def moon_offset_to_render(
    offset_km: np.ndarray, parent_radius_render: float
) -> np.ndarray:
    """Map a planet-relative moon position (km) to a render offset.

    Direction is preserved; the distance becomes the parent's render
    radius plus the scaled orbital distance. Works on a single point
    or an (N, 3) array.
    """
    offset = np.asarray(offset_km, dtype=np.float64)
    norms = np.linalg.norm(offset, axis=-1, keepdims=True)
    safe = np.maximum(norms, 1e-12)
    distance = parent_radius_render + norms * MOON_DISTANCE_SCALE
    return offset / safe * distance


def camera_distance(camera_position: np.ndarray, target: np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(camera_position) - np.asarray(target)))

"""Orbit path rendering for planets, moons and asteroids.

Each orbit is a closed polyline built once from sampled Keplerian
positions. Moon orbits are built relative to their planet and follow
it by moving the actor, not by rebuilding the mesh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pyvista as pv

from utils.constants import (
    ASTEROID_ORBIT_COLOR,
    MOON_ORBIT_COLOR,
    PLANET_ORBIT_COLOR,
)

logger = logging.getLogger(__name__)

DEFAULT_ORBIT_COLORS: dict[str, str] = {
    "planet": PLANET_ORBIT_COLOR,
    "moon": MOON_ORBIT_COLOR,
    "asteroid": ASTEROID_ORBIT_COLOR,
}


@dataclass
class OrbitPath:
    """Data holder for a single orbit path."""

    key: str
    kind: str
    mesh: Optional[pv.PolyData] = None
    actor: object = None
    points: Optional[np.ndarray] = None  # (N, 3) render coords
    color: str = PLANET_ORBIT_COLOR
    visible: bool = True


class OrbitRenderer:
    """Manages orbit path rendering for all bodies."""

    def __init__(self, plotter: pv.Plotter):
        self._plotter = plotter
        self._orbits: dict[str, OrbitPath] = {}
        self._kind_visible: dict[str, bool] = {kind: True for kind in DEFAULT_ORBIT_COLORS}

    def add_orbit(
        self,
        key: str,
        points: np.ndarray,
        kind: str = "planet",
        color: Optional[str] = None,
        origin: Optional[np.ndarray] = None,
    ) -> None:
        """Add an orbit path.

        Args:
            key: body key the orbit belongs to
            points: shape (N, 3) render coordinates, relative to ``origin``
            kind: "planet", "moon" or "asteroid"
            color: hex color, defaults per kind
            origin: actor position (parent body for moons)
        """
        if key in self._orbits:
            self.remove_orbit(key)

        actual_color = color or DEFAULT_ORBIT_COLORS.get(kind, PLANET_ORBIT_COLOR)
        mesh = self.create_path_mesh(points)

        actor = self._plotter.add_mesh(
            mesh,
            color=actual_color,
            line_width=1 if kind == "moon" else 1.5,
            opacity=0.6 if kind == "asteroid" else 0.9,
            pickable=False,
            lighting=False,
            name=f"orbit_{key}",
        )
        if origin is not None:
            actor.SetPosition(*origin)

        orbit = OrbitPath(
            key=key,
            kind=kind,
            mesh=mesh,
            actor=actor,
            points=np.asarray(points, dtype=np.float64).copy(),
            color=actual_color,
        )
        if not self._kind_visible.get(kind, True):
            actor.SetVisibility(False)

        self._orbits[key] = orbit

    def remove_orbit(self, key: str) -> None:
        orbit = self._orbits.pop(key, None)
        if orbit is not None and orbit.actor is not None:
            self._plotter.remove_actor(orbit.actor)

    def set_origin(self, key: str, origin: np.ndarray) -> None:
        """Move an orbit with its central body (moons)."""
        orbit = self._orbits.get(key)
        if orbit is not None and orbit.actor is not None:
            orbit.actor.SetPosition(*origin)

    def set_visibility(self, key: str, visible: bool) -> None:
        """Show or hide a specific orbit."""
        orbit = self._orbits.get(key)
        if orbit is None:
            return
        orbit.visible = visible
        if orbit.actor is not None:
            orbit.actor.SetVisibility(visible and self._kind_visible.get(orbit.kind, True))

    def toggle_kind(self, kind: str, visible: bool) -> None:
        """Show or hide every orbit of one kind."""
        self._kind_visible[kind] = visible
        for orbit in self._orbits.values():
            if orbit.kind == kind and orbit.actor is not None:
                orbit.actor.SetVisibility(visible and orbit.visible)

    def toggle_all(self, visible: bool) -> None:
        for kind in list(self._kind_visible):
            self.toggle_kind(kind, visible)

    def highlight(self, key: Optional[str], color: str) -> None:
        """Recolor one orbit, restoring every other orbit's own color."""
        for orbit_key, orbit in self._orbits.items():
            if orbit.actor is None:
                continue
            rgb = pv.Color(color if orbit_key == key else orbit.color).float_rgb
            orbit.actor.GetProperty().SetColor(rgb)

    @staticmethod
    def create_path_mesh(points: np.ndarray) -> pv.PolyData:
        """Create a polyline mesh from ordered points."""
        points = np.asarray(points, dtype=np.float64)
        n = len(points)
        if n < 2:
            return pv.PolyData(points)

        lines = np.empty(n + 1, dtype=np.int64)
        lines[0] = n
        lines[1:] = np.arange(n)

        return pv.PolyData(points, lines=lines)

    @property
    def orbits(self) -> dict[str, OrbitPath]:
        return self._orbits

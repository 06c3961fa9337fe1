"""Asteroid marker rendering with labels and selection highlight.

Asteroids are far too small to show at scale, so each one is a small
fixed-size sphere moved to its propagated position every tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pyvista as pv

from utils.constants import (
    ASTEROID_COLOR,
    ASTEROID_MARKER_RADIUS,
    HAZARDOUS_ASTEROID_COLOR,
    SELECTION_COLOR,
)

logger = logging.getLogger(__name__)


@dataclass
class AsteroidVisual:
    """Holds all VTK actors for one asteroid."""

    key: str
    name: str
    color: str
    marker_actor: object = None
    label_actor: object = None
    is_selected: bool = False
    is_visible: bool = True
    current_pos: Optional[np.ndarray] = None


class AsteroidRenderer:
    """Manages asteroid markers and labels."""

    def __init__(self, plotter: pv.Plotter):
        self._plotter = plotter
        self._asteroids: dict[str, AsteroidVisual] = {}
        self._selected_key: Optional[str] = None
        self._show_labels: bool = False
        self._show_all: bool = True
        self._marker_template = pv.Sphere(
            radius=ASTEROID_MARKER_RADIUS,
            theta_resolution=12,
            phi_resolution=12,
        )

    def add_asteroid(
        self,
        key: str,
        name: str,
        position: np.ndarray,
        hazardous: bool = False,
    ) -> None:
        """Create a marker sphere at ``position`` (render units)."""
        if key in self._asteroids:
            self.remove_asteroid(key)

        color = HAZARDOUS_ASTEROID_COLOR if hazardous else ASTEROID_COLOR
        actor = self._plotter.add_mesh(
            self._marker_template.copy(),
            color=color,
            smooth_shading=True,
            name=f"asteroid_{key}",
        )
        actor.SetPosition(*position)
        actor.SetVisibility(self._show_all)

        vis = AsteroidVisual(
            key=key,
            name=name,
            color=color,
            marker_actor=actor,
            current_pos=np.array(position, dtype=np.float64),
        )
        if self._show_labels:
            self._add_label(vis)

        self._asteroids[key] = vis

    def remove_asteroid(self, key: str) -> None:
        vis = self._asteroids.pop(key, None)
        if vis is None:
            return
        for actor in (vis.marker_actor, vis.label_actor):
            if actor is not None:
                self._plotter.remove_actor(actor)
        if self._selected_key == key:
            self._selected_key = None

    def update_position(self, key: str, position: np.ndarray) -> None:
        """Move an asteroid marker. Called each tick."""
        vis = self._asteroids.get(key)
        if vis is None:
            return

        vis.current_pos = np.array(position, dtype=np.float64)
        vis.marker_actor.SetPosition(*vis.current_pos)

        if vis.label_actor is not None:
            self._plotter.remove_actor(vis.label_actor)
            vis.label_actor = None
            if self._show_labels and vis.is_visible and self._show_all:
                self._add_label(vis)

    def select(self, key: Optional[str]) -> None:
        """Highlight selected asteroid, deselect previous."""
        if self._selected_key and self._selected_key in self._asteroids:
            prev = self._asteroids[self._selected_key]
            prev.is_selected = False
            prev.marker_actor.GetProperty().SetColor(pv.Color(prev.color).float_rgb)

        self._selected_key = key
        if key in self._asteroids:
            vis = self._asteroids[key]
            vis.is_selected = True
            vis.marker_actor.GetProperty().SetColor(pv.Color(SELECTION_COLOR).float_rgb)

    def set_visibility(self, key: str, visible: bool) -> None:
        """Show or hide a specific asteroid."""
        vis = self._asteroids.get(key)
        if vis is None:
            return
        vis.is_visible = visible
        vis.marker_actor.SetVisibility(visible and self._show_all)
        if vis.label_actor is not None:
            vis.label_actor.SetVisibility(visible and self._show_all)

    def toggle_all(self, visible: bool) -> None:
        self._show_all = visible
        for vis in self._asteroids.values():
            vis.marker_actor.SetVisibility(visible and vis.is_visible)
            if vis.label_actor is not None:
                vis.label_actor.SetVisibility(visible and vis.is_visible)

    def toggle_labels(self, visible: bool) -> None:
        """Toggle labels for all asteroids."""
        self._show_labels = visible
        for vis in self._asteroids.values():
            if visible and vis.is_visible:
                if vis.label_actor is None:
                    self._add_label(vis)
                else:
                    vis.label_actor.SetVisibility(True)
            elif vis.label_actor is not None:
                vis.label_actor.SetVisibility(False)

    def key_for_actor(self, actor: object) -> Optional[str]:
        for key, vis in self._asteroids.items():
            if actor is vis.marker_actor:
                return key
        return None

    def _add_label(self, vis: AsteroidVisual) -> None:
        if vis.current_pos is None:
            return

        label_pos = vis.current_pos + np.array([0.0, 0.0, ASTEROID_MARKER_RADIUS * 2])
        point = pv.PolyData(label_pos.reshape(1, 3))
        point["labels"] = [vis.name]

        vis.label_actor = self._plotter.add_point_labels(
            point,
            "labels",
            font_size=9,
            point_size=0,
            text_color="#F5F5F5",
            shape_opacity=0.0,
            show_points=False,
            always_visible=True,
            name=f"label_{vis.key}",
        )

    @property
    def asteroids(self) -> dict[str, AsteroidVisual]:
        return self._asteroids

    @property
    def selected_key(self) -> Optional[str]:
        return self._selected_key

    @property
    def show_all(self) -> bool:
        return self._show_all

"""Sun, planet and moon rendering with textures, spin and level of detail.

Each body is a UV-mapped sphere created once at the origin and moved
by its actor position, so per-frame updates never touch mesh points.
Planets also get a constant screen-size point marker that replaces
the sphere when the camera is far away.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import pyvista as pv
from PIL import Image, ImageDraw

from core.coordinate_transforms import camera_distance
from utils.constants import (
    DEFAULT_BODY_COLOR,
    DEFAULT_TEXTURE,
    LOD_MARKER_DISTANCE,
    PLANET_COLORS,
    PLANET_MARKER_POINT_SIZE,
    SELECTION_COLOR,
    SUN_COLOR,
    SUN_RENDER_RADIUS,
    SUN_TEXTURE,
)

logger = logging.getLogger(__name__)


@dataclass
class BodyVisual:
    """Holds the VTK actors for one sphere body."""

    key: str
    name: str
    radius: float
    color: str
    mesh: Optional[pv.PolyData] = None
    actor: object = None
    marker_actor: object = None
    label_actor: object = None
    position: Optional[np.ndarray] = None
    spin_deg: float = 0.0
    is_visible: bool = True
    uses_marker: bool = False
    is_selected: bool = False


class BodyRenderer:
    """Manages sphere bodies: textures, placement, spin and LOD swap."""

    def __init__(self, plotter: pv.Plotter, textures_dir: Optional[Path] = None):
        self._plotter = plotter
        self._textures_dir = textures_dir
        self._bodies: dict[str, BodyVisual] = {}
        self._texture_cache: dict[str, Optional[pv.Texture]] = {}
        self._show_labels: bool = True
        self._lod_enabled: bool = True
        self._selected_key: Optional[str] = None

    def add_sun(self) -> BodyVisual:
        """Create the Sun at the origin (unlit, textured if available)."""
        mesh = self.create_sphere_mesh(SUN_RENDER_RADIUS)
        tex = self._load_texture(SUN_TEXTURE, SUN_COLOR)

        actor = self._plotter.add_mesh(
            mesh,
            texture=tex,
            color=None if tex is not None else SUN_COLOR,
            lighting=False,
            smooth_shading=True,
            name="sun",
        )
        vis = BodyVisual(
            key="sun",
            name="Sun",
            radius=SUN_RENDER_RADIUS,
            color=SUN_COLOR,
            mesh=mesh,
            actor=actor,
            position=np.zeros(3),
        )
        self._bodies["sun"] = vis
        return vis

    def add_body(
        self,
        key: str,
        name: str,
        radius: float,
        position: np.ndarray,
        texture_name: Optional[str] = None,
        color: Optional[str] = None,
        with_marker: bool = False,
    ) -> BodyVisual:
        """Create a textured sphere at ``position`` (render units)."""
        if key in self._bodies:
            self.remove_body(key)

        actual_color = color or PLANET_COLORS.get(name.lower(), DEFAULT_BODY_COLOR)
        mesh = self.create_sphere_mesh(radius)
        tex = self._load_texture(texture_name, actual_color) if texture_name else None

        if tex is not None:
            actor = self._plotter.add_mesh(
                mesh, texture=tex, smooth_shading=True, name=f"body_{key}"
            )
        else:
            actor = self._plotter.add_mesh(
                mesh, color=actual_color, smooth_shading=True, name=f"body_{key}"
            )
        actor.SetPosition(*position)

        vis = BodyVisual(
            key=key,
            name=name,
            radius=radius,
            color=actual_color,
            mesh=mesh,
            actor=actor,
            position=np.array(position, dtype=np.float64),
        )

        if with_marker:
            vis.marker_actor = self._plotter.add_mesh(
                pv.PolyData(np.zeros((1, 3))),
                color=actual_color,
                point_size=PLANET_MARKER_POINT_SIZE,
                render_points_as_spheres=True,
                pickable=True,
                name=f"marker_{key}",
            )
            vis.marker_actor.SetPosition(*position)
            vis.marker_actor.SetVisibility(False)

        if self._show_labels:
            self._add_label(vis)

        self._bodies[key] = vis
        return vis

    def remove_body(self, key: str) -> None:
        vis = self._bodies.pop(key, None)
        if vis is None:
            return
        for actor in (vis.actor, vis.marker_actor, vis.label_actor):
            if actor is not None:
                self._plotter.remove_actor(actor)
        if self._selected_key == key:
            self._selected_key = None

    def set_position(self, key: str, position: np.ndarray) -> None:
        """Move a body (and its marker) to ``position``. Called each tick."""
        vis = self._bodies.get(key)
        if vis is None:
            return
        vis.position = np.array(position, dtype=np.float64)
        vis.actor.SetPosition(*vis.position)
        if vis.marker_actor is not None:
            vis.marker_actor.SetPosition(*vis.position)
        if vis.label_actor is not None:
            self._plotter.remove_actor(vis.label_actor)
            vis.label_actor = None
            if self._show_labels and vis.is_visible:
                self._add_label(vis)

    def spin(self, key: str, degrees: float) -> None:
        """Rotate a body about its own Z axis."""
        vis = self._bodies.get(key)
        if vis is None or vis.actor is None:
            return
        vis.spin_deg = (vis.spin_deg + degrees) % 360.0
        vis.actor.SetOrientation(0, 0, vis.spin_deg)

    def update_lod(self, camera_position: np.ndarray, threshold: float = LOD_MARKER_DISTANCE) -> None:
        """Swap far bodies to their point marker, near ones to the sphere."""
        for vis in self._bodies.values():
            if vis.marker_actor is None or vis.position is None:
                continue
            far = self._lod_enabled and camera_distance(camera_position, vis.position) > threshold
            vis.uses_marker = bool(far)
            vis.actor.SetVisibility(vis.is_visible and not far)
            vis.marker_actor.SetVisibility(vis.is_visible and far)

    def set_lod_enabled(self, enabled: bool) -> None:
        self._lod_enabled = enabled
        if not enabled:
            for vis in self._bodies.values():
                if vis.marker_actor is not None:
                    vis.uses_marker = False
                    vis.marker_actor.SetVisibility(False)
                    vis.actor.SetVisibility(vis.is_visible)

    def set_visibility(self, key: str, visible: bool) -> None:
        vis = self._bodies.get(key)
        if vis is None:
            return
        vis.is_visible = visible
        vis.actor.SetVisibility(visible and not vis.uses_marker)
        if vis.marker_actor is not None:
            vis.marker_actor.SetVisibility(visible and vis.uses_marker)
        if vis.label_actor is not None:
            vis.label_actor.SetVisibility(visible and self._show_labels)

    def toggle_labels(self, visible: bool) -> None:
        self._show_labels = visible
        for vis in self._bodies.values():
            if vis.key == "sun":
                continue
            if visible and vis.is_visible:
                if vis.label_actor is None:
                    self._add_label(vis)
                else:
                    vis.label_actor.SetVisibility(True)
            elif vis.label_actor is not None:
                vis.label_actor.SetVisibility(False)

    def select(self, key: Optional[str]) -> None:
        """Highlight the selected body's marker, restoring the previous one."""
        previous = self._bodies.get(self._selected_key) if self._selected_key else None
        if previous is not None:
            previous.is_selected = False
            if previous.marker_actor is not None:
                previous.marker_actor.GetProperty().SetColor(pv.Color(previous.color).float_rgb)

        self._selected_key = key
        vis = self._bodies.get(key) if key else None
        if vis is not None:
            vis.is_selected = True
            if vis.marker_actor is not None:
                vis.marker_actor.GetProperty().SetColor(pv.Color(SELECTION_COLOR).float_rgb)

    def key_for_actor(self, actor: object) -> Optional[str]:
        for key, vis in self._bodies.items():
            if actor is vis.actor or actor is vis.marker_actor:
                return key
        return None

    @staticmethod
    def create_sphere_mesh(radius: float) -> pv.PolyData:
        """Create a UV-mapped sphere for an equirectangular texture."""
        sphere = pv.Sphere(
            radius=radius,
            theta_resolution=48,
            phi_resolution=48,
        )

        points = np.asarray(sphere.points)
        r = np.linalg.norm(points, axis=1)
        r = np.where(r > 0, r, 1.0)
        lon = np.arctan2(points[:, 1], points[:, 0])
        lat = np.arcsin(np.clip(points[:, 2] / r, -1.0, 1.0))

        tex_coords = np.column_stack([
            0.5 + lon / (2.0 * np.pi),
            0.5 + lat / np.pi,
        ])
        sphere.active_texture_coordinates = tex_coords
        return sphere

    def _load_texture(self, filename: str, color: str) -> Optional[pv.Texture]:
        """Load a texture from the textures directory, else a procedural one."""
        if filename in self._texture_cache:
            return self._texture_cache[filename]

        tex = None
        candidates = []
        if self._textures_dir is not None:
            candidates.append(self._textures_dir / filename)
            candidates.append(self._textures_dir / DEFAULT_TEXTURE)

        for path in candidates:
            if path.exists():
                try:
                    tex = pv.Texture(str(path))
                    break
                except Exception as e:
                    logger.warning("Failed to load texture from %s: %s", path, e)

        if tex is None:
            logger.debug("No texture file for %s, using procedural fallback", filename)
            tex = self._create_procedural_texture(color)

        self._texture_cache[filename] = tex
        return tex

    @staticmethod
    def _create_procedural_texture(color: str) -> pv.Texture:
        """Generate a banded texture in the body's color as a fallback."""
        r, g, b = pv.Color(color).int_rgb
        img = Image.new("RGB", (256, 128), color=(r, g, b))
        draw = ImageDraw.Draw(img)

        # Longitude stripes so the spin is visible
        for i, x in enumerate(range(0, 256, 32)):
            shade = 0.8 if i % 2 else 1.15
            band = tuple(min(255, int(c * shade)) for c in (r, g, b))
            draw.rectangle([x, 0, x + 15, 127], fill=band)

        return pv.Texture(np.array(img))

    def _add_label(self, vis: BodyVisual) -> None:
        if vis.position is None or vis.key == "sun":
            return
        label_pos = vis.position + np.array([0.0, 0.0, vis.radius * 1.5])
        point = pv.PolyData(label_pos.reshape(1, 3))
        point["labels"] = [vis.name]

        vis.label_actor = self._plotter.add_point_labels(
            point,
            "labels",
            font_size=10,
            point_size=0,
            text_color="white",
            shape_opacity=0.0,
            show_points=False,
            always_visible=True,
            name=f"label_{vis.key}",
        )

    @property
    def bodies(self) -> dict[str, BodyVisual]:
        return self._bodies

    @property
    def selected_key(self) -> Optional[str]:
        return self._selected_key

"""Main 3D scene manager.

Orchestrates all visualization components: Sun, planets, moons,
orbit paths and asteroid markers. Manages camera, lighting, background
and the per-tick update cycle. Bodies enter the scene only through
``SceneState``, drained once at the start of every tick.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import numpy as np
import pyvista as pv

from core.bodies import Asteroid, Moon, Planet
from core.coordinate_transforms import (
    heliocentric_to_render,
    moon_offset_to_render,
    moon_render_radius,
    planet_render_radius,
)
from core.kepler import OrbitalMechanicsError, orbit_path, position_from_elements
from core.scene_state import EntryKind, SceneEntry, SceneState
from utils.constants import (
    AU_KM,
    CAMERA_FOCUS_DISTANCE_FACTOR,
    CAMERA_HOME_POSITION,
    CAMERA_MAX_DISTANCE,
    CAMERA_MIN_DISTANCE,
    LOD_MARKER_DISTANCE,
    MOON_COLOR,
    ORBIT_PATH_POINTS,
    PLANET_SPIN_PER_FRAME_DEG,
    PLANET_TEXTURES,
    RAD_TO_DEG,
    SELECTION_COLOR,
    SPACE_BACKGROUND,
    STARFIELD_RADIUS,
)
from utils.time_utils import datetime_to_jd, jd_to_datetime
from visualization.asteroid_renderer import AsteroidRenderer
from visualization.body_renderer import BodyRenderer
from visualization.camera import CameraAnimator, focus_pose
from visualization.orbit_renderer import OrbitRenderer

logger = logging.getLogger(__name__)


class SolarSystemScene:
    """Orchestrates all visualization components."""

    def __init__(
        self,
        plotter: pv.Plotter,
        state: SceneState,
        textures_dir: Optional[Path] = None,
    ):
        self._plotter = plotter
        self._state = state
        self.bodies = BodyRenderer(plotter, textures_dir)
        self.orbits = OrbitRenderer(plotter)
        self.asteroids = AsteroidRenderer(plotter)
        self.camera_animator = CameraAnimator()

        self._planets: dict[str, Planet] = {}
        self._moons: dict[str, Moon] = {}
        self._asteroids: dict[str, Asteroid] = {}
        self._waiting_moons: list[Moon] = []
        self._positions: dict[str, np.ndarray] = {}
        self._failed_updates: set[str] = set()

        self._spin_enabled: bool = True
        self._show_moons: bool = True
        self._last_target_pos: Optional[np.ndarray] = None
        self._starfield_actor = None
        self._on_body_picked: Optional[Callable[[str], None]] = None

    def initialize(self) -> None:
        """Set up scene: background, lighting, Sun, camera, picking."""
        self._setup_background()
        self._setup_lighting()
        self.bodies.add_sun()
        self._positions["sun"] = np.zeros(3)
        self._setup_camera()
        self._setup_picking()

    def set_pick_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        """Register a callback receiving the key of a clicked body."""
        self._on_body_picked = callback

    # --- Per-tick update ---

    def update(self, sim_time: datetime) -> list[SceneEntry]:
        """Called each tick by SimulationController.

        Returns:
            Entries that became visible with this frame.
        """
        if sim_time.tzinfo is None:
            sim_time = sim_time.replace(tzinfo=timezone.utc)
        jd = datetime_to_jd(sim_time)

        published = self._state.begin_frame()
        for entry in published:
            self._add_entry(entry, jd)
        if self._waiting_moons:
            self._retry_waiting_moons(jd)

        self._update_positions(jd)

        if self._spin_enabled:
            for key in self._planets:
                self.bodies.spin(key, PLANET_SPIN_PER_FRAME_DEG)

        camera_position = np.asarray(self._plotter.camera.position, dtype=np.float64)
        self.bodies.update_lod(camera_position, LOD_MARKER_DISTANCE)

        self._update_camera()
        self._plotter.render()
        return published

    def _add_entry(self, entry: SceneEntry, jd: float) -> None:
        try:
            if entry.kind is EntryKind.PLANET:
                self._add_planet(entry.body, jd)
            elif entry.kind is EntryKind.MOON:
                self._add_moon(entry.body, jd)
            elif entry.kind is EntryKind.ASTEROID:
                self._add_asteroid(entry.body, jd)
        except OrbitalMechanicsError as e:
            logger.warning("Skipping %s: %s", entry.key, e)
        except Exception:
            logger.exception("Failed to add %s to the scene", entry.key)

    def _add_planet(self, planet: Planet, jd: float) -> None:
        position = heliocentric_to_render(position_from_elements(planet.elements, jd))
        path = heliocentric_to_render(orbit_path(planet.elements, ORBIT_PATH_POINTS))

        self.bodies.add_body(
            planet.key,
            planet.name,
            planet_render_radius(planet.mean_radius_km),
            position,
            texture_name=PLANET_TEXTURES.get(planet.name.lower()),
            with_marker=True,
        )
        self.orbits.add_orbit(planet.key, path, kind="planet")
        self._planets[planet.key] = planet
        self._positions[planet.key] = position
        logger.debug("Added planet %s", planet.name)

    def _add_moon(self, moon: Moon, jd: float) -> None:
        parent_key = f"planet:{moon.parent_id}"
        if parent_key not in self._planets:
            self._waiting_moons.append(moon)
            return

        parent_pos = self._positions[parent_key]
        parent_radius = self.bodies.bodies[parent_key].radius
        offset = moon_offset_to_render(
            position_from_elements(moon.elements, jd), parent_radius
        )
        path = moon_offset_to_render(
            orbit_path(moon.elements, ORBIT_PATH_POINTS // 2), parent_radius
        )
        position = parent_pos + offset

        self.bodies.add_body(
            moon.key,
            moon.name,
            moon_render_radius(moon.mean_radius_km),
            position,
            color=MOON_COLOR,
        )
        self.orbits.add_orbit(moon.key, path, kind="moon", origin=parent_pos)
        if not self._show_moons:
            self.bodies.set_visibility(moon.key, False)
        self._moons[moon.key] = moon
        self._positions[moon.key] = position

    def _retry_waiting_moons(self, jd: float) -> None:
        waiting, self._waiting_moons = self._waiting_moons, []
        for moon in waiting:
            try:
                self._add_moon(moon, jd)
            except OrbitalMechanicsError as e:
                logger.warning("Skipping moon %s: %s", moon.name, e)
            except Exception:
                logger.exception("Failed to add %s to the scene", moon.key)

    def _add_asteroid(self, asteroid: Asteroid, jd: float) -> None:
        position = heliocentric_to_render(position_from_elements(asteroid.elements, jd))
        path = heliocentric_to_render(orbit_path(asteroid.elements, ORBIT_PATH_POINTS))

        self.asteroids.add_asteroid(
            asteroid.key, asteroid.name, position, hazardous=asteroid.is_hazardous
        )
        self.orbits.add_orbit(asteroid.key, path, kind="asteroid")
        self._asteroids[asteroid.key] = asteroid
        self._positions[asteroid.key] = position

    def _update_positions(self, jd: float) -> None:
        for key, planet in self._planets.items():
            self._try_move(self._move_planet, key, planet, jd)
        for key, moon in self._moons.items():
            self._try_move(self._move_moon, key, moon, jd)
        for key, asteroid in self._asteroids.items():
            self._try_move(self._move_asteroid, key, asteroid, jd)

    def _try_move(self, move: Callable, key: str, body: object, jd: float) -> None:
        """Run one body's per-tick update; a failing body is skipped."""
        try:
            move(key, body, jd)
        except OrbitalMechanicsError as e:
            logger.debug("Position update failed for %s: %s", key, e)
        except Exception:
            # Log once per body
            if key not in self._failed_updates:
                self._failed_updates.add(key)
                logger.exception("Unexpected error updating %s", key)

    def _move_planet(self, key: str, planet: Planet, jd: float) -> None:
        position = heliocentric_to_render(position_from_elements(planet.elements, jd))
        self._positions[key] = position
        self.bodies.set_position(key, position)

    def _move_moon(self, key: str, moon: Moon, jd: float) -> None:
        parent_key = f"planet:{moon.parent_id}"
        parent_pos = self._positions[parent_key]
        offset = moon_offset_to_render(
            position_from_elements(moon.elements, jd),
            self.bodies.bodies[parent_key].radius,
        )
        self._positions[key] = parent_pos + offset
        self.bodies.set_position(key, self._positions[key])
        self.orbits.set_origin(key, parent_pos)

    def _move_asteroid(self, key: str, asteroid: Asteroid, jd: float) -> None:
        position = heliocentric_to_render(position_from_elements(asteroid.elements, jd))
        self._positions[key] = position
        self.asteroids.update_position(key, position)

    # --- Camera ---

    def focus_on(self, key: str) -> bool:
        """Start an eased fly-to towards a body. Returns False if unknown."""
        target = self._positions.get(key)
        if target is None:
            return False

        camera = self._plotter.camera
        pose = focus_pose(
            target,
            np.asarray(camera.position),
            self._body_radius(key),
            CAMERA_FOCUS_DISTANCE_FACTOR,
            CAMERA_MIN_DISTANCE,
        )
        self.camera_animator.start(
            camera.position, camera.focal_point, pose.position, pose.focal_point, key
        )
        self._last_target_pos = target.copy()
        self.select(key)
        return True

    def reset_camera(self) -> None:
        """Fly back to the overview of the whole system."""
        camera = self._plotter.camera
        self.camera_animator.start(
            camera.position, camera.focal_point, CAMERA_HOME_POSITION, (0.0, 0.0, 0.0)
        )
        self._last_target_pos = None

    def _update_camera(self) -> None:
        key = self.camera_animator.target_key
        target = self._positions.get(key) if key else None
        camera = self._plotter.camera

        if self.camera_animator.active:
            if target is not None:
                pose = focus_pose(
                    target,
                    np.asarray(camera.position),
                    self._body_radius(key),
                    CAMERA_FOCUS_DISTANCE_FACTOR,
                    CAMERA_MIN_DISTANCE,
                )
                self.camera_animator.retarget(pose.position, pose.focal_point)
            pose = self.camera_animator.step()
            if pose is not None:
                camera.position = tuple(pose.position)
                camera.focal_point = tuple(pose.focal_point)
        elif target is not None and self._last_target_pos is not None:
            # Follow the focused body as it moves along its orbit
            delta = target - self._last_target_pos
            camera.position = tuple(np.asarray(camera.position) + delta)
            camera.focal_point = tuple(target)

        if target is not None:
            self._last_target_pos = target.copy()

    def _body_radius(self, key: str) -> float:
        vis = self.bodies.bodies.get(key)
        if vis is not None:
            return vis.radius
        return 1.0

    # --- Selection and picking ---

    def select(self, key: Optional[str]) -> None:
        self.bodies.select(key)
        self.asteroids.select(key if key in self._asteroids else None)
        self.orbits.highlight(key, SELECTION_COLOR)

    def key_for_actor(self, actor: object) -> Optional[str]:
        return self.bodies.key_for_actor(actor) or self.asteroids.key_for_actor(actor)

    def _on_actor_picked(self, actor: object) -> None:
        key = self.key_for_actor(actor)
        if key is None or key == "sun":
            return
        logger.debug("Picked %s", key)
        self.focus_on(key)
        if self._on_body_picked is not None:
            self._on_body_picked(key)

    # --- Queries ---

    def get_body_info(self, key: str, sim_time: datetime) -> Optional[dict]:
        """Current data for a body (for the info panel)."""
        body = self._planets.get(key) or self._moons.get(key) or self._asteroids.get(key)
        if body is None:
            return None

        elements = body.elements
        info = {
            "name": body.name,
            "kind": key.split(":", 1)[0],
            "sma_au": elements.semi_major_axis / AU_KM,
            "sma_km": elements.semi_major_axis,
            "ecc": elements.eccentricity,
            "inc": elements.inclination * RAD_TO_DEG,
            "raan": elements.ascending_node * RAD_TO_DEG,
            "aop": elements.periapsis_arg * RAD_TO_DEG,
            "period": elements.period_days,
            "radius": getattr(body, "mean_radius_km", None),
            "diameter": getattr(body, "diameter_km", None),
            "hazardous": getattr(body, "is_hazardous", False),
            "sun_distance_au": None,
            "epoch": None,
        }
        if elements.epoch_jd is not None:
            info["epoch"] = jd_to_datetime(elements.epoch_jd)

        if isinstance(body, (Planet, Asteroid)):
            if sim_time.tzinfo is None:
                sim_time = sim_time.replace(tzinfo=timezone.utc)
            try:
                pos_km = position_from_elements(elements, datetime_to_jd(sim_time))
                info["sun_distance_au"] = float(np.linalg.norm(pos_km)) / AU_KM
            except OrbitalMechanicsError as e:
                logger.error("Failed to get position for %s: %s", key, e)
        return info

    def body_name(self, key: str) -> str:
        body = self._planets.get(key) or self._moons.get(key) or self._asteroids.get(key)
        return body.name if body is not None else key

    # --- Display toggles ---

    def toggle_labels(self, visible: bool) -> None:
        self.bodies.toggle_labels(visible)
        self.asteroids.toggle_labels(visible)

    def toggle_asteroids(self, visible: bool) -> None:
        self.asteroids.toggle_all(visible)
        self.orbits.toggle_kind("asteroid", visible)

    def toggle_moons(self, visible: bool) -> None:
        self._show_moons = visible
        for key in self._moons:
            self.bodies.set_visibility(key, visible)
        self.orbits.toggle_kind("moon", visible)

    def toggle_orbits(self, visible: bool) -> None:
        self.orbits.toggle_kind("planet", visible)
        self.orbits.toggle_kind("asteroid", visible and self.asteroids.show_all)
        self.orbits.toggle_kind("moon", visible and self._show_moons)

    def toggle_lod(self, enabled: bool) -> None:
        self.bodies.set_lod_enabled(enabled)

    def toggle_spin(self, enabled: bool) -> None:
        self._spin_enabled = enabled

    def set_body_visible(self, key: str, visible: bool) -> None:
        """Show or hide a body and its orbit."""
        if key in self._asteroids:
            self.asteroids.set_visibility(key, visible)
        else:
            self.bodies.set_visibility(key, visible)
        self.orbits.set_visibility(key, visible)

    # --- Setup ---

    def _setup_background(self) -> None:
        """Dark space background with starfield."""
        self._plotter.set_background(SPACE_BACKGROUND)

        n_stars = 3000
        phi = np.random.uniform(0, 2 * np.pi, n_stars)
        theta = np.arccos(np.random.uniform(-1, 1, n_stars))
        r = STARFIELD_RADIUS

        stars = np.column_stack([
            r * np.sin(theta) * np.cos(phi),
            r * np.sin(theta) * np.sin(phi),
            r * np.cos(theta),
        ])

        star_cloud = pv.PolyData(stars)
        star_cloud.point_data["brightness"] = np.random.power(3, n_stars)

        self._starfield_actor = self._plotter.add_mesh(
            star_cloud,
            scalars="brightness",
            cmap="gray",
            point_size=2,
            render_points_as_spheres=True,
            show_scalar_bar=False,
            opacity=0.8,
            pickable=False,
            name="starfield",
        )

    def _setup_lighting(self) -> None:
        """Point light at the Sun plus a faint ambient fill."""
        self._plotter.remove_all_lights()

        sun_light = pv.Light(
            position=(0, 0, 0),
            color="#FFF5E0",
            intensity=1.0,
        )
        sun_light.positional = True
        sun_light.cone_angle = 180
        self._plotter.add_light(sun_light)

        ambient = pv.Light(
            light_type="headlight",
            color="#B0C4DE",
            intensity=0.15,
        )
        self._plotter.add_light(ambient)

    def _setup_camera(self) -> None:
        """Initial camera position overlooking the inner system."""
        self._plotter.camera.position = CAMERA_HOME_POSITION
        self._plotter.camera.focal_point = (0, 0, 0)
        self._plotter.camera.up = (0, 0, 1)
        self._plotter.camera.clipping_range = (0.1, CAMERA_MAX_DISTANCE)

    def _setup_picking(self) -> None:
        self._plotter.enable_mesh_picking(
            self._on_actor_picked,
            use_actor=True,
            show=False,
            show_message=False,
        )

    @property
    def plotter(self) -> pv.Plotter:
        return self._plotter

    @property
    def state(self) -> SceneState:
        return self._state


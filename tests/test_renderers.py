"""Renderer bookkeeping tests against a mock plotter (no VTK window)."""

from unittest.mock import MagicMock

import numpy as np
import pytest
import pyvista as pv

from visualization.asteroid_renderer import AsteroidRenderer
from visualization.body_renderer import BodyRenderer
from visualization.orbit_renderer import OrbitRenderer


@pytest.fixture
def plotter():
    plotter = MagicMock()
    plotter.add_mesh.side_effect = lambda *args, **kwargs: MagicMock()
    plotter.add_point_labels.side_effect = lambda *args, **kwargs: MagicMock()
    return plotter


def ring(n=8, radius=10.0):
    angles = np.linspace(0, 2 * np.pi, n)
    return np.column_stack([radius * np.cos(angles), radius * np.sin(angles), np.zeros(n)])


def last_visibility(actor):
    return actor.SetVisibility.call_args.args[0]


class TestOrbitRenderer:
    def test_path_mesh_is_one_polyline(self):
        mesh = OrbitRenderer.create_path_mesh(ring(10))
        assert mesh.n_points == 10
        assert mesh.n_lines == 1

    def test_orbits_are_not_pickable(self, plotter):
        renderer = OrbitRenderer(plotter)
        renderer.add_orbit("planet:mars", ring(), kind="planet")
        assert plotter.add_mesh.call_args.kwargs["pickable"] is False

    def test_moon_orbit_follows_origin(self, plotter):
        renderer = OrbitRenderer(plotter)
        renderer.add_orbit("moon:lune", ring(), kind="moon", origin=np.array([1.0, 2.0, 3.0]))
        actor = renderer.orbits["moon:lune"].actor
        actor.SetPosition.assert_called_with(1.0, 2.0, 3.0)
        renderer.set_origin("moon:lune", np.array([4.0, 5.0, 6.0]))
        actor.SetPosition.assert_called_with(4.0, 5.0, 6.0)

    def test_orbit_added_while_kind_hidden_shows_when_kind_returns(self, plotter):
        renderer = OrbitRenderer(plotter)
        renderer.toggle_kind("moon", False)
        renderer.add_orbit("moon:phobos", ring(), kind="moon")
        orbit = renderer.orbits["moon:phobos"]
        assert last_visibility(orbit.actor) is False
        assert orbit.visible

        renderer.toggle_kind("moon", True)
        assert last_visibility(orbit.actor) is True

    def test_individually_hidden_orbit_stays_hidden(self, plotter):
        renderer = OrbitRenderer(plotter)
        renderer.add_orbit("planet:mars", ring(), kind="planet")
        renderer.set_visibility("planet:mars", False)
        renderer.toggle_all(False)
        renderer.toggle_all(True)
        assert last_visibility(renderer.orbits["planet:mars"].actor) is False

    def test_highlight_restores_other_orbit_colors(self, plotter):
        renderer = OrbitRenderer(plotter)
        renderer.add_orbit("planet:mars", ring(), kind="planet")
        renderer.add_orbit("asteroid:1", ring(), kind="asteroid")
        mars = renderer.orbits["planet:mars"]
        rock = renderer.orbits["asteroid:1"]

        renderer.highlight("asteroid:1", "#FFFFFF")
        rock.actor.GetProperty().SetColor.assert_called_with(pv.Color("#FFFFFF").float_rgb)
        mars.actor.GetProperty().SetColor.assert_called_with(pv.Color(mars.color).float_rgb)

        renderer.highlight("planet:mars", "#FFFFFF")
        rock.actor.GetProperty().SetColor.assert_called_with(pv.Color(rock.color).float_rgb)

    def test_replacing_orbit_removes_old_actor(self, plotter):
        renderer = OrbitRenderer(plotter)
        renderer.add_orbit("asteroid:1", ring(), kind="asteroid")
        old_actor = renderer.orbits["asteroid:1"].actor
        renderer.add_orbit("asteroid:1", ring(radius=20.0), kind="asteroid")
        plotter.remove_actor.assert_called_once_with(old_actor)
        assert len(renderer.orbits) == 1


class TestAsteroidRenderer:
    def test_add_and_move(self, plotter):
        renderer = AsteroidRenderer(plotter)
        renderer.add_asteroid("asteroid:1", "Eros", np.array([1.0, 0.0, 0.0]), hazardous=True)
        vis = renderer.asteroids["asteroid:1"]
        assert vis.name == "Eros"

        renderer.update_position("asteroid:1", np.array([2.0, 3.0, 4.0]))
        vis.marker_actor.SetPosition.assert_called_with(2.0, 3.0, 4.0)
        np.testing.assert_allclose(vis.current_pos, [2.0, 3.0, 4.0])

    def test_hazardous_markers_use_their_own_color(self, plotter):
        renderer = AsteroidRenderer(plotter)
        renderer.add_asteroid("asteroid:1", "A", np.zeros(3), hazardous=True)
        renderer.add_asteroid("asteroid:2", "B", np.zeros(3), hazardous=False)
        assert renderer.asteroids["asteroid:1"].color != renderer.asteroids["asteroid:2"].color

    def test_select_and_actor_lookup(self, plotter):
        renderer = AsteroidRenderer(plotter)
        renderer.add_asteroid("asteroid:1", "A", np.zeros(3))
        renderer.add_asteroid("asteroid:2", "B", np.ones(3))

        renderer.select("asteroid:1")
        renderer.select("asteroid:2")
        assert renderer.selected_key == "asteroid:2"
        assert not renderer.asteroids["asteroid:1"].is_selected
        assert renderer.asteroids["asteroid:2"].is_selected

        actor = renderer.asteroids["asteroid:2"].marker_actor
        assert renderer.key_for_actor(actor) == "asteroid:2"
        assert renderer.key_for_actor(object()) is None

    def test_new_asteroids_respect_hidden_group(self, plotter):
        renderer = AsteroidRenderer(plotter)
        renderer.toggle_all(False)
        renderer.add_asteroid("asteroid:1", "A", np.zeros(3))
        assert not renderer.show_all
        assert last_visibility(renderer.asteroids["asteroid:1"].marker_actor) is False

    def test_labels_created_on_demand(self, plotter):
        renderer = AsteroidRenderer(plotter)
        renderer.add_asteroid("asteroid:1", "A", np.zeros(3))
        assert renderer.asteroids["asteroid:1"].label_actor is None

        renderer.toggle_labels(True)
        assert renderer.asteroids["asteroid:1"].label_actor is not None
        renderer.toggle_labels(False)
        assert last_visibility(renderer.asteroids["asteroid:1"].label_actor) is False

    def test_remove_clears_selection(self, plotter):
        renderer = AsteroidRenderer(plotter)
        renderer.add_asteroid("asteroid:1", "A", np.zeros(3))
        renderer.select("asteroid:1")
        renderer.remove_asteroid("asteroid:1")
        assert renderer.selected_key is None
        assert renderer.asteroids == {}


class TestBodyRenderer:
    def test_far_bodies_switch_to_markers(self, plotter):
        renderer = BodyRenderer(plotter)
        vis = renderer.add_body(
            "planet:mars", "Mars", 1.0, np.array([100.0, 0.0, 0.0]), with_marker=True
        )

        renderer.update_lod(np.zeros(3), threshold=50.0)
        assert vis.uses_marker
        assert last_visibility(vis.actor) is False
        assert last_visibility(vis.marker_actor) is True

        renderer.update_lod(np.array([90.0, 0.0, 0.0]), threshold=50.0)
        assert not vis.uses_marker
        assert last_visibility(vis.actor) is True

    def test_disabled_lod_keeps_spheres(self, plotter):
        renderer = BodyRenderer(plotter)
        vis = renderer.add_body(
            "planet:mars", "Mars", 1.0, np.array([100.0, 0.0, 0.0]), with_marker=True
        )
        renderer.set_lod_enabled(False)
        renderer.update_lod(np.zeros(3), threshold=50.0)
        assert not vis.uses_marker
        assert last_visibility(vis.marker_actor) is False

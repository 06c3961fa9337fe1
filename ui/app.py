"""Main application window for the Solar System Explorer.

Contains the QMainWindow with embedded PyVista 3D viewport, sidebar
controls, menu bar, status bar, keyboard shortcuts, the loading
overlay, and the SimulationController that drives the render loop.
"""

from __future__ import annotations

import logging
import time
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from pyvistaqt import QtInteractor

from core.scene_state import EntryKind, SceneState
from ui.sidebar import SidebarWidget
from ui.widgets.time_controls import DEFAULT_WARP_INDEX, WARP_STEPS
from ui.workers import AsteroidDataWorker, PlanetaryDataWorker
from utils.config import AppConfig
from utils.constants import STATUS_ERROR, STATUS_SUCCESS, STATUS_WARNING
from utils.time_utils import feed_date_range
from visualization.scene import SolarSystemScene

logger = logging.getLogger(__name__)

MAX_WARP: float = WARP_STEPS[-1][0]


class SimulationController(QObject):
    """Drives the simulation clock and the per-frame render callback.

    The render timer keeps running while paused: the scene still has
    to publish newly fetched bodies, spin planets and animate the
    camera. Pausing only freezes the simulation clock.
    """

    time_updated = pyqtSignal(object)  # emits datetime

    def __init__(self, scene: SolarSystemScene, parent=None):
        super().__init__(parent)
        self.scene = scene
        self.sim_time = datetime.now(timezone.utc)
        self.warp_factor = WARP_STEPS[DEFAULT_WARP_INDEX][0]
        self._is_playing = False
        self._last_wall_time = time.perf_counter()
        self._frame_count = 0
        self._fps_timer = self._last_wall_time
        self._current_fps = 0.0

        # Render timer: 33ms = ~30 FPS
        self.render_timer = QTimer()
        self.render_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self.render_timer.timeout.connect(self._tick)
        self.render_timer.setInterval(33)

    def start(self) -> None:
        """Start the render loop (clock stays as it is)."""
        self._last_wall_time = time.perf_counter()
        self._fps_timer = self._last_wall_time
        self._frame_count = 0
        self.render_timer.start()

    def stop(self) -> None:
        self.render_timer.stop()

    def play(self) -> None:
        self._is_playing = True
        if not self.render_timer.isActive():
            self.start()

    def pause(self) -> None:
        self._is_playing = False

    def toggle_play_pause(self) -> None:
        if self._is_playing:
            self.pause()
        else:
            self.play()

    def set_warp(self, factor: float) -> None:
        """Set time warp factor (simulated seconds per wall second)."""
        self.warp_factor = max(1.0, min(factor, MAX_WARP))

    def increase_warp(self) -> None:
        self.set_warp(self.warp_factor * 2)

    def decrease_warp(self) -> None:
        self.set_warp(self.warp_factor / 2)

    def reset_to_now(self) -> None:
        self.jump_to_time(datetime.now(timezone.utc))

    def jump_to_time(self, dt: datetime) -> None:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        self.sim_time = dt
        self.time_updated.emit(self.sim_time)

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def fps(self) -> float:
        return self._current_fps

    def _tick(self) -> None:
        """Called every 33ms by QTimer."""
        now = time.perf_counter()
        wall_dt = now - self._last_wall_time
        self._last_wall_time = now

        self._frame_count += 1
        if now - self._fps_timer >= 1.0:
            self._current_fps = self._frame_count / (now - self._fps_timer)
            self._fps_timer = now
            self._frame_count = 0

        if self._is_playing:
            self.sim_time += timedelta(seconds=wall_dt * self.warp_factor)

        self.scene.update(self.sim_time)
        self.time_updated.emit(self.sim_time)


class SolarSystemApp(QMainWindow):
    """Main application window."""

    def __init__(self, config: AppConfig):
        super().__init__()
        self.setWindowTitle("Solar System Explorer")
        self.setMinimumSize(1280, 800)
        self.resize(1600, 1000)

        self._config = config
        self._selected_key: Optional[str] = None
        self._planet_worker: Optional[PlanetaryDataWorker] = None
        self._asteroid_worker: Optional[AsteroidDataWorker] = None

        self._build_layout()
        self._setup_menus()
        self._setup_status_bar()
        self._setup_shortcuts()

        self.scene_state = SceneState()
        self.scene = SolarSystemScene(self.plotter, self.scene_state, config.textures_dir)
        self.scene.initialize()
        self.scene.set_pick_callback(self._on_body_picked)

        self.sim_controller = SimulationController(self.scene, self)

        self._connect_signals()

    def _build_layout(self) -> None:
        """Create the main layout: viewport + sidebar."""
        central = QWidget()
        main_layout = QHBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        viewport_frame = QFrame()
        viewport_frame.setObjectName("viewportFrame")
        viewport_layout = QVBoxLayout(viewport_frame)
        viewport_layout.setContentsMargins(0, 0, 0, 0)

        self.plotter = QtInteractor(viewport_frame)
        viewport_layout.addWidget(self.plotter.interactor)

        self.loading_overlay = QLabel("Loading planetary data...", viewport_frame)
        self.loading_overlay.setObjectName("loadingOverlay")
        self.loading_overlay.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.loading_overlay.setStyleSheet(
            "background-color: rgba(10, 10, 15, 200); color: #F5F5F5;"
            "font-size: 18px; padding: 16px; border-radius: 8px;"
        )
        self.loading_overlay.resize(320, 64)

        main_layout.addWidget(viewport_frame, stretch=3)

        self.sidebar = SidebarWidget()
        main_layout.addWidget(self.sidebar)

        self.setCentralWidget(central)
        self._viewport_frame = viewport_frame

    def _setup_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")

        neo_action = QAction("Load &Asteroids...", self)
        neo_action.setShortcut(QKeySequence("Ctrl+A"))
        neo_action.triggered.connect(self._open_feed_dialog)
        file_menu.addAction(neo_action)

        file_menu.addSeparator()

        screenshot_action = QAction("Export &Screenshot...", self)
        screenshot_action.setShortcut(QKeySequence("Ctrl+S"))
        screenshot_action.triggered.connect(self._export_screenshot)
        file_menu.addAction(screenshot_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence("Ctrl+Q"))
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menu_bar.addMenu("&View")

        self.orbits_action = QAction("&Orbit Paths", self, checkable=True, checked=True)
        self.orbits_action.toggled.connect(
            lambda v: self.sidebar.display_options.set_option("orbits", v)
        )
        view_menu.addAction(self.orbits_action)

        self.labels_action = QAction("&Labels", self, checkable=True, checked=True)
        self.labels_action.toggled.connect(
            lambda v: self.sidebar.display_options.set_option("labels", v)
        )
        view_menu.addAction(self.labels_action)

        view_menu.addSeparator()

        home_action = QAction("Reset &Camera", self)
        home_action.triggered.connect(lambda: self.scene.reset_camera())
        view_menu.addAction(home_action)

        help_menu = menu_bar.addMenu("&Help")

        about_action = QAction("&About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

        shortcuts_action = QAction("&Keyboard Shortcuts", self)
        shortcuts_action.triggered.connect(self._show_shortcuts)
        help_menu.addAction(shortcuts_action)

    def _setup_status_bar(self) -> None:
        self.status_bar = self.statusBar()

        self.time_status_label = QLabel("Sim Time: --")
        self.status_bar.addWidget(self.time_status_label, stretch=2)

        self.selected_status_label = QLabel("Selected: None")
        self.status_bar.addWidget(self.selected_status_label, stretch=1)

        self.fps_label = QLabel("-- FPS")
        self.status_bar.addPermanentWidget(self.fps_label)

        self.status_label = QLabel("Ready")
        self.status_bar.addPermanentWidget(self.status_label)

    def _setup_shortcuts(self) -> None:
        shortcuts = {
            "Space": self._toggle_play_pause,
            "+": self._increase_warp,
            "=": self._increase_warp,
            "-": self._decrease_warp,
            "R": lambda: self.sim_controller.reset_to_now(),
            "F": self._focus_selected,
            "H": lambda: self.scene.reset_camera(),
            "T": lambda: self.orbits_action.toggle(),
            "L": lambda: self.labels_action.toggle(),
        }
        for key, callback in shortcuts.items():
            shortcut = QShortcut(QKeySequence(key), self)
            shortcut.activated.connect(callback)

    def _connect_signals(self) -> None:
        time_controls = self.sidebar.time_controls
        time_controls.play_toggled.connect(self._on_play_toggled)
        time_controls.warp_changed.connect(self.sim_controller.set_warp)
        time_controls.time_jumped.connect(self.sim_controller.jump_to_time)

        self.sim_controller.time_updated.connect(self._on_time_updated)

        body_list = self.sidebar.body_list
        body_list.body_toggled.connect(self.scene.set_body_visible)
        body_list.body_selected.connect(self._on_body_selected)
        body_list.body_double_clicked.connect(self._focus_body)

        self.sidebar.display_options.option_changed.connect(self._on_display_option_changed)

    # --- Data loading ---

    def start_data_loading(self) -> None:
        """Kick off the planetary and asteroid fetches."""
        self._show_overlay(True)
        self.status_label.setText("Loading planetary data...")

        self._planet_worker = PlanetaryDataWorker(self._config, self.scene_state, self)
        self._planet_worker.planets_loaded.connect(self._on_planets_loaded)
        self._planet_worker.error.connect(self._on_planet_error)
        self._planet_worker.start()

        start, end = feed_date_range(self._config.neo_feed_start, self._config.neo_feed_days)
        self.load_asteroids(start, end)

    def load_asteroids(self, start: date, end: date) -> None:
        """Fetch the asteroids of a feed window in the background."""
        if self._asteroid_worker is not None and self._asteroid_worker.isRunning():
            self.status_label.setText("Asteroid fetch already in progress")
            return

        logger.info("Loading asteroids for %s to %s", start, end)
        self._asteroid_worker = AsteroidDataWorker(
            self._config, self.scene_state, start, end, self
        )
        self._asteroid_worker.asteroid_loaded.connect(self._on_asteroid_loaded)
        self._asteroid_worker.finished_loading.connect(self._on_asteroids_finished)
        self._asteroid_worker.error.connect(self._on_asteroid_error)
        self._asteroid_worker.start()

    def _on_planets_loaded(self, bodies: list) -> None:
        self._show_overlay(False)
        planets = sum(1 for key, _ in bodies if key.startswith("planet:"))
        self.status_label.setText(
            f"Loaded {planets} planets, {len(bodies) - planets} moons"
        )
        self.status_label.setStyleSheet(f"color: {STATUS_SUCCESS};")
        self.sidebar.add_bodies(bodies)

    def _on_planet_error(self, message: str) -> None:
        logger.error("Planetary data failed: %s", message)
        self.loading_overlay.setText("Planetary data unavailable")
        self.status_label.setText(f"Error: {message}")
        self.status_label.setStyleSheet(f"color: {STATUS_ERROR};")
        QTimer.singleShot(3000, lambda: self._show_overlay(False))

    def _on_asteroid_loaded(self, key: str, name: str) -> None:
        self.sidebar.body_list.add_body(key, name)

    def _on_asteroids_finished(self, loaded: int, skipped: int, failed: int) -> None:
        in_scene = len(self.scene_state.by_kind(EntryKind.ASTEROID))
        text = f"Loaded {loaded} asteroids ({in_scene} in scene)"
        if skipped or failed:
            text += f", {skipped} without orbit data, {failed} failed"
            self.status_label.setStyleSheet(f"color: {STATUS_WARNING};")
        else:
            self.status_label.setStyleSheet(f"color: {STATUS_SUCCESS};")
        self.status_label.setText(text)

    def _on_asteroid_error(self, message: str) -> None:
        logger.error("Asteroid data failed: %s", message)
        self.status_label.setText(f"Asteroid error: {message}")
        self.status_label.setStyleSheet(f"color: {STATUS_ERROR};")

    # --- Event Handlers ---

    def _toggle_play_pause(self) -> None:
        self.sim_controller.toggle_play_pause()
        self.sidebar.time_controls.set_playing(self.sim_controller.is_playing)

    def _increase_warp(self) -> None:
        self.sim_controller.increase_warp()
        self.sidebar.time_controls.set_warp_display(self.sim_controller.warp_factor)

    def _decrease_warp(self) -> None:
        self.sim_controller.decrease_warp()
        self.sidebar.time_controls.set_warp_display(self.sim_controller.warp_factor)

    def _on_play_toggled(self, playing: bool) -> None:
        if playing:
            self.sim_controller.play()
        else:
            self.sim_controller.pause()

    def _on_time_updated(self, sim_time: datetime) -> None:
        self.sidebar.time_controls.update_time_display(sim_time)
        self.time_status_label.setText(
            f"Sim Time: {sim_time.strftime('%Y/%m/%d %H:%M')} UTC"
        )
        self.fps_label.setText(f"{self.sim_controller.fps:.0f} FPS")

        if self._selected_key:
            data = self.scene.get_body_info(self._selected_key, sim_time)
            if data:
                self.sidebar.info_panel.update_data(data)

    def _on_body_selected(self, key: str) -> None:
        self._selected_key = key
        self.scene.select(key)
        self.selected_status_label.setText(f"Selected: {self.scene.body_name(key)}")

        self.sidebar.show_body(self.scene.get_body_info(key, self.sim_controller.sim_time))

    def _on_body_picked(self, key: str) -> None:
        """Clicked in the viewport: the scene already started the fly-to."""
        self.sidebar.body_list.highlight_body(key)
        self._on_body_selected(key)

    def _focus_body(self, key: str) -> None:
        if not self.scene.focus_on(key):
            self.status_label.setText("Body not in scene yet")

    def _focus_selected(self) -> None:
        if self._selected_key:
            self._focus_body(self._selected_key)

    def _on_display_option_changed(self, key: str, value: object) -> None:
        enabled = bool(value)
        if key == "orbits":
            self.scene.toggle_orbits(enabled)
            self.orbits_action.setChecked(enabled)
        elif key == "labels":
            self.scene.toggle_labels(enabled)
            self.labels_action.setChecked(enabled)
        elif key == "moons":
            self.scene.toggle_moons(enabled)
        elif key == "asteroids":
            self.scene.toggle_asteroids(enabled)
        elif key == "lod":
            self.scene.toggle_lod(enabled)
        elif key == "spin":
            self.scene.toggle_spin(enabled)

    def _open_feed_dialog(self) -> None:
        from ui.feed_dialog import NeoFeedDialog

        dialog = NeoFeedDialog(
            self, self._config.neo_feed_start, self._config.neo_feed_days
        )
        dialog.range_selected.connect(self.load_asteroids)
        dialog.exec()

    def _export_screenshot(self) -> None:
        filepath, _ = QFileDialog.getSaveFileName(
            self,
            "Export Screenshot",
            "solar_system.png",
            "PNG Images (*.png);;All Files (*)",
        )
        if filepath:
            try:
                self.plotter.screenshot(filepath)
                self.status_label.setText(f"Screenshot saved: {filepath}")
            except (OSError, RuntimeError) as e:
                logger.error("Failed to save screenshot: %s", e)

    def _show_overlay(self, visible: bool) -> None:
        if visible:
            self._position_overlay()
            self.loading_overlay.raise_()
        self.loading_overlay.setVisible(visible)

    def _position_overlay(self) -> None:
        frame = self._viewport_frame.rect()
        overlay = self.loading_overlay
        overlay.move(
            (frame.width() - overlay.width()) // 2,
            (frame.height() - overlay.height()) // 2,
        )

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if self.loading_overlay.isVisible():
            self._position_overlay()

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About Solar System Explorer",
            "Solar System Explorer v1.0\n\n"
            "Interactive 3D view of the planets, their moons and\n"
            "near-Earth asteroids, placed with Keplerian orbits.\n\n"
            "Data: le-systeme-solaire.net and NASA NeoWs.\n"
            "Built with PyQt6 and PyVista.",
        )

    def _show_shortcuts(self) -> None:
        text = (
            "Keyboard Shortcuts:\n\n"
            "Space    - Play / Pause\n"
            "+  /  =  - Speed up time warp\n"
            "-        - Slow down time warp\n"
            "R        - Reset to current time\n"
            "F        - Focus on selected body\n"
            "H        - Reset camera\n"
            "T        - Toggle orbit paths\n"
            "L        - Toggle labels\n\n"
            "Click    - Focus on a body\n"
            "Ctrl+A   - Load asteroids for a date window\n"
            "Ctrl+S   - Export screenshot\n"
            "Ctrl+Q   - Exit"
        )
        QMessageBox.information(self, "Keyboard Shortcuts", text)

    def closeEvent(self, event) -> None:
        """Clean up on close."""
        self.sim_controller.stop()
        for worker in (self._planet_worker, self._asteroid_worker):
            if worker is not None and worker.isRunning():
                worker.wait(2000)
        self.plotter.close()
        super().closeEvent(event)

"""Background fetch threads.

Workers never touch the plotter. They append parsed bodies to the
shared SceneState, which the render loop drains once per tick, and
report progress back to the window through Qt signals.
"""

from __future__ import annotations

import logging
from datetime import date

from PyQt6.QtCore import QThread, pyqtSignal

from core.bodies import Asteroid
from core.catalog import BodyCatalog, NeoCatalog
from core.scene_state import EntryKind, SceneEntry, SceneState
from utils.config import AppConfig
from utils.downloader import Downloader

logger = logging.getLogger(__name__)


class PlanetaryDataWorker(QThread):
    """Fetches planets and moons once, then exits."""

    planets_loaded = pyqtSignal(list)  # [(key, name), ...] planets then moons
    error = pyqtSignal(str)

    def __init__(self, config: AppConfig, state: SceneState, parent=None):
        super().__init__(parent)
        self._config = config
        self._state = state

    def run(self) -> None:
        downloader = Downloader(timeout=self._config.http_timeout)
        try:
            outcome = BodyCatalog(downloader, self._config).fetch()
        finally:
            downloader.close()

        if not outcome.ok:
            self.error.emit(str(outcome.error))
            return

        # Planets first so every moon finds its parent in the same frame
        self._state.extend(
            [SceneEntry(EntryKind.PLANET, p.key, p) for p in outcome.planets]
        )
        self._state.extend(
            [SceneEntry(EntryKind.MOON, m.key, m) for m in outcome.moons]
        )
        self.planets_loaded.emit(
            [(body.key, body.name) for body in (*outcome.planets, *outcome.moons)]
        )


class AsteroidDataWorker(QThread):
    """Fetches the NEO feed window and every asteroid's orbital data."""

    asteroid_loaded = pyqtSignal(str, str)  # (key, name)
    finished_loading = pyqtSignal(int, int, int)  # (loaded, skipped, failed)
    error = pyqtSignal(str)

    def __init__(
        self,
        config: AppConfig,
        state: SceneState,
        start: date,
        end: date,
        parent=None,
    ):
        super().__init__(parent)
        self._config = config
        self._state = state
        self._start = start
        self._end = end

    def run(self) -> None:
        downloader = Downloader(timeout=self._config.http_timeout)
        catalog = NeoCatalog(downloader, self._config)
        try:
            outcome = catalog.fetch_all(self._start, self._end, self._on_asteroid)
        except ValueError as e:
            logger.error("Invalid NEO feed window: %s", e)
            self.error.emit(str(e))
            return
        finally:
            catalog.close()
            downloader.close()

        if outcome.feed_error is not None:
            self.error.emit(str(outcome.feed_error))
            return

        self.finished_loading.emit(
            len(outcome.asteroids), len(outcome.skipped), len(outcome.errors)
        )

    def _on_asteroid(self, asteroid: Asteroid) -> None:
        if self._state.append(SceneEntry(EntryKind.ASTEROID, asteroid.key, asteroid)):
            self.asteroid_loaded.emit(asteroid.key, asteroid.name)

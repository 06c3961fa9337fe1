"""Planetary-body and near-Earth-object catalogs.

Fetches the bodies list and the NEO feed through the Downloader,
parses them into body dataclasses, and fans the per-asteroid detail
requests out through a RequestScheduler. Failures are reported in the
outcome objects rather than raised, so a caller can decide what to do
about a partial catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from core.bodies import (
    Asteroid,
    MissingOrbitalDataError,
    Moon,
    NeoSummary,
    PayloadError,
    Planet,
    parse_asteroid,
    parse_bodies_payload,
    parse_neo_feed,
)
from core.kepler import OrbitalMechanicsError
from core.scheduler import RequestScheduler
from utils.config import AppConfig
from utils.constants import (
    NASA_NEO_FEED_URL,
    NASA_NEO_LOOKUP_URL,
    SOLAR_SYSTEM_BODIES_URL,
)
from utils.downloader import Downloader, FetchErrorKind, FetchResult
from utils.time_utils import validate_feed_range

logger = logging.getLogger(__name__)

AsteroidCallback = Callable[[Asteroid], None]


class CatalogError(Exception):
    """Raised when a catalog request fails as a whole."""

    def __init__(self, message: str, error_kind: Optional[FetchErrorKind] = None,
                 url: str = ""):
        self.error_kind = error_kind
        self.url = url
        super().__init__(message)

    @classmethod
    def from_result(cls, result: FetchResult) -> "CatalogError":
        return cls(result.error or "Request failed", result.error_kind, result.url)


@dataclass
class BodyFetchOutcome:
    """Planets and moons from one bodies request."""
    planets: list[Planet] = field(default_factory=list)
    moons: list[Moon] = field(default_factory=list)
    error: Optional[CatalogError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class NeoFetchOutcome:
    """Asteroids resolved from a feed window plus what went wrong."""
    asteroids: list[Asteroid] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # neo ids without orbital data
    errors: dict[str, CatalogError] = field(default_factory=dict)  # neo id -> error
    feed_error: Optional[CatalogError] = None
    requested: int = 0

    @property
    def ok(self) -> bool:
        return self.feed_error is None


class BodyCatalog:
    """Loads planets and their largest moons."""

    def __init__(self, downloader: Downloader, config: AppConfig):
        self._downloader = downloader
        self._config = config

    def fetch(self) -> BodyFetchOutcome:
        headers = None
        if self._config.solar_system_api_key:
            headers = {"Authorization": f"Bearer {self._config.solar_system_api_key}"}

        result = self._downloader.fetch_json(SOLAR_SYSTEM_BODIES_URL, headers=headers)
        if not result.ok:
            logger.error("Error fetching planetary data: %s", result.error)
            return BodyFetchOutcome(error=CatalogError.from_result(result))

        try:
            planets, moons = parse_bodies_payload(result.data)
        except PayloadError as e:
            logger.error("Malformed planetary data: %s", e)
            return BodyFetchOutcome(
                error=CatalogError(str(e), FetchErrorKind.MALFORMED, result.url)
            )

        moons = self.select_moons(planets, moons, self._config.max_moons_per_planet)
        logger.info("Loaded %d planets and %d moons", len(planets), len(moons))
        return BodyFetchOutcome(planets=planets, moons=moons)

    @staticmethod
    def select_moons(
        planets: list[Planet], moons: list[Moon], per_planet: int
    ) -> list[Moon]:
        """Keep the ``per_planet`` largest moons of each known planet."""
        planet_ids = {p.body_id for p in planets}
        grouped: dict[str, list[Moon]] = {}
        for moon in moons:
            if moon.parent_id in planet_ids:
                grouped.setdefault(moon.parent_id, []).append(moon)

        selected: list[Moon] = []
        for planet in planets:
            children = sorted(
                grouped.get(planet.body_id, []),
                key=lambda m: m.mean_radius_km,
                reverse=True,
            )
            selected.extend(children[:per_planet])
        return selected


class NeoCatalog:
    """Loads near-Earth asteroids for a date window."""

    def __init__(
        self,
        downloader: Downloader,
        config: AppConfig,
        scheduler: Optional[RequestScheduler] = None,
    ):
        self._downloader = downloader
        self._config = config
        self._scheduler = scheduler or RequestScheduler(config.max_concurrency)

    def fetch_feed(self, start: date, end: date) -> list[NeoSummary]:
        """List the NEOs approaching Earth between ``start`` and ``end``.

        Raises:
            ValueError: the window is reversed or longer than 7 days.
            CatalogError: the feed request or its payload failed.
        """
        validate_feed_range(start, end)
        result = self._downloader.fetch_json(
            NASA_NEO_FEED_URL,
            params={
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "api_key": self._config.nasa_api_key,
            },
        )
        if not result.ok:
            raise CatalogError.from_result(result)
        try:
            return parse_neo_feed(result.data)
        except PayloadError as e:
            raise CatalogError(str(e), FetchErrorKind.MALFORMED, result.url) from e

    def fetch_asteroid(self, neo_id: str) -> Asteroid:
        """Fetch and parse the orbital elements of one NEO.

        Raises:
            MissingOrbitalDataError: the record has no orbital_data.
            PayloadError: orbital_data is malformed.
            OrbitalMechanicsError: the orbit is not bound.
            CatalogError: the request failed.
        """
        result = self._downloader.fetch_json(
            f"{NASA_NEO_LOOKUP_URL}/{neo_id}",
            params={"api_key": self._config.nasa_api_key},
        )
        if not result.ok:
            raise CatalogError.from_result(result)

        asteroid = parse_asteroid(result.data)
        asteroid.elements.validate()
        return asteroid

    def fetch_all(
        self,
        start: date,
        end: date,
        on_asteroid: Optional[AsteroidCallback] = None,
    ) -> NeoFetchOutcome:
        """Resolve every asteroid of a feed window.

        Detail requests run through the scheduler; ``on_asteroid`` is
        called from the consuming thread as each asteroid arrives.
        """
        try:
            summaries = self.fetch_feed(start, end)
        except CatalogError as e:
            logger.error("Error fetching asteroid data: %s", e)
            return NeoFetchOutcome(feed_error=e)

        outcome = NeoFetchOutcome(requested=len(summaries))
        logger.info(
            "Fetching orbital data for %d asteroids (max %d concurrent)",
            len(summaries),
            self._scheduler.max_workers,
        )

        ids = [s.neo_id for s in summaries]
        for neo_id, result in self._scheduler.map(self.fetch_asteroid, ids):
            if isinstance(result, Asteroid):
                outcome.asteroids.append(result)
                if on_asteroid is not None:
                    on_asteroid(result)
            elif isinstance(result, MissingOrbitalDataError):
                logger.warning("Missing orbital data for asteroid ID: %s", neo_id)
                outcome.skipped.append(neo_id)
            elif isinstance(result, CatalogError):
                outcome.errors[neo_id] = result
            elif isinstance(result, (PayloadError, OrbitalMechanicsError)):
                logger.warning("Unusable orbital data for asteroid %s: %s", neo_id, result)
                outcome.errors[neo_id] = CatalogError(
                    str(result), FetchErrorKind.MALFORMED
                )
            else:
                logger.error("Error fetching asteroid %s: %s", neo_id, result)
                outcome.errors[neo_id] = CatalogError(str(result))

        logger.info(
            "Resolved %d/%d asteroids (%d skipped, %d failed)",
            len(outcome.asteroids),
            outcome.requested,
            len(outcome.skipped),
            len(outcome.errors),
        )
        return outcome

    def close(self) -> None:
        self._scheduler.shutdown()

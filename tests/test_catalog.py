"""Tests for the body and NEO catalogs against a fake downloader."""

import threading
from datetime import date

import pytest

from core.bodies import Moon, OrbitalElements, Planet
from core.catalog import BodyCatalog, CatalogError, NeoCatalog
from core.scheduler import RequestScheduler
from utils.config import AppConfig
from utils.constants import NASA_NEO_FEED_URL, NASA_NEO_LOOKUP_URL, SOLAR_SYSTEM_BODIES_URL
from utils.downloader import FetchErrorKind, FetchResult, FetchStatus


class FakeDownloader:
    """Serves canned FetchResults by URL and records every call."""

    def __init__(self, routes):
        self._routes = routes
        self._lock = threading.Lock()
        self.calls = []

    def fetch_json(self, url, params=None, headers=None, timeout=None):
        with self._lock:
            self.calls.append((url, params, headers))
        route = self._routes.get(url)
        if isinstance(route, FetchResult):
            return route
        if route is None:
            return failed(url, FetchErrorKind.HTTP, 404)
        return FetchResult(FetchStatus.COMPLETE, url, data=route, status_code=200)


def failed(url, kind=FetchErrorKind.NETWORK, status_code=None):
    return FetchResult(
        FetchStatus.FAILED, url, error=f"{kind.name} failure", error_kind=kind,
        status_code=status_code,
    )


def lookup(neo_id):
    return f"{NASA_NEO_LOOKUP_URL}/{neo_id}"


START, END = date(2024, 1, 1), date(2024, 1, 8)


def test_body_catalog_fetch(bodies_payload, config):
    downloader = FakeDownloader({SOLAR_SYSTEM_BODIES_URL: bodies_payload})
    outcome = BodyCatalog(downloader, config).fetch()

    assert outcome.ok
    assert [p.name for p in outcome.planets] == ["Earth", "Mars"]
    # Two largest moons per planet, grouped in planet order
    assert [m.name for m in outcome.moons] == ["Moon", "Phobos", "Deimos"]
    assert downloader.calls[0][2] is None


def test_body_catalog_sends_bearer_key(bodies_payload):
    config = AppConfig(solar_system_api_key="secret")
    downloader = FakeDownloader({SOLAR_SYSTEM_BODIES_URL: bodies_payload})
    BodyCatalog(downloader, config).fetch()
    assert downloader.calls[0][2] == {"Authorization": "Bearer secret"}


def test_body_catalog_reports_fetch_error(config):
    downloader = FakeDownloader({SOLAR_SYSTEM_BODIES_URL: failed(SOLAR_SYSTEM_BODIES_URL)})
    outcome = BodyCatalog(downloader, config).fetch()
    assert not outcome.ok
    assert outcome.planets == []
    assert outcome.error.error_kind is FetchErrorKind.NETWORK


def test_body_catalog_reports_malformed_payload(config):
    downloader = FakeDownloader({SOLAR_SYSTEM_BODIES_URL: {"unexpected": True}})
    outcome = BodyCatalog(downloader, config).fetch()
    assert outcome.error.error_kind is FetchErrorKind.MALFORMED


def _moon(body_id, parent, radius):
    return Moon(body_id, body_id.title(), parent, radius, OrbitalElements(1000.0, 0.0, 0, 0, 0, 0))


def test_select_moons_keeps_largest_per_planet():
    planets = [Planet("jupiter", "Jupiter", 69911.0, OrbitalElements(7.8e8, 0.05, 0, 0, 0, 0))]
    moons = [
        _moon("io", "jupiter", 1821.6),
        _moon("leda", "jupiter", 10.0),
        _moon("ganymede", "jupiter", 2634.1),
        _moon("europa", "jupiter", 1560.8),
        _moon("titan", "saturne", 2574.7),
    ]
    selected = BodyCatalog.select_moons(planets, moons, 2)
    assert [m.body_id for m in selected] == ["ganymede", "io"]
    assert BodyCatalog.select_moons(planets, moons, 0) == []


def test_fetch_feed_passes_key_and_dates(config, make_feed):
    downloader = FakeDownloader({
        NASA_NEO_FEED_URL: make_feed({"2024-01-01": [("1", "A", False)]}),
    })
    catalog = NeoCatalog(downloader, config)
    summaries = catalog.fetch_feed(START, END)

    assert [s.neo_id for s in summaries] == ["1"]
    params = downloader.calls[0][1]
    assert params == {"start_date": "2024-01-01", "end_date": "2024-01-08", "api_key": "TEST_KEY"}


def test_fetch_feed_rejects_long_window(config):
    catalog = NeoCatalog(FakeDownloader({}), config)
    with pytest.raises(ValueError):
        catalog.fetch_feed(START, date(2024, 1, 9))


def test_fetch_feed_raises_catalog_error(config):
    downloader = FakeDownloader({NASA_NEO_FEED_URL: failed(NASA_NEO_FEED_URL, FetchErrorKind.HTTP, 403)})
    with pytest.raises(CatalogError) as excinfo:
        NeoCatalog(downloader, config).fetch_feed(START, END)
    assert excinfo.value.error_kind is FetchErrorKind.HTTP


def test_fetch_all_classifies_every_asteroid(config, make_feed, make_detail, caplog):
    downloader = FakeDownloader({
        NASA_NEO_FEED_URL: make_feed({
            "2024-01-01": [("1", "A", False), ("2", "B", False)],
            "2024-01-02": [("3", "C", True), ("4", "D", False), ("5", "E", False)],
        }),
        lookup("1"): make_detail("1", "A"),
        lookup("2"): make_detail("2", "B", with_orbit=False),
        lookup("3"): make_detail("3", "C"),
        lookup("4"): failed(lookup("4")),
        lookup("5"): make_detail("5", "E", eccentricity="1.4"),
    })
    received = []
    with RequestScheduler(2) as scheduler:
        catalog = NeoCatalog(downloader, config, scheduler)
        outcome = catalog.fetch_all(START, END, received.append)

    assert outcome.ok
    assert outcome.requested == 5
    assert sorted(a.neo_id for a in outcome.asteroids) == ["1", "3"]
    assert sorted(a.neo_id for a in received) == ["1", "3"]
    assert outcome.skipped == ["2"]
    assert set(outcome.errors) == {"4", "5"}
    assert outcome.errors["4"].error_kind is FetchErrorKind.NETWORK
    assert outcome.errors["5"].error_kind is FetchErrorKind.MALFORMED
    assert "Missing orbital data for asteroid ID: 2" in caplog.text

    detail_params = [c[1] for c in downloader.calls if c[0] != NASA_NEO_FEED_URL]
    assert all(p == {"api_key": "TEST_KEY"} for p in detail_params)


def test_fetch_all_feed_failure_fetches_no_details(config):
    downloader = FakeDownloader({NASA_NEO_FEED_URL: failed(NASA_NEO_FEED_URL)})
    outcome = NeoCatalog(downloader, config).fetch_all(START, END)
    assert not outcome.ok
    assert outcome.asteroids == []
    assert len(downloader.calls) == 1


def test_close_shuts_down_scheduler(config):
    scheduler = RequestScheduler(1)
    catalog = NeoCatalog(FakeDownloader({}), config, scheduler)
    list(scheduler.map(str, [1]))
    catalog.close()
    assert scheduler._executor is None

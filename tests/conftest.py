"""Shared fixtures: API payload samples shaped like the live responses."""

import pytest

from utils.config import AppConfig


@pytest.fixture
def config():
    return AppConfig(nasa_api_key="TEST_KEY", max_concurrency=2, max_moons_per_planet=2)


@pytest.fixture
def earth_record():
    return {
        "id": "terre",
        "englishName": "Earth",
        "isPlanet": True,
        "bodyType": "Planet",
        "meanRadius": 6371.0084,
        "semimajorAxis": 149598023,
        "eccentricity": 0.0167,
        "inclination": 0.0,
        "longAscNode": -11.26064,
        "argPeriapsis": 114.20783,
        "mainAnomaly": 358.617,
        "sideralOrbit": 365.256,
        "moons": [{"moon": "La Lune"}],
    }


@pytest.fixture
def bodies_payload(earth_record):
    return {
        "bodies": [
            {
                "id": "mars",
                "englishName": "Mars",
                "isPlanet": True,
                "bodyType": "Planet",
                "meanRadius": 3389.5,
                "semimajorAxis": 227939200,
                "eccentricity": 0.0935,
                "inclination": 1.85,
                "longAscNode": 49.57854,
                "argPeriapsis": 286.5,
                "mainAnomaly": 19.412,
                "sideralOrbit": 686.98,
                "moons": [{"moon": "Phobos"}, {"moon": "Deïmos"}],
            },
            earth_record,
            {
                "id": "lune",
                "englishName": "Moon",
                "isPlanet": False,
                "bodyType": "Moon",
                "meanRadius": 1737.0,
                "semimajorAxis": 384400,
                "eccentricity": 0.0549,
                "inclination": 5.145,
                "sideralOrbit": 27.3217,
                "aroundPlanet": {"planet": "terre", "rel": "..."},
            },
            {
                "id": "phobos",
                "englishName": "Phobos",
                "isPlanet": False,
                "bodyType": "Moon",
                "meanRadius": 11.1,
                "semimajorAxis": 9376,
                "eccentricity": 0.0151,
                "inclination": 1.075,
                "sideralOrbit": 0.31891,
                "aroundPlanet": {"planet": "mars", "rel": "..."},
            },
            {
                "id": "deimos",
                "englishName": "Deimos",
                "isPlanet": False,
                "bodyType": "Moon",
                "meanRadius": 6.2,
                "semimajorAxis": 23458,
                "eccentricity": 0.0002,
                "inclination": 0.93,
                "sideralOrbit": 1.26244,
                "aroundPlanet": {"planet": "mars", "rel": "..."},
            },
            {
                "id": "ceres",
                "englishName": "1 Ceres",
                "isPlanet": False,
                "bodyType": "Dwarf Planet",
                "meanRadius": 470.0,
                "semimajorAxis": 413690250,
                "eccentricity": 0.0758,
            },
        ]
    }


@pytest.fixture
def neo_detail_record():
    return {
        "id": "2000433",
        "neo_reference_id": "2000433",
        "name": "433 Eros (A898 PA)",
        "is_potentially_hazardous_asteroid": False,
        "estimated_diameter": {
            "kilometers": {
                "estimated_diameter_min": 22.0,
                "estimated_diameter_max": 49.0,
            }
        },
        "orbital_data": {
            "orbit_id": "659",
            "epoch_osculation": "2460600.5",
            "eccentricity": ".2228359407071628",
            "semi_major_axis": "1.458120998474684",
            "inclination": "10.82846651399785",
            "ascending_node_longitude": "304.2701025753316",
            "perihelion_argument": "178.9297536744151",
            "mean_anomaly": "310.5543277370992",
            "mean_motion": ".5597752949285997",
        },
    }


def make_feed_payload(days):
    """Build a feed payload from {date: [(id, name, hazardous), ...]}."""
    return {
        "element_count": sum(len(v) for v in days.values()),
        "near_earth_objects": {
            day: [
                {
                    "id": neo_id,
                    "neo_reference_id": neo_id,
                    "name": name,
                    "is_potentially_hazardous_asteroid": hazardous,
                }
                for neo_id, name, hazardous in entries
            ]
            for day, entries in days.items()
        },
    }


def make_detail_record(neo_id, name=None, with_orbit=True, eccentricity="0.3"):
    record = {
        "id": neo_id,
        "name": name or f"({neo_id})",
        "is_potentially_hazardous_asteroid": False,
    }
    if with_orbit:
        record["orbital_data"] = {
            "eccentricity": eccentricity,
            "semi_major_axis": "1.2",
            "inclination": "5.0",
            "ascending_node_longitude": "80.0",
            "perihelion_argument": "120.0",
            "mean_anomaly": "45.0",
            "mean_motion": "0.75",
            "epoch_osculation": "2460000.5",
        }
    return record


@pytest.fixture
def make_feed():
    return make_feed_payload


@pytest.fixture
def make_detail():
    return make_detail_record

"""Celestial body data model and API payload parsing.

Turns raw JSON from the planetary-bodies and NEO endpoints into
frozen dataclasses carrying classical orbital elements. NEO orbital
data arrives as numeric strings in AU and degrees; everything is
converted to km and radians here so the solver never sees API units.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.kepler import (
    OrbitalMechanicsError,
    check_bound_orbit,
    mean_motion_from_period,
)
from utils.constants import AU_KM, DEG_TO_RAD, JD_J2000

logger = logging.getLogger(__name__)


class PayloadError(Exception):
    """Raised when an API payload cannot be turned into a body."""

    def __init__(self, message: str, field_name: str = "", body_name: str = ""):
        self.field_name = field_name
        self.body_name = body_name
        super().__init__(message)


class MissingOrbitalDataError(PayloadError):
    """Raised when a NEO detail record carries no orbital_data block."""


@dataclass(frozen=True, slots=True)
class OrbitalElements:
    """Classical Keplerian elements at an epoch."""

    semi_major_axis: float  # km
    eccentricity: float
    inclination: float  # radians
    ascending_node: float  # radians (Omega)
    periapsis_arg: float  # radians (omega)
    mean_anomaly: float  # radians at epoch
    epoch_jd: Optional[float] = None
    mean_motion: Optional[float] = None  # rad/day

    def validate(self) -> None:
        """Raise UnsupportedOrbitError unless this is a bound orbit."""
        check_bound_orbit(self.semi_major_axis, self.eccentricity)

    def mean_anomaly_at(self, jd: float) -> float:
        """Mean anomaly at Julian Date ``jd`` (radians, not wrapped).

        Elements without an epoch or mean motion are treated as fixed.
        """
        if self.epoch_jd is None or self.mean_motion is None:
            return self.mean_anomaly
        return self.mean_anomaly + self.mean_motion * (jd - self.epoch_jd)

    @property
    def periapsis_distance(self) -> float:
        return self.semi_major_axis * (1.0 - self.eccentricity)

    @property
    def apoapsis_distance(self) -> float:
        return self.semi_major_axis * (1.0 + self.eccentricity)

    @property
    def period_days(self) -> float:
        if not self.mean_motion:
            return float("inf")
        return 2.0 * math.pi / self.mean_motion


@dataclass(frozen=True, slots=True)
class Planet:
    """A planet of the solar system."""

    body_id: str
    name: str
    mean_radius_km: float
    elements: OrbitalElements
    sidereal_orbit_days: Optional[float] = None
    moon_count: int = 0

    @property
    def key(self) -> str:
        return f"planet:{self.body_id}"

    @property
    def semimajor_axis_km(self) -> float:
        return self.elements.semi_major_axis

    @property
    def eccentricity(self) -> float:
        return self.elements.eccentricity


@dataclass(frozen=True, slots=True)
class Moon:
    """A natural satellite orbiting a planet."""

    body_id: str
    name: str
    parent_id: str
    mean_radius_km: float
    elements: OrbitalElements
    sidereal_orbit_days: Optional[float] = None

    @property
    def key(self) -> str:
        return f"moon:{self.body_id}"


@dataclass(frozen=True, slots=True)
class NeoSummary:
    """An entry of the NEO date-range feed (no orbital data yet)."""

    neo_id: str
    name: str
    is_hazardous: bool = False


@dataclass(frozen=True, slots=True)
class Asteroid:
    """A near-Earth asteroid with heliocentric orbital elements."""

    neo_id: str
    name: str
    elements: OrbitalElements
    is_hazardous: bool = False
    diameter_km: Optional[float] = None

    @property
    def key(self) -> str:
        return f"asteroid:{self.neo_id}"


def _parse_number(
    record: Mapping[str, Any],
    field_name: str,
    body_name: str,
    default: Optional[float] = None,
) -> float:
    """Read a numeric (or numeric string) field.

    Missing or null fields fall back to ``default``; without a default
    they raise PayloadError.
    """
    raw = record.get(field_name)
    if raw is None or raw == "":
        if default is not None:
            return default
        raise PayloadError(
            f"Missing field '{field_name}' for {body_name}", field_name, body_name
        )
    if isinstance(raw, bool):
        raise PayloadError(
            f"Field '{field_name}' for {body_name} is not numeric: {raw!r}",
            field_name,
            body_name,
        )
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise PayloadError(
            f"Field '{field_name}' for {body_name} is not numeric: {raw!r}",
            field_name,
            body_name,
        ) from e
    if not math.isfinite(value):
        raise PayloadError(
            f"Field '{field_name}' for {body_name} is not finite: {raw!r}",
            field_name,
            body_name,
        )
    return value


def _mean_motion(period_days: Optional[float]) -> Optional[float]:
    if period_days is None or period_days <= 0:
        return None
    return mean_motion_from_period(period_days)


def _solar_system_elements(record: Mapping[str, Any], name: str) -> OrbitalElements:
    """Elements from a le-systeme-solaire body record (J2000 epoch)."""
    period = _parse_number(record, "sideralOrbit", name, default=0.0)
    return OrbitalElements(
        semi_major_axis=_parse_number(record, "semimajorAxis", name),
        eccentricity=_parse_number(record, "eccentricity", name),
        inclination=_parse_number(record, "inclination", name, default=0.0) * DEG_TO_RAD,
        ascending_node=_parse_number(record, "longAscNode", name, default=0.0) * DEG_TO_RAD,
        periapsis_arg=_parse_number(record, "argPeriapsis", name, default=0.0) * DEG_TO_RAD,
        mean_anomaly=_parse_number(record, "mainAnomaly", name, default=0.0) * DEG_TO_RAD,
        epoch_jd=JD_J2000,
        mean_motion=_mean_motion(abs(period)),
    )


def parse_planet(record: Mapping[str, Any]) -> Planet:
    """Parse one ``isPlanet`` entry of the bodies payload."""
    name = str(record.get("englishName") or record.get("id") or "").strip()
    if not name:
        raise PayloadError("Planet record has no englishName", "englishName")

    elements = _solar_system_elements(record, name)
    moons = record.get("moons") or []
    period = _parse_number(record, "sideralOrbit", name, default=0.0)

    return Planet(
        body_id=str(record.get("id") or name.lower()),
        name=name,
        mean_radius_km=_parse_number(record, "meanRadius", name),
        elements=elements,
        sidereal_orbit_days=abs(period) or None,
        moon_count=len(moons) if isinstance(moons, list) else 0,
    )


def parse_moon(record: Mapping[str, Any]) -> Moon:
    """Parse a ``bodyType == "Moon"`` entry of the bodies payload."""
    name = str(record.get("englishName") or record.get("id") or "").strip()
    if not name:
        raise PayloadError("Moon record has no englishName", "englishName")

    around = record.get("aroundPlanet") or {}
    parent_id = around.get("planet") if isinstance(around, Mapping) else None
    if not parent_id:
        raise PayloadError(f"Moon {name} has no parent planet", "aroundPlanet", name)

    period = _parse_number(record, "sideralOrbit", name, default=0.0)
    return Moon(
        body_id=str(record.get("id") or name.lower()),
        name=name,
        parent_id=str(parent_id),
        mean_radius_km=_parse_number(record, "meanRadius", name, default=0.0),
        elements=_solar_system_elements(record, name),
        sidereal_orbit_days=abs(period) or None,
    )


def parse_bodies_payload(
    payload: Mapping[str, Any],
) -> tuple[list[Planet], list[Moon]]:
    """Split a bodies payload into planets and moons.

    Records that fail to parse or describe unbound orbits are logged
    and skipped; a payload without a ``bodies`` list raises PayloadError.
    """
    bodies = payload.get("bodies")
    if not isinstance(bodies, list):
        raise PayloadError("Bodies payload has no 'bodies' list", "bodies")

    planets: list[Planet] = []
    moons: list[Moon] = []

    for record in bodies:
        if not isinstance(record, Mapping):
            continue
        try:
            if record.get("isPlanet"):
                planet = parse_planet(record)
                planet.elements.validate()
                planets.append(planet)
            elif record.get("bodyType") == "Moon" and record.get("aroundPlanet"):
                moon = parse_moon(record)
                moon.elements.validate()
                moons.append(moon)
        except PayloadError as e:
            logger.warning("Skipping body record: %s", e)
        except OrbitalMechanicsError as e:
            logger.warning("Skipping body %s: %s", record.get("englishName"), e)

    planets.sort(key=lambda p: p.semimajor_axis_km)
    return planets, moons


def parse_neo_feed(payload: Mapping[str, Any]) -> list[NeoSummary]:
    """Flatten the date-keyed ``near_earth_objects`` map of a feed payload.

    Duplicates (an object approaching on several days) are kept once,
    in feed order.
    """
    by_date = payload.get("near_earth_objects")
    if not isinstance(by_date, Mapping):
        raise PayloadError("Feed payload has no 'near_earth_objects' map", "near_earth_objects")

    summaries: list[NeoSummary] = []
    seen: set[str] = set()
    for day in sorted(by_date):
        entries = by_date[day]
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            neo_id = str(entry.get("id") or entry.get("neo_reference_id") or "").strip()
            if not neo_id or neo_id in seen:
                continue
            seen.add(neo_id)
            summaries.append(
                NeoSummary(
                    neo_id=neo_id,
                    name=str(entry.get("name") or neo_id),
                    is_hazardous=bool(entry.get("is_potentially_hazardous_asteroid", False)),
                )
            )
    return summaries


def parse_orbital_data(orbital_data: Mapping[str, Any], body_name: str = "") -> OrbitalElements:
    """Convert a NEO ``orbital_data`` block into OrbitalElements.

    semi_major_axis is in AU and the angles in degrees; mean_motion
    (deg/day) and epoch_osculation (JD) are optional.
    """
    semi_major_axis_au = _parse_number(orbital_data, "semi_major_axis", body_name)
    mean_motion_deg = _parse_number(orbital_data, "mean_motion", body_name, default=0.0)
    epoch = _parse_number(orbital_data, "epoch_osculation", body_name, default=0.0)

    return OrbitalElements(
        semi_major_axis=semi_major_axis_au * AU_KM,
        eccentricity=_parse_number(orbital_data, "eccentricity", body_name),
        inclination=_parse_number(orbital_data, "inclination", body_name) * DEG_TO_RAD,
        ascending_node=_parse_number(orbital_data, "ascending_node_longitude", body_name) * DEG_TO_RAD,
        periapsis_arg=_parse_number(orbital_data, "perihelion_argument", body_name) * DEG_TO_RAD,
        mean_anomaly=_parse_number(orbital_data, "mean_anomaly", body_name) * DEG_TO_RAD,
        epoch_jd=epoch or None,
        mean_motion=mean_motion_deg * DEG_TO_RAD if mean_motion_deg > 0 else None,
    )


def _diameter_km(record: Mapping[str, Any]) -> Optional[float]:
    try:
        kilometers = record["estimated_diameter"]["kilometers"]
        low = float(kilometers["estimated_diameter_min"])
        high = float(kilometers["estimated_diameter_max"])
    except (KeyError, TypeError, ValueError):
        return None
    return (low + high) / 2.0


def parse_asteroid(record: Mapping[str, Any]) -> Asteroid:
    """Parse a NEO detail record.

    Raises:
        MissingOrbitalDataError: the record has no orbital_data block.
        PayloadError: orbital_data fields are missing or not numeric.
    """
    neo_id = str(record.get("id") or record.get("neo_reference_id") or "").strip()
    name = str(record.get("name") or neo_id)
    if not neo_id:
        raise PayloadError("NEO record has no id", "id", name)

    orbital_data = record.get("orbital_data")
    if not isinstance(orbital_data, Mapping) or not orbital_data:
        raise MissingOrbitalDataError(
            f"Missing orbital data for asteroid {name} ({neo_id})",
            "orbital_data",
            name,
        )

    return Asteroid(
        neo_id=neo_id,
        name=name,
        elements=parse_orbital_data(orbital_data, name),
        is_hazardous=bool(record.get("is_potentially_hazardous_asteroid", False)),
        diameter_km=_diameter_km(record),
    )

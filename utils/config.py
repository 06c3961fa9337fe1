"""Application configuration sourced from environment variables.

API keys are never embedded in code. A ``.env`` file in the working
directory is loaded at start-up (see ``main.py``) so keys can be kept
out of the shell profile.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Mapping, Optional

from utils.constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_NEO_FEED_START,
    NASA_DEMO_KEY,
    NEO_FEED_MAX_DAYS,
)


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""

    def __init__(self, variable: str, value: str, reason: str):
        self.variable = variable
        self.value = value
        super().__init__(f"Invalid {variable}={value!r}: {reason}")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Runtime settings for data fetching and the scene."""

    nasa_api_key: str = NASA_DEMO_KEY
    solar_system_api_key: Optional[str] = None
    neo_feed_start: date = date.fromisoformat(DEFAULT_NEO_FEED_START)
    neo_feed_days: int = NEO_FEED_MAX_DAYS
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    max_moons_per_planet: int = 4
    data_dir: Path = Path(__file__).parent.parent / "data"
    log_level: str = "INFO"

    @property
    def textures_dir(self) -> Path:
        return self.data_dir / "textures"

    @property
    def using_demo_key(self) -> bool:
        return self.nasa_api_key == NASA_DEMO_KEY


def _int_var(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(name, raw, "expected an integer") from e
    if value < minimum:
        raise ConfigError(name, raw, f"must be >= {minimum}")
    return value


def _float_var(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(name, raw, "expected a number") from e
    if value <= 0:
        raise ConfigError(name, raw, "must be positive")
    return value


def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build an AppConfig from the environment.

    Args:
        env: mapping to read instead of ``os.environ`` (used by tests)

    Raises:
        ConfigError: a variable is present but malformed.
    """
    env = os.environ if env is None else env
    defaults = AppConfig()

    api_key = env.get("NASA_API_KEY", "").strip() or NASA_DEMO_KEY

    start_raw = env.get("NEO_FEED_START", "").strip()
    if start_raw:
        try:
            feed_start = date.fromisoformat(start_raw)
        except ValueError as e:
            raise ConfigError("NEO_FEED_START", start_raw, "expected YYYY-MM-DD") from e
    else:
        feed_start = defaults.neo_feed_start

    feed_days = _int_var(env, "NEO_FEED_DAYS", defaults.neo_feed_days, 1)
    if feed_days > NEO_FEED_MAX_DAYS:
        raise ConfigError(
            "NEO_FEED_DAYS", str(feed_days), f"feed range is limited to {NEO_FEED_MAX_DAYS} days"
        )

    data_dir_raw = env.get("ORRERY_DATA_DIR", "").strip()

    return AppConfig(
        nasa_api_key=api_key,
        solar_system_api_key=env.get("SOLAR_SYSTEM_API_KEY", "").strip() or None,
        neo_feed_start=feed_start,
        neo_feed_days=feed_days,
        max_concurrency=_int_var(env, "NEO_MAX_CONCURRENCY", defaults.max_concurrency, 1),
        http_timeout=_float_var(env, "HTTP_TIMEOUT", defaults.http_timeout),
        max_moons_per_planet=_int_var(
            env, "MAX_MOONS_PER_PLANET", defaults.max_moons_per_planet, 0
        ),
        data_dir=Path(data_dir_raw).expanduser() if data_dir_raw else defaults.data_dir,
        log_level=env.get("LOG_LEVEL", defaults.log_level).strip().upper() or "INFO",
    )

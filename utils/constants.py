"""Physical constants, API endpoints, and display parameters.

Distances are in km and angles in radians unless noted otherwise.
Render coordinates use a heliocentric ecliptic frame with +Z as the
ecliptic north pole and RENDER_UNITS_PER_AU scene units per AU.
"""

import math

# --- Gravitational Parameters ---
MU_SUN: float = 1.32712440018e11  # km^3/s^2

# --- Distances ---
AU_KM: float = 149597870.7  # km -- 1 Astronomical Unit
SUN_RADIUS: float = 695700.0  # km

# --- Time ---
SECONDS_PER_DAY: float = 86400.0
JD_UNIX_EPOCH: float = 2440587.5  # Julian Date of 1970-01-01T00:00:00Z
JD_J2000: float = 2451545.0

# --- Derived Math Constants ---
TWO_PI: float = 2.0 * math.pi
DEG_TO_RAD: float = math.pi / 180.0
RAD_TO_DEG: float = 180.0 / math.pi

# --- Kepler Solver ---
KEPLER_TOLERANCE: float = 1e-6
KEPLER_MAX_ITERATIONS: int = 50

# --- Public APIs ---
SOLAR_SYSTEM_BODIES_URL: str = "https://api.le-systeme-solaire.net/rest/bodies/"
NASA_NEO_BASE_URL: str = "https://api.nasa.gov/neo/rest/v1"
NASA_NEO_FEED_URL: str = f"{NASA_NEO_BASE_URL}/feed"
NASA_NEO_LOOKUP_URL: str = f"{NASA_NEO_BASE_URL}/neo"
NASA_DEMO_KEY: str = "DEMO_KEY"
NEO_FEED_MAX_DAYS: int = 7
DEFAULT_NEO_FEED_START: str = "2024-01-01"

# --- Network Defaults ---
DEFAULT_HTTP_TIMEOUT: float = 30.0  # seconds
DEFAULT_MAX_CONCURRENCY: int = 4
USER_AGENT: str = "SolarSystemExplorer/1.0"

# --- Scene Scale ---
RENDER_UNITS_PER_AU: float = 100.0
KM_TO_RENDER: float = RENDER_UNITS_PER_AU / AU_KM
SUN_RENDER_RADIUS: float = 10.0
PLANET_SIZE_SCALE: float = 1.5e-4  # render units per km of body radius
MOON_SIZE_SCALE: float = 1.5e-4
MOON_DISTANCE_SCALE: float = 5e-6  # render units per km of moon orbit
MIN_BODY_RENDER_RADIUS: float = 0.15
ASTEROID_MARKER_RADIUS: float = 0.6
ORBIT_PATH_POINTS: int = 180
STARFIELD_RADIUS: float = 20000.0

# --- Level of Detail ---
LOD_MARKER_DISTANCE: float = 300.0  # camera distance beyond which planets become dots
PLANET_MARKER_POINT_SIZE: float = 6.0
PLANET_SPIN_PER_FRAME_DEG: float = 0.6

# --- Camera ---
CAMERA_HOME_POSITION: tuple[float, float, float] = (100.0, -500.0, 100.0)
CAMERA_FOCUS_FRAMES: int = 45
CAMERA_FOCUS_DISTANCE_FACTOR: float = 6.0
CAMERA_MIN_DISTANCE: float = 10.0
CAMERA_MAX_DISTANCE: float = 50000.0

# --- Body Colors ---
SPACE_BACKGROUND: str = "#0A0A0F"
SUN_COLOR: str = "#FDB813"
DEFAULT_BODY_COLOR: str = "#9CA3AF"
MOON_COLOR: str = "#D4D4D4"
ASTEROID_COLOR: str = "#EF4444"
HAZARDOUS_ASTEROID_COLOR: str = "#F97316"
PLANET_ORBIT_COLOR: str = "#CD5C5C"
ASTEROID_ORBIT_COLOR: str = "#87CEEB"
MOON_ORBIT_COLOR: str = "#525252"
SELECTION_COLOR: str = "#FFFFFF"

PLANET_COLORS: dict[str, str] = {
    "mercury": "#8C8C8C",
    "venus": "#E8CDA2",
    "earth": "#2F6BD4",
    "mars": "#C1440E",
    "jupiter": "#D8CA9D",
    "saturn": "#E3D9A6",
    "uranus": "#A6E1E8",
    "neptune": "#3F54BA",
}

# Texture file names looked up under the textures directory
SUN_TEXTURE: str = "sun.jpg"
PLANET_TEXTURES: dict[str, str] = {
    name: f"{name}.jpg" for name in PLANET_COLORS
}
DEFAULT_TEXTURE: str = "default.jpg"

# --- UI Color Palette ---
ACCENT_COLOR: str = "#2563EB"
TEXT_SECONDARY: str = "#525252"
TEXT_TERTIARY: str = "#A3A3A3"
STATUS_SUCCESS: str = "#16A34A"
STATUS_WARNING: str = "#D97706"
STATUS_ERROR: str = "#DC2626"

"""
General config file for the ATLAS Orrery
Contains constants and global variables which can be altered.
Can make things go wrong...  so...  validate_config() is there to catch the worst of it.
"""
import logging
from datetime import datetime, timezone

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

# --- Constants ---
SCREEN_WIDTH = 1400
SCREEN_HEIGHT = 800
FPS = 60

# Colors
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
GREY = (30, 30, 30)
MID_GREY = (90, 90, 90)
LIGHT_GREY = (135, 135, 135)
AXIS_LABEL_COLOR = (50, 50, 50)
ORBIT_GREY = (40, 40, 40)
CYAN = (0, 255, 255)
SKY_BLUE = (135, 206, 235)
SUN_YELLOW = (253, 184, 19)
SUN_GLOW = (255, 107, 0)
DUSTY_RED = (180, 80, 80)
FADED_RED = (110, 60, 60)
GREEN = (120, 138, 48)

# --- Physical constants ---
AU_KM = 149597870.7  # Astronomical Unit in kilometers
MU_SUN_KM3_S2 = 132712440041.93938  # Sun's gravitational parameter
SECONDS_PER_DAY = 86400.0

# 1 AU = 2 units in the 3D scene
AU_SCALE = 2.0

# --- Kepler solver ---
KEPLER_TOLERANCE = 1e-8
KEPLER_MAX_ITERATIONS = 100

# --- Orbit path sampling ---
ELLIPSE_SEGMENTS = 128
HYPERBOLA_POINTS = 201
HYPERBOLA_ASYMPTOTE_FRACTION = 0.95  # Stay just inside acos(-1/e)
HYPERBOLA_MAX_DISPLAY_AU = 20.0

# --- Simulation clock ---
# simulation_time = 0 is the 3I/ATLAS discovery date
MISSION_EPOCH = datetime(2025, 7, 1, tzinfo=timezone.utc)
DEFAULT_SPEED = 1.0  # Days of simulated time per real second
SPEED_MIN = 0.1
SPEED_MAX = 10.0
SPEED_STEP = 0.1
TIMELINE_MIN_DAYS = -30
TIMELINE_MAX_DAYS = 300
EVENT_CURRENT_WINDOW_DAYS = 3  # An event button lights up this close to its day

ZOOM_STEP = 1.3
ZOOM_MIN = 0.3
ZOOM_MAX = 5.0

# Camera presets in scene units, divided by the zoom level at use
CAMERA_PRESETS = {
    "top": (0.0, 25.0, 0.1),
    "side": (-8.0, 5.0, -15.0),
    "angle": (15.0, 12.0, 15.0),
}
DEFAULT_CAMERA_VIEW = "side"

# --- Rendering ---
PIXELS_PER_SCENE_UNIT = 60
CAMERA_Z_OFFSET = 50
SUN_RADIUS_PIXELS = 14
COMET_TAIL_PARTICLES = 3000
COMET_TAIL_LENGTH = 4.0  # Scene units
STARFIELD_COUNT = 1500
STARFIELD_RADIUS = 60.0

# Coordinate clamping limits for Pygame
COORD_MIN = -32760
COORD_MAX = 32760


class ConfigurationError(Exception):
    """Raised by `validate_config()` when the constants above are inconsistent."""
    pass


def validate_config():
    """
    Checks the constants in this module for values that would break the simulation.

    Raises:
        ConfigurationError: listing every problem found.
    """
    problems = []
    if AU_SCALE <= 0:
        problems.append(f"AU_SCALE must be positive, got {AU_SCALE}")
    if AU_KM <= 0 or MU_SUN_KM3_S2 <= 0:
        problems.append("AU_KM and MU_SUN_KM3_S2 must be positive")
    if KEPLER_TOLERANCE <= 0 or KEPLER_MAX_ITERATIONS < 1:
        problems.append("Kepler solver needs a positive tolerance and at least one iteration")
    if ELLIPSE_SEGMENTS < 3 or HYPERBOLA_POINTS < 3:
        problems.append("Orbit paths need at least 3 samples")
    if not 0 < HYPERBOLA_ASYMPTOTE_FRACTION < 1:
        problems.append(f"HYPERBOLA_ASYMPTOTE_FRACTION must be in (0, 1), got {HYPERBOLA_ASYMPTOTE_FRACTION}")
    if HYPERBOLA_MAX_DISPLAY_AU <= 0:
        problems.append("HYPERBOLA_MAX_DISPLAY_AU must be positive")
    if not 0 < SPEED_MIN <= DEFAULT_SPEED <= SPEED_MAX:
        problems.append(f"Speed range [{SPEED_MIN}, {SPEED_MAX}] must contain DEFAULT_SPEED={DEFAULT_SPEED}")
    if not 0 < ZOOM_MIN < 1 < ZOOM_MAX or ZOOM_STEP <= 1:
        problems.append("Zoom range must straddle 1 and ZOOM_STEP must exceed 1")
    if TIMELINE_MIN_DAYS >= TIMELINE_MAX_DAYS:
        problems.append("TIMELINE_MIN_DAYS must be before TIMELINE_MAX_DAYS")
    if EVENT_CURRENT_WINDOW_DAYS <= 0:
        problems.append("EVENT_CURRENT_WINDOW_DAYS must be positive")
    if DEFAULT_CAMERA_VIEW not in CAMERA_PRESETS:
        problems.append(f"Unknown DEFAULT_CAMERA_VIEW '{DEFAULT_CAMERA_VIEW}'")
    if MISSION_EPOCH.tzinfo is None:
        problems.append("MISSION_EPOCH must be timezone-aware")

    if problems:
        raise ConfigurationError("; ".join(problems))

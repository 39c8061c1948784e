# clock.py
"""
The simulation clock: the single owner of simulated time.

`simulation_time` is in days since the mission epoch and may be any real
number. UI controls write to the clock; body providers only read it.
"""
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum

from bodies import KeyEvent, find_event
from config import (
    CAMERA_PRESETS, DEFAULT_CAMERA_VIEW, DEFAULT_SPEED, MISSION_EPOCH, SECONDS_PER_DAY,
    SPEED_MAX, SPEED_MIN, ZOOM_MAX, ZOOM_MIN, ZOOM_STEP,
)

logger = logging.getLogger(__name__)


class CameraView(Enum):
    TOP = "top"
    SIDE = "side"
    ANGLE = "angle"


class SimulationClock:
    """
    Two independent bits of state: playing/paused, and the current simulation time.

    - tick(real_dt): advances time by real_dt * speed, only while playing.
    - scrub(t): sets time directly; works the same playing or paused.
    - set_speed(s): takes effect from the next tick.
    - jump_to_event / jump_to_present: absolute sets.
    There is no end state and time is never clamped.
    """

    def __init__(self, simulation_time=0.0, speed=DEFAULT_SPEED, is_playing=True, epoch=MISSION_EPOCH):
        self.epoch = epoch
        self.simulation_time = float(simulation_time)
        self.is_playing = is_playing
        self.speed = DEFAULT_SPEED
        self.set_speed(speed)
        self.zoom = 1.0
        self.camera_view = CameraView(DEFAULT_CAMERA_VIEW)

    def tick(self, real_dt_seconds):
        if self.is_playing:
            self.simulation_time += real_dt_seconds * self.speed
        return self.simulation_time

    def scrub(self, simulation_time):
        self.simulation_time = float(simulation_time)

    def play(self):
        self.is_playing = True

    def pause(self):
        self.is_playing = False

    def toggle_play(self):
        self.is_playing = not self.is_playing
        return self.is_playing

    def set_speed(self, speed):
        self.speed = max(SPEED_MIN, min(SPEED_MAX, float(speed)))
        return self.speed

    def jump_to_event(self, event):
        """Jumps to a KeyEvent, or to one looked up by name."""
        if not isinstance(event, KeyEvent):
            event = find_event(event)
        logger.info(f"Jumping to {event.name} (day {event.days_from_start})")
        self.scrub(event.days_from_start)

    def present_day_offset(self, now=None):
        now = now or datetime.now(timezone.utc)
        return round((now - self.epoch).total_seconds() / SECONDS_PER_DAY)

    def jump_to_present(self, now=None):
        offset = self.present_day_offset(now)
        logger.info(f"Jumping to present day (day {offset})")
        self.scrub(offset)

    # --- View state ---
    def zoom_in(self):
        self.zoom = min(self.zoom * ZOOM_STEP, ZOOM_MAX)
        return self.zoom

    def zoom_out(self):
        self.zoom = max(self.zoom / ZOOM_STEP, ZOOM_MIN)
        return self.zoom

    def set_camera_view(self, view):
        self.camera_view = CameraView(view)

    def camera_position(self):
        """Preset camera position for the current view, pulled in as zoom grows."""
        return tuple(c / self.zoom for c in CAMERA_PRESETS[self.camera_view.value])

    # --- Display helpers ---
    def current_datetime(self):
        """Calendar instant of the simulation time; None outside datetime's year range."""
        try:
            return self.epoch + timedelta(days=self.simulation_time)
        except OverflowError:
            return None

    def current_date(self):
        instant = self.current_datetime()
        if instant is None:
            return f"Day {self.simulation_time:.0f}"
        return instant.strftime("%b %d, %Y")

    def perihelion_countdown(self, perihelion_date):
        # Counted in days, so it still works where the calendar date can't be built
        perihelion_time = (perihelion_date - self.epoch).total_seconds() / SECONDS_PER_DAY
        days_diff = round(perihelion_time - self.simulation_time)
        if days_diff > 0:
            return f"{days_diff} days to perihelion"
        if days_diff < 0:
            return f"{abs(days_diff)} days after perihelion"
        return "AT PERIHELION"

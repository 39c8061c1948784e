import logging
import math

import numpy as np
import pygame

from config import *
from clock import CameraView
from starfield import Starfield

logger = logging.getLogger(__name__)


# --- Pygame Specific Helper Functions ---
def initial_world_rotation(x, y, z):
    """
    Adjusts scene coordinates to the screen's coordinate system.
    The scene has Y pointing up; pygame has Y pointing down, so Y flips. Z stays as depth.
    """
    return x, -y, z


def project_3d_to_2d(x_3d, y_3d, z_3d, camera_z_offset=CAMERA_Z_OFFSET, scale_factor=20, perspective_strength=0.005):
    """
    Projects a 3D point (x, y, z) onto a 2D plane (the screen).

    Formula:
    Perspective Factor = 1 / (z * strength + offset)
    Projected X = x * scale * Perspective Factor
    Projected Y = y * scale * Perspective Factor
    """
    epsilon = 1e-6
    divisor = (z_3d * perspective_strength) + camera_z_offset + epsilon
    if divisor <= epsilon: perspective = 0.0001
    else: perspective = 1.0 / divisor

    sx_float = SCREEN_WIDTH // 2 + x_3d * scale_factor * perspective
    sy_float = SCREEN_HEIGHT // 2 + y_3d * scale_factor * perspective

    # Clamp values to prevent Pygame from crashing with huge numbers
    if not math.isfinite(sx_float): sx_final = COORD_MAX if sx_float > 0 else COORD_MIN
    else: sx_final = int(max(COORD_MIN, min(sx_float, COORD_MAX)))
    if not math.isfinite(sy_float): sy_final = COORD_MAX if sy_float > 0 else COORD_MIN
    else: sy_final = int(max(COORD_MIN, min(sy_float, COORD_MAX)))
    return sx_final, sy_final, perspective


def camera_view_rotation(x, y, z, angle_x_deg, angle_y_deg):
    """Rotates a 3D point (already in screen world space) by the camera pitch and yaw."""
    rad_x = math.radians(angle_x_deg)
    rad_y = math.radians(angle_y_deg)
    y_pitched = y * math.cos(rad_x) - z * math.sin(rad_x)
    z_pitched = y * math.sin(rad_x) + z * math.cos(rad_x)
    x_yawed = x * math.cos(rad_y) + z_pitched * math.sin(rad_y)
    z_yawed = -x * math.sin(rad_y) + z_pitched * math.cos(rad_y)
    return x_yawed, y_pitched, z_yawed


def camera_angles_for(position):
    """Pitch and yaw (degrees) that look at the Sun from a preset camera position."""
    x, y, z = position
    pitch = math.degrees(math.atan2(y, math.hypot(x, z)))
    yaw = math.degrees(math.atan2(-x, -z))
    return max(-89, min(89, pitch)), yaw


def event_status(simulation_time, key_event, window=EVENT_CURRENT_WINDOW_DAYS):
    """Button state for a key event: current within `window` days, then past once reached, else upcoming."""
    if abs(simulation_time - key_event.days_from_start) < window:
        return "current"
    if simulation_time >= key_event.days_from_start:
        return "past"
    return "upcoming"


def comet_tail_points(nucleus, anti_sun_dir, rng, count=COMET_TAIL_PARTICLES, length=COMET_TAIL_LENGTH):
    """
    Dust tail particle cloud streaming away from the Sun.

    Particles bunch up near the nucleus (t ~ u^0.4), fan out with distance and
    bend slightly along X for the curved dust-tail look.

    Returns:
        np.ndarray: shape (count, 3) in scene units.
    """
    t = rng.random(count) ** 0.4 * length
    spread = t * 0.12
    curve = np.sin(t * 0.5) * 0.15

    jitter = (rng.random((count, 3)) - 0.5) * spread[:, None]
    points = np.asarray(nucleus) + np.outer(t, anti_sun_dir) + jitter
    points[:, 0] += curve
    return points


# --- Main Orrery Class ---
class Orrery:
    """
    The pygame front end.

    Functions:
    1.  **State**: camera rotation and pan, label/orbit/HUD toggles.
    2.  **Controls**: play/pause, speed slider, timeline slider, event jumps, camera views, zoom.
        All of them only ever write to the SimulationClock.
    3.  **Update Loop**: reads one snapshot of body positions from the SolarSystem per frame.
    4.  **Render Loop**: draws stars, orbits, bodies, the comet tail and the HUD.
    """

    def __init__(self, system, tail_seed=None):
        self.system = system
        self.clock = system.clock
        self.starfield = Starfield()
        self.cached_stars = self.starfield.calculate_star_positions()
        self.star_colors = self.starfield.star_colors()
        self.rng = np.random.default_rng(tail_seed)

        self.show_labels = True
        self.show_orbits = True
        self.show_info = True
        self.pan_offset_x = 0
        self.pan_offset_y = 0
        self.camera_rotation_x = 0.0
        self.camera_rotation_y = 0.0
        self.apply_camera_view()

        self.snapshot = {}
        self.tail_points = np.empty((0, 3))

        # UI Layout
        bottom_bar_height = 110
        self.bottom_bar_rect = pygame.Rect(0, SCREEN_HEIGHT - bottom_bar_height, SCREEN_WIDTH, bottom_bar_height)
        bar_top = self.bottom_bar_rect.top

        self.play_button_rect = pygame.Rect(20, bar_top + 10, 80, 30)
        self.speed_slider_rect = pygame.Rect(180, bar_top + 25, 200, 2)
        self.timeline_rect = pygame.Rect(20, bar_top + 60, SCREEN_WIDTH - 40, 2)
        self.slider_handle_radius = 8
        self.dragging = None  # "timeline" or "speed"

        # Event jump buttons, plus "Today"
        self.event_buttons = []
        x = 420
        for event in self.system.key_events:
            self.event_buttons.append((pygame.Rect(x, bar_top + 10, 120, 30), event))
            x += 125
        self.present_button_rect = pygame.Rect(x, bar_top + 10, 80, 30)

        # Camera view and zoom buttons - top right
        self.view_buttons = []
        for n, view in enumerate(CameraView):
            self.view_buttons.append((pygame.Rect(SCREEN_WIDTH - 260 + n * 65, 20, 60, 28), view))
        self.zoom_in_rect = pygame.Rect(SCREEN_WIDTH - 260, 55, 60, 28)
        self.zoom_out_rect = pygame.Rect(SCREEN_WIDTH - 195, 55, 60, 28)

    # --- Camera ---
    def apply_camera_view(self):
        self.camera_rotation_x, self.camera_rotation_y = camera_angles_for(self.clock.camera_position())
        self.pan_offset_x = 0
        self.pan_offset_y = 0

    def reset_view(self):
        """Back to the default camera: side view, zoom 1."""
        self.clock.zoom = 1.0
        self.clock.set_camera_view(DEFAULT_CAMERA_VIEW)
        self.apply_camera_view()
        logger.debug("Camera view reset")

    @property
    def camera_zoom(self):
        return PIXELS_PER_SCENE_UNIT * CAMERA_Z_OFFSET * self.clock.zoom

    def to_camera(self, point):
        wx, wy, wz = initial_world_rotation(*point)
        return camera_view_rotation(wx, wy, wz, self.camera_rotation_x, self.camera_rotation_y)

    def to_screen(self, point, perspective_strength=0.005):
        cx, cy, cz = self.to_camera(point)
        sx, sy, perspective = project_3d_to_2d(cx, cy, cz, scale_factor=self.camera_zoom,
                                               perspective_strength=perspective_strength)
        return sx + self.pan_offset_x, sy + self.pan_offset_y, perspective, cz

    # --- Controls ---
    def _timeline_value_at(self, x):
        frac = (x - self.timeline_rect.left) / self.timeline_rect.width
        frac = max(0.0, min(1.0, frac))
        return TIMELINE_MIN_DAYS + frac * (TIMELINE_MAX_DAYS - TIMELINE_MIN_DAYS)

    def _timeline_x(self):
        t = max(TIMELINE_MIN_DAYS, min(TIMELINE_MAX_DAYS, self.clock.simulation_time))
        frac = (t - TIMELINE_MIN_DAYS) / (TIMELINE_MAX_DAYS - TIMELINE_MIN_DAYS)
        return int(self.timeline_rect.left + frac * self.timeline_rect.width)

    def _speed_value_at(self, x):
        frac = (x - self.speed_slider_rect.left) / self.speed_slider_rect.width
        frac = max(0.0, min(1.0, frac))
        raw = SPEED_MIN + frac * (SPEED_MAX - SPEED_MIN)
        return round(raw / SPEED_STEP) * SPEED_STEP

    def _speed_x(self):
        frac = (self.clock.speed - SPEED_MIN) / (SPEED_MAX - SPEED_MIN)
        return int(self.speed_slider_rect.left + frac * self.speed_slider_rect.width)

    def is_over_ui(self, pos):
        return self.bottom_bar_rect.collidepoint(pos) or any(
            rect.collidepoint(pos) for rect, _ in self.view_buttons
        ) or self.zoom_in_rect.collidepoint(pos) or self.zoom_out_rect.collidepoint(pos)

    def handle_ui_event(self, event):
        """
        Handles clicks and drags on the control panel. Every control writes to the clock.
        Returns True when the event was consumed by the UI.
        """
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.play_button_rect.collidepoint(event.pos):
                self.clock.toggle_play()
                return True
            if self.present_button_rect.collidepoint(event.pos):
                self.clock.jump_to_present()
                return True
            for rect, key_event in self.event_buttons:
                if rect.collidepoint(event.pos):
                    self.clock.jump_to_event(key_event)
                    return True
            for rect, view in self.view_buttons:
                if rect.collidepoint(event.pos):
                    self.clock.set_camera_view(view)
                    self.apply_camera_view()
                    return True
            if self.zoom_in_rect.collidepoint(event.pos):
                self.clock.zoom_in()
                return True
            if self.zoom_out_rect.collidepoint(event.pos):
                self.clock.zoom_out()
                return True
            if self.timeline_rect.inflate(0, 24).collidepoint(event.pos):
                self.dragging = "timeline"
                self.clock.scrub(self._timeline_value_at(event.pos[0]))
                return True
            if self.speed_slider_rect.inflate(0, 24).collidepoint(event.pos):
                self.dragging = "speed"
                self.clock.set_speed(self._speed_value_at(event.pos[0]))
                return True

        if event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.dragging:
            self.dragging = None
            return True

        if event.type == pygame.MOUSEMOTION and self.dragging:
            if self.dragging == "timeline":
                self.clock.scrub(self._timeline_value_at(event.pos[0]))
            else:
                self.clock.set_speed(self._speed_value_at(event.pos[0]))
            return True
        return False

    # --- Update ---
    def update(self):
        """
        Called every frame, after the clock has ticked.
        Reads all body positions for the current simulation time and rebuilds the tail
        from the nucleus position and the anti-sunward direction.
        """
        self.snapshot = self.system.snapshot()
        comet = self.snapshot[self.system.comet.name]
        self.tail_points = comet_tail_points(comet.position, comet.anti_sun_direction, self.rng)

    # --- Draw ---
    def draw(self, screen, main_font, ui_font):
        """
        Renders the entire scene.

        Steps:
        1.  Clear screen, draw background stars and the ecliptic reference ring.
        2.  Orbit paths (static polylines).
        3.  Sort bodies by camera depth (painter's algorithm) and draw them, with the Sun.
        4.  Comet tail particles.
        5.  HUD and controls.
        """
        screen.fill(BLACK)

        for star, color in zip(self.cached_stars, self.star_colors):
            sx, sy, perspective, _ = self.to_screen(star, perspective_strength=0.001)
            if perspective > 0.0001:
                screen.set_at((sx, sy), color)

        if self.show_orbits:
            for name, path in self.system.orbit_paths.items():
                color = CYAN if name == self.system.comet.name else ORBIT_GREY
                points = [self.to_screen(p)[:2] for p in path]
                if len(points) > 1:
                    pygame.draw.lines(screen, color, False, points, 2 if color == CYAN else 1)

        drawables = [("sun", None, self.to_camera((0.0, 0.0, 0.0))[2])]
        for body in self.snapshot.values():
            drawables.append(("body", body, self.to_camera(body.position)[2]))
        drawables.sort(key=lambda item: item[2], reverse=True)

        planet_styles = {p.name: p for p in self.system.planets}
        for kind, body, _ in drawables:
            if kind == "sun":
                sx, sy, perspective, _ = self.to_screen((0.0, 0.0, 0.0))
                pygame.draw.circle(screen, SUN_GLOW, (sx, sy), int(SUN_RADIUS_PIXELS * 1.5), 2)
                pygame.draw.circle(screen, SUN_YELLOW, (sx, sy), SUN_RADIUS_PIXELS)
                continue

            sx, sy, perspective, _ = self.to_screen(body.position)
            if body.name in planet_styles:
                planet = planet_styles[body.name].planet
                radius = max(2, int(planet.size * PIXELS_PER_SCENE_UNIT * self.clock.zoom))
                pygame.draw.circle(screen, planet.color, (sx, sy), radius)
            else:
                radius = 4
                pygame.draw.circle(screen, SKY_BLUE, (sx, sy), radius + 3, 1)
                pygame.draw.circle(screen, WHITE, (sx, sy), radius)

            if self.show_labels:
                name_surface = main_font.render(body.name, True, LIGHT_GREY)
                screen.blit(name_surface, name_surface.get_rect(center=(sx, sy - radius - 10)))

        for p in self.tail_points:
            sx, sy, _, _ = self.to_screen(p)
            if 0 <= sx < SCREEN_WIDTH and 0 <= sy < SCREEN_HEIGHT:
                screen.set_at((sx, sy), SKY_BLUE)

        if self.show_info:
            self.draw_hud(screen, ui_font)
        self.draw_controls(screen, main_font)

        pygame.display.flip()

    def _blit_lines(self, screen, font, lines, x, y, color=WHITE):
        for n, line in enumerate(lines):
            screen.blit(font.render(line, True, color), (x, y + n * 26))

    def draw_hud(self, screen, font):
        comet = self.system.comet.comet
        state = self.snapshot.get(comet.name)
        orbit = comet.orbit

        status = "PLAYING" if self.clock.is_playing else "PAUSED"
        self._blit_lines(screen, font, [
            self.clock.current_date(),
            self.clock.perihelion_countdown(orbit.perihelion_date),
            f"{status} | {self.clock.speed:.1f} days/s",
        ], 25, 25)

        if state is not None:
            self._blit_lines(screen, font, [
                f"Distance from Sun | {state.distance_au:.3f} AU",
                f"Velocity | {state.velocity_km_s:.1f} km/s",
                f"Eccentricity | {orbit.eccentricity:.3f}",
                f"Inclination | {orbit.inclination:.1f} deg",
                f"Perihelion | {comet.perihelion_distance_au:.2f} AU",
            ], SCREEN_WIDTH - 330, 100)

        title = font.render(f"{comet.name} | Interstellar Visitor", True, CYAN)
        screen.blit(title, title.get_rect(center=(SCREEN_WIDTH // 2, 30)))

        bottom = self.bottom_bar_rect.top - 60
        self._blit_lines(screen, font, [
            f"Discovered {comet.discovery_date:%b %d, %Y}",
            comet.discovered_by,
        ], 25, bottom, LIGHT_GREY)
        self._blit_lines(screen, font, [
            f"Nucleus {comet.nucleus_diameter_min}-{comet.nucleus_diameter_max} km",
            f"v-infinity {comet.hyperbolic_excess_velocity:.0f} km/s",
        ], SCREEN_WIDTH - 330, bottom, LIGHT_GREY)

    def _draw_button(self, screen, font, rect, label, color, active=False):
        pygame.draw.rect(screen, color if active else MID_GREY, rect)
        text = font.render(label, True, WHITE)
        screen.blit(text, text.get_rect(center=rect.center))

    def draw_controls(self, screen, font):
        pygame.draw.rect(screen, GREY, self.bottom_bar_rect)

        self._draw_button(screen, font, self.play_button_rect,
                          "Pause" if self.clock.is_playing else "Play", GREEN, self.clock.is_playing)

        # Speed slider
        pygame.draw.rect(screen, WHITE, self.speed_slider_rect)
        pygame.draw.circle(screen, WHITE, (self._speed_x(), self.speed_slider_rect.centery), self.slider_handle_radius, 2)
        label = font.render(f"Speed {self.clock.speed:.1f}x", True, WHITE)
        screen.blit(label, (self.speed_slider_rect.left, self.speed_slider_rect.top - 18))

        event_colors = {"current": DUSTY_RED, "past": FADED_RED}
        for rect, key_event in self.event_buttons:
            status = event_status(self.clock.simulation_time, key_event)
            self._draw_button(screen, font, rect, key_event.name, event_colors.get(status, MID_GREY),
                              status in event_colors)
        self._draw_button(screen, font, self.present_button_rect, "Today", DUSTY_RED)

        # Timeline slider
        pygame.draw.rect(screen, WHITE, self.timeline_rect)
        pygame.draw.circle(screen, WHITE, (self._timeline_x(), self.timeline_rect.centery), self.slider_handle_radius, 3)
        for _, key_event in self.event_buttons:
            frac = (key_event.days_from_start - TIMELINE_MIN_DAYS) / (TIMELINE_MAX_DAYS - TIMELINE_MIN_DAYS)
            x = int(self.timeline_rect.left + frac * self.timeline_rect.width)
            pygame.draw.line(screen, DUSTY_RED, (x, self.timeline_rect.top - 6), (x, self.timeline_rect.top + 6), 2)
        day_label = font.render(f"Day {self.clock.simulation_time:.1f}", True, LIGHT_GREY)
        screen.blit(day_label, (self.timeline_rect.left, self.timeline_rect.bottom + 10))

        for rect, view in self.view_buttons:
            self._draw_button(screen, font, rect, view.value.title(), GREEN, self.clock.camera_view is view)
        self._draw_button(screen, font, self.zoom_in_rect, "Zoom +", GREEN)
        self._draw_button(screen, font, self.zoom_out_rect, "Zoom -", GREEN)

import logging
import sys

import pygame

from config import *
from clock import CameraView, SimulationClock
from ephemeris import SolarSystem
from renderer import Orrery

logger = logging.getLogger(__name__)

VIEW_KEYS = {pygame.K_1: CameraView.TOP, pygame.K_2: CameraView.SIDE, pygame.K_3: CameraView.ANGLE}


def main():
    """
    The Main Entry Point.

    Sets up the Pygame window, builds the clock and the solar system, and runs the main loop.

    The Loop:
    1.  **Event Handling**: control panel clicks, keyboard shortcuts, camera drag and zoom.
    2.  **Time Management**: the clock advances by real frame time x speed, while playing.
    3.  **Update**: `orrery_sim.update()` reads every body position for the new time.
    4.  **Draw**: `orrery_sim.draw()` renders the frame.
    """
    validate_config()

    clock = SimulationClock()
    system = SolarSystem(clock)
    logger.info(f"Simulation starts {clock.current_date()} (day {clock.simulation_time:.0f})")

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    pygame.display.set_caption("Orrery | 3I/ATLAS |")

    frame_clock = pygame.time.Clock()
    main_font = pygame.font.Font(None, 18)
    ui_font = pygame.font.Font(None, 26)
    orrery_sim = Orrery(system)

    running = True
    left_mouse_dragging = False
    middle_mouse_dragging = False
    last_mouse_pos = None

    while running:
        dt_seconds = frame_clock.tick(FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue

            if orrery_sim.handle_ui_event(event):
                continue

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    clock.toggle_play()
                elif event.key == pygame.K_RIGHT:
                    clock.set_speed(clock.speed + SPEED_STEP)
                elif event.key == pygame.K_LEFT:
                    clock.set_speed(clock.speed - SPEED_STEP)
                elif event.key == pygame.K_p:
                    clock.jump_to_present()
                elif event.key == pygame.K_r:
                    orrery_sim.reset_view()
                elif event.key in VIEW_KEYS:
                    clock.set_camera_view(VIEW_KEYS[event.key])
                    orrery_sim.apply_camera_view()
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    clock.zoom_in()
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    clock.zoom_out()
                elif event.key == pygame.K_l:
                    orrery_sim.show_labels = not orrery_sim.show_labels
                elif event.key == pygame.K_o:
                    orrery_sim.show_orbits = not orrery_sim.show_orbits
                elif event.key == pygame.K_i:
                    orrery_sim.show_info = not orrery_sim.show_info

            if event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1 and not orrery_sim.is_over_ui(event.pos):
                    left_mouse_dragging = True
                    last_mouse_pos = event.pos
                elif event.button == 2:
                    middle_mouse_dragging = True
                    last_mouse_pos = event.pos
                elif event.button == 4:
                    clock.zoom_in()
                elif event.button == 5:
                    clock.zoom_out()
            if event.type == pygame.MOUSEBUTTONUP:
                if event.button == 1:
                    left_mouse_dragging = False
                elif event.button == 2:
                    middle_mouse_dragging = False
                if not left_mouse_dragging and not middle_mouse_dragging:
                    last_mouse_pos = None
            if event.type == pygame.MOUSEMOTION and last_mouse_pos:
                dx = event.pos[0] - last_mouse_pos[0]
                dy = event.pos[1] - last_mouse_pos[1]
                if left_mouse_dragging:
                    orrery_sim.camera_rotation_y += dx * 0.5
                    orrery_sim.camera_rotation_x -= dy * 0.5
                    orrery_sim.camera_rotation_x = max(-89, min(89, orrery_sim.camera_rotation_x))
                elif middle_mouse_dragging:
                    orrery_sim.pan_offset_x += dx
                    orrery_sim.pan_offset_y += dy
                last_mouse_pos = event.pos

        clock.tick(dt_seconds)
        orrery_sim.update()
        orrery_sim.draw(screen, main_font, ui_font)

    pygame.quit()
    sys.exit()


if __name__ == '__main__':
    main()

import matplotlib.pyplot as plt
from matplotlib.widgets import Slider
import pandas as pd
import numpy as np

from bodies import ATLAS
from clock import SimulationClock
from config import AU_SCALE, TIMELINE_MAX_DAYS, TIMELINE_MIN_DAYS
from ephemeris import SolarSystem


def ephemeris_table(system, start_day=TIMELINE_MIN_DAYS, stop_day=TIMELINE_MAX_DAYS, step_days=1.0):
    """
    Samples every body over a span of simulation days.

    One row per (day, body), with scene coordinates, distance from the Sun and
    speed. Comet rows also carry the separation (AU) from each planet, which is
    how the "closest approach" key events can be checked.
    """
    days = np.arange(start_day, stop_day + step_days / 2, step_days)
    comet_name = system.comet.name
    planet_names = [p.name for p in system.planets]
    rows = []
    for day in days:
        positions = system.positions_at(day)
        comet_pos = positions[comet_name].position
        for name, state in positions.items():
            row = {
                "day": day,
                "date": system.comet.instant(day),
                "body": name,
                "x": state.position[0],
                "y": state.position[1],
                "z": state.position[2],
                "distance_au": state.distance_au,
                "velocity_km_s": state.velocity_km_s,
            }
            if name == comet_name:
                for planet in planet_names:
                    row[f"to_{planet.lower()}_au"] = np.linalg.norm(comet_pos - positions[planet].position) / AU_SCALE
            rows.append(row)
    return pd.DataFrame(rows)


def closest_approach(table, body, comet_name=ATLAS.name):
    """Row of the comet's closest pass to `body` ("Sun" or a planet name)."""
    comet_rows = table[table["body"] == comet_name]
    column = "distance_au" if body.lower() == "sun" else f"to_{body.lower()}_au"
    return comet_rows.loc[comet_rows[column].idxmin()]


def main():
    clock = SimulationClock(is_playing=False)
    system = SolarSystem(clock)
    table = ephemeris_table(system)

    fig, ax = plt.subplots(figsize=(10, 10))
    plt.subplots_adjust(bottom=0.15) # Make room for the slider
    fig.patch.set_facecolor('black')
    ax.set_facecolor('black')
    ax.set_aspect('equal')
    ax.grid(True, color='grey', linestyle='-', linewidth=0.5, alpha=0.3)
    ax.tick_params(axis='x', colors='grey', labelsize=6)
    ax.tick_params(axis='y', colors='grey', labelsize=6)
    for spine in ax.spines.values():
        spine.set_color('grey')

    # Top-down view: scene X across, scene Z up the page, in AU
    for name, path in system.orbit_paths.items():
        color = 'cyan' if name == system.comet.name else 'dimgrey'
        ax.plot(path[:, 0] / AU_SCALE, path[:, 2] / AU_SCALE, color=color, linewidth=0.8)
    ax.scatter([0], [0], s=80, c='gold')

    names = [p.name for p in system.providers]
    colors = [tuple(c / 255 for c in p.planet.color) for p in system.planets] + ["white"]
    scat = ax.scatter(np.zeros(len(names)), np.zeros(len(names)), s=20, c=colors)
    labels = [ax.text(0, 0, name, color='grey', fontsize=7) for name in names]
    ax.set_xlim(-6, 6)
    ax.set_ylim(-6, 6)
    ax.set_xlabel("X (AU)", color='grey')
    ax.set_ylabel("Z (AU)", color='grey')

    def update_plot(day):
        clock.scrub(day)
        snapshot = system.snapshot()
        xz = np.array([[snapshot[n].position[0], snapshot[n].position[2]] for n in names]) / AU_SCALE
        scat.set_offsets(xz)
        for label, (x, z) in zip(labels, xz):
            label.set_position((x, z))
        comet = snapshot[system.comet.name]
        ax.set_title(f"{clock.current_date()} | {system.comet.name} {comet.distance_au:.2f} AU, "
                     f"{comet.velocity_km_s:.1f} km/s", color='white', fontsize=12)
        fig.canvas.draw_idle()

    ax_day = plt.axes([0.2, 0.05, 0.65, 0.03], facecolor='grey')
    slider_day = Slider(ax_day, 'Day', TIMELINE_MIN_DAYS, TIMELINE_MAX_DAYS, valinit=0, color='grey')
    slider_day.label.set_color('grey')
    slider_day.valtext.set_color('grey')
    slider_day.on_changed(update_plot)
    update_plot(0)

    perihelion = closest_approach(table, "Sun")
    print(f"Perihelion: day {perihelion['day']:.1f}, {perihelion['distance_au']:.3f} AU")
    plt.show()


if __name__ == "__main__":
    main()

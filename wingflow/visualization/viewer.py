"""
Reference renderer for WingFlow.

Draws the airfoil section and the per-particle frame buffer with
matplotlib and drives the simulation from a FuncAnimation timer. Swarm
particles are oriented streaks in a LineCollection; billboarded
Streamlines particles are scatter discs. The renderer only consumes
frames; it never touches particle state.
"""

import logging

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.collections import LineCollection
from matplotlib.patches import Polygon

from .. import config
from ..core.airfoil import rotate_outline

logger = logging.getLogger(__name__)


def prepare_figure(ax, airfoil):
    """
    Style the axes and add the airfoil patch and particle artists.

    Args:
        ax: Matplotlib axes
        airfoil (Airfoil): Section geometry

    Returns:
        tuple: (airfoil patch, streak LineCollection, particle scatter)
    """
    ax.set_facecolor(config.BACKGROUND_COLOR)
    ax.set_xlim(config.X_MIN, config.X_MAX)
    ax.set_ylim(*config.VIEW_Y_LIMITS)
    ax.set_aspect('equal')
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)

    patch = Polygon(section_outline(airfoil), closed=True, facecolor=config.AIRFOIL_FACE_COLOR,
                    edgecolor='white', linewidth=0.8, zorder=3)
    ax.add_patch(patch)

    # Create a LineCollection for oriented swarm streaks
    streaks = LineCollection([], linewidths=config.STREAK_LINEWIDTH, capstyle='round', zorder=2)
    ax.add_collection(streaks)

    scatter = ax.scatter([], [], s=[], marker='o', linewidths=0, zorder=2)
    return patch, streaks, scatter


def section_outline(airfoil):
    """Airfoil outline centered on the origin and rotated by the angle of attack."""
    outline = airfoil.outline
    centered = outline - outline.mean(axis=0)
    return rotate_outline(centered, airfoil.angle_deg, pivot=np.zeros(2))


def marker_sizes(frame):
    """Scatter marker areas from instance scales."""
    extent = frame.scales.max(axis=1)
    return (extent * config.MARKER_SIZE_SCALE) ** 2


def streak_segments(frame):
    """
    Line segments for oriented instances.

    Each streak is centered on its particle, has the instance's x-scale as
    its length and points along the instance rotation.

    Returns:
        np.ndarray: Segment endpoints, shape (N, 2, 2)
    """
    half = 0.5 * frame.scales[:, 0]
    offset = np.column_stack((np.cos(frame.rotations), np.sin(frame.rotations))) * half[:, None]
    centers = frame.positions[:, :2]
    return np.stack((centers - offset, centers + offset), axis=1)


class FlowViewer:
    """Animated matplotlib view of a FlowSimulation around an Airfoil."""

    def __init__(self, simulation, airfoil, fig=None, ax=None):
        self.simulation = simulation
        self.airfoil = airfoil
        if fig is None or ax is None:
            fig, ax = plt.subplots(figsize=(12, 6))
        self.fig = fig
        self.ax = ax
        self.fig.patch.set_facecolor(config.BACKGROUND_COLOR)
        try:
            self.fig.canvas.manager.set_window_title(config.WINDOW_TITLE)
        except AttributeError:
            pass
        self.patch, self.streaks, self.scatter = prepare_figure(ax, airfoil)
        self.interval = config.ANIMATION_INTERVAL
        self.clock = 0.0  # seconds; keeps advancing when the animation repeats
        self.anim = None

    def refresh_airfoil(self):
        self.patch.set_xy(section_outline(self.airfoil))

    def draw_frame(self, frame):
        """Push a frame buffer into the streak or scatter artist."""
        if frame.billboard:
            self.scatter.set_offsets(frame.positions[:, :2])
            self.scatter.set_sizes(marker_sizes(frame))
            self.scatter.set_facecolors(frame.colors)
            self.scatter.set_visible(True)
            self.streaks.set_visible(False)
        else:
            self.streaks.set_segments(streak_segments(frame))
            self.streaks.set_colors(frame.colors)
            self.streaks.set_visible(True)
            self.scatter.set_visible(False)

    def update(self, frame_index):
        """Animation callback: one simulation tick per rendered frame."""
        frame = self.simulation.step(self.airfoil.aerodynamic_input(), self.clock)
        self.clock += self.interval / 1000.0
        if frame is None:
            # Paused: keep the frozen state off screen
            self.streaks.set_visible(False)
            self.scatter.set_visible(False)
        else:
            self.draw_frame(frame)
        return self.streaks, self.scatter, self.patch

    def animate(self, frames=config.ANIMATION_FRAMES, interval=config.ANIMATION_INTERVAL):
        self.interval = interval
        logger.info("Animating %d frames at %d ms", frames, interval)
        self.anim = FuncAnimation(self.fig, self.update, frames=frames, interval=interval, blit=False)
        return self.anim

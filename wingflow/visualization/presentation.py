"""
Presentation mapping for WingFlow.

Converts the simulated particle state into the per-instance attributes a
renderer draws in a single batched call: position, scale, rotation (or a
billboard flag) and color.
"""

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from .. import config
from ..core.parameters import RenderMode
from ..physics.boundary import fade_factor
from .color_system import base_rgba, heatmap_colors, mode_alpha


class RenderInstance(NamedTuple):
    position: tuple
    scale: tuple
    rotation: float
    billboard: bool
    color: tuple


@dataclass(frozen=True)
class FrameBuffer:
    """
    Read-only snapshot of render attributes for one tick.

    Rows are in the same order as the particle population.
    """

    positions: np.ndarray  # (N, 3)
    scales: np.ndarray  # (N, 3)
    rotations: np.ndarray  # (N,) radians about z; ignored when billboarded
    colors: np.ndarray  # (N, 4) RGBA
    billboard: bool

    def __post_init__(self):
        for array in (self.positions, self.scales, self.rotations, self.colors):
            array.setflags(write=False)

    def __len__(self):
        return len(self.positions)

    def instance(self, i):
        return RenderInstance(
            tuple(self.positions[i]),
            tuple(self.scales[i]),
            float(self.rotations[i]),
            self.billboard,
            tuple(self.colors[i]),
        )

    def instance_matrices(self):
        """
        Per-instance 4x4 transforms (translate * rotate_z * scale).

        Returns:
            np.ndarray: Column-vector convention transforms, shape (N, 4, 4)
        """
        n = len(self)
        cos = np.cos(self.rotations)
        sin = np.sin(self.rotations)
        sx, sy, sz = self.scales[:, 0], self.scales[:, 1], self.scales[:, 2]

        matrices = np.zeros((n, 4, 4))
        matrices[:, 0, 0] = cos * sx
        matrices[:, 0, 1] = -sin * sy
        matrices[:, 1, 0] = sin * sx
        matrices[:, 1, 1] = cos * sy
        matrices[:, 2, 2] = sz
        matrices[:, :3, 3] = self.positions
        matrices[:, 3, 3] = 1.0
        return matrices

    @property
    def visible(self):
        """Mask of instances with non-zero scale."""
        return np.any(self.scales > 0, axis=1)


def particle_scales(field, sim_config):
    """
    Unfaded scale per particle.

    Swarm particles are streaks whose length grows with their speed;
    Streamlines particles are uniform discs that grow with wake spread.
    """
    n = field.population_size
    if field.render_mode is RenderMode.STREAMLINES:
        size = config.STREAMLINE_SIZE_BASE + field.wake_spread * config.STREAMLINE_SIZE_PER_SPREAD
        return np.repeat(size[:, None], 3, axis=1)

    speed = sim_config.base_speed + field.speed_bias
    scales = np.empty((n, 3))
    scales[:, 0] = np.minimum(config.SWARM_LENGTH_MAX, config.SWARM_LENGTH_BASE + speed)
    scales[:, 1] = config.SWARM_THICKNESS
    scales[:, 2] = config.SWARM_THICKNESS
    return scales


def particle_colors(field, intensity, sim_config):
    """RGBA colors: flat mode color, or the heatmap ramp when enabled."""
    n = field.population_size
    if not sim_config.heatmap_enabled:
        return np.tile(np.array(base_rgba(field.render_mode)), (n, 1))
    colors = np.empty((n, 4))
    colors[:, :3] = heatmap_colors(intensity)
    colors[:, 3] = mode_alpha(field.render_mode)
    return colors


def build_frame(field, sample, sim_config):
    """
    Build the render attributes for the current particle state.

    Args:
        field (ParticleField): Population after this tick
        sample (FlowSample): Intensity, displacement and recycle mask of this tick
        sim_config (SimulationConfig): Run configuration

    Returns:
        FrameBuffer: One instance per particle in population order
    """
    positions = field.positions.copy()
    scales = particle_scales(field, sim_config) * fade_factor(positions[:, 0])[:, None]

    billboard = field.render_mode is RenderMode.STREAMLINES
    if billboard:
        rotations = np.zeros(field.population_size)
    else:
        rotations = np.arctan2(sample.velocity[:, 1], sample.velocity[:, 0])

    colors = particle_colors(field, sample.intensity, sim_config)
    return FrameBuffer(positions, scales, rotations, colors, billboard)

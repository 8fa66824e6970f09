"""
Particle field module for WingFlow.

Owns the fixed-size particle population and advances it by one simulation
tick: downstream drift, body deflection, wake turbulence, then recycling of
particles that left the volume. All per-particle work is vectorized over
the population.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

import numpy as np

from .. import config
from ..core.parameters import ConfigurationError, RenderMode
from .boundary import recycle_particles
from .deflection import compute_deflection
from .wake import apply_streamline_wake, apply_swarm_wake

logger = logging.getLogger(__name__)


def _frozen(array):
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class StreamlineState:
    """State that only exists in Streamlines mode."""

    wake_spread: np.ndarray  # (N,) accumulated plume spread
    lane_index: np.ndarray  # (N,) lane each particle belongs to


@dataclass(frozen=True)
class ParticleField:
    """
    Particle population for one configuration.

    `lanes`, `speed_bias` and `phase` are read-only and shared between
    successive field generations; they define each particle's character
    across its whole lifetime and every recycle.
    """

    render_mode: RenderMode
    positions: np.ndarray  # (N, 3)
    lanes: np.ndarray  # (N,) home y used when recycling
    speed_bias: np.ndarray  # (N,) in [0, SPEED_BIAS_MAX)
    phase: np.ndarray  # (N,) in [0, 2*pi)
    streamlines: Optional[StreamlineState] = None

    @property
    def population_size(self):
        return len(self.positions)

    @property
    def wake_spread(self):
        """Streamlines spread, or None in Swarm mode."""
        return None if self.streamlines is None else self.streamlines.wake_spread

    def copy(self):
        """Copy of the mutable state; identity arrays are shared."""
        streamlines = None
        if self.streamlines is not None:
            streamlines = StreamlineState(self.streamlines.wake_spread.copy(), self.streamlines.lane_index)
        return ParticleField(self.render_mode, self.positions.copy(), self.lanes,
                             self.speed_bias, self.phase, streamlines)


class FlowSample(NamedTuple):
    """Per-particle by-products of one tick, consumed by the presentation layer."""

    intensity: np.ndarray  # (N,) heatmap intensity
    velocity: np.ndarray  # (N, 2) displacement this tick
    recycled: np.ndarray  # (N,) bool


def lane_centers(num_lanes=config.STREAMLINE_LANES, span=config.STREAMLINE_Y_SPAN):
    """Evenly spaced lane y-centers across the vertical span."""
    if num_lanes == 1:
        return np.zeros(1)
    return (np.arange(num_lanes) / (num_lanes - 1) - 0.5) * span


def create_particle_field(population_size, render_mode, rng):
    """
    Create a particle population for a render mode.

    Swarm particles are scattered uniformly through the volume with an
    independent random lane. Streamlines particles are dealt into evenly
    spaced horizontal lanes with a little jitter so they read as coherent
    streaks rather than a uniform fog.

    Args:
        population_size (int): Number of particles, > 0
        render_mode (RenderMode): Swarm or Streamlines
        rng (np.random.Generator): Random source

    Returns:
        ParticleField: The new population
    """
    if population_size <= 0:
        raise ConfigurationError(f"population_size must be > 0, got {population_size}")
    render_mode = RenderMode.parse(render_mode)
    n = int(population_size)

    x = rng.uniform(config.X_MIN, config.X_MAX, n)
    speed_bias = rng.random(n) * config.SPEED_BIAS_MAX
    phase = rng.random(n) * 2.0 * np.pi

    streamlines = None
    if render_mode is RenderMode.STREAMLINES:
        lane_index = np.arange(n) % config.STREAMLINE_LANES
        jitter = (rng.random(n) - 0.5) * config.STREAMLINE_LANE_JITTER
        lanes = lane_centers()[lane_index] + jitter
        y = lanes.copy()
        z = (rng.random(n) - 0.5) * config.STREAMLINE_Z_SPREAD
        streamlines = StreamlineState(np.zeros(n), _frozen(lane_index))
    else:
        y = (rng.random(n) - 0.5) * config.SWARM_Y_SPREAD
        z = (rng.random(n) - 0.5) * config.SWARM_Z_SPREAD
        lanes = (rng.random(n) - 0.5) * config.SWARM_Y_SPREAD

    logger.debug("Created %d particles in %s mode", n, render_mode.value)
    return ParticleField(
        render_mode=render_mode,
        positions=np.column_stack((x, y, z)),
        lanes=_frozen(lanes),
        speed_bias=_frozen(speed_bias),
        phase=_frozen(phase),
        streamlines=streamlines,
    )


def advance_field(field, sim_config, aero, clock, rng):
    """
    Advance every particle by one tick.

    The input field is not modified. When the config is paused the same
    field is returned with an empty sample.

    Args:
        field (ParticleField): Current population
        sim_config (SimulationConfig): Run configuration
        aero (AerodynamicInput): Current angle of attack and thickness
        clock (float): Simulation clock in seconds
        rng (np.random.Generator): Source of jitter

    Returns:
        tuple: (ParticleField, FlowSample)
    """
    n = field.population_size
    if sim_config.paused:
        return field, FlowSample(np.zeros(n), np.zeros((n, 2)), np.zeros(n, dtype=bool))

    new = field.copy()
    pos = new.positions
    previous = pos[:, :2].copy()
    intensity = np.zeros(n)

    pos[:, 0] += sim_config.base_speed + field.speed_bias

    # Particles already past the exit are recycled below without perturbation
    active = np.flatnonzero(pos[:, 0] <= config.X_MAX)
    x = pos[active, 0]
    y = pos[active, 1]

    deflection = compute_deflection(x, y, aero.thickness_percent, aero.angle_of_attack_deg)
    x = x + deflection.dx
    y = y + deflection.dy
    intensity[active] += deflection.intensity

    spread = new.wake_spread
    if sim_config.wake_enabled:
        if spread is not None:
            wake = apply_streamline_wake(x, y, spread[active], aero, sim_config.turbulence_intensity, rng)
            spread[active] = wake.wake_spread
        else:
            wake = apply_swarm_wake(x, y, field.phase[active], aero,
                                    sim_config.turbulence_intensity, clock, rng)
        x = x + wake.dx
        y = y + wake.dy
        intensity[active] += wake.intensity
    elif spread is not None:
        spread[:] = 0.0

    pos[active, 0] = x
    pos[active, 1] = y

    velocity = pos[:, :2] - previous
    recycled = recycle_particles(pos, field.lanes, rng, spread)
    velocity[recycled] = 0.0
    intensity[recycled] = 0.0

    return new, FlowSample(intensity, velocity, recycled)

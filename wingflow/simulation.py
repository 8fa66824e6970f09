"""
Flow simulation driver for WingFlow.

`tick` is the explicit per-frame step: it takes the particle state, the
run configuration, the aerodynamic input and the simulation clock, and
returns the next state with the frame buffer for the renderer.
`FlowSimulation` owns that state between frames and rebuilds the particle
field when a new configuration invalidates it.
"""

import logging

import numpy as np

from .core.parameters import AerodynamicInput, SimulationConfig
from .physics.particle_field import advance_field, create_particle_field
from .physics.wake import is_stalled
from .visualization.presentation import build_frame

logger = logging.getLogger(__name__)


def tick(field, sim_config, aero, clock, rng):
    """
    Run one simulation tick.

    Args:
        field (ParticleField): Current population
        sim_config (SimulationConfig): Run configuration
        aero (AerodynamicInput): Current angle of attack and thickness
        clock (float): Monotonic simulation clock in seconds
        rng (np.random.Generator): Source of jitter

    Returns:
        tuple: (ParticleField, FrameBuffer). While paused the field is
        returned unchanged and the frame is None.
    """
    if sim_config.paused:
        return field, None
    new_field, sample = advance_field(field, sim_config, aero, clock, rng)
    return new_field, build_frame(new_field, sample, sim_config)


class FlowSimulation:
    """Owns the particle field, configuration and random source across frames."""

    def __init__(self, sim_config=None, seed=None):
        self.config = sim_config or SimulationConfig()
        self.rng = np.random.default_rng(seed)
        self.field = create_particle_field(self.config.population_size, self.config.render_mode, self.rng)
        self.last_frame = None
        self.ticks = 0
        self._stalled = None

    def configure(self, sim_config):
        """
        Replace the configuration.

        The particle field is torn down and recreated only when the
        population size or render mode changes; otherwise particles keep
        their state.

        Returns:
            bool: True if the field was rebuilt
        """
        rebuild = self.config.requires_rebuild(sim_config)
        self.config = sim_config
        if rebuild:
            logger.debug("Rebuilding particle field: %d particles, %s mode",
                         sim_config.population_size, sim_config.render_mode.value)
            self.field = create_particle_field(sim_config.population_size, sim_config.render_mode, self.rng)
            self.last_frame = None
        return rebuild

    def update(self, **changes):
        """Apply field changes to the current configuration."""
        return self.configure(self.config.with_changes(**changes))

    def step(self, aero, clock):
        """
        Advance one frame.

        Args:
            aero (AerodynamicInput): Current angle of attack and thickness
            clock (float): Simulation clock in seconds

        Returns:
            FrameBuffer or None: The frame to draw; None while paused
        """
        if not isinstance(aero, AerodynamicInput):
            raise TypeError(f"Expected AerodynamicInput, got {type(aero).__name__}")

        stalled = is_stalled(aero.angle_of_attack_deg)
        if stalled != self._stalled:
            logger.debug("Flow %s at %.1f deg", "stalled" if stalled else "attached", aero.angle_of_attack_deg)
            self._stalled = stalled

        self.field, frame = tick(self.field, self.config, aero, clock, self.rng)
        if frame is not None:
            self.last_frame = frame
            self.ticks += 1
        return frame

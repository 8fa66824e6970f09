import numpy as np
import pytest

from wingflow.core.parameters import AerodynamicInput, RenderMode, SimulationConfig
from wingflow.physics.particle_field import create_particle_field
from wingflow.simulation import FlowSimulation, tick
from wingflow.visualization.presentation import FrameBuffer


def test_tick_returns_new_state_and_frame(rng, swarm_config, cruise_input):
    field = create_particle_field(swarm_config.population_size, swarm_config.render_mode, rng)
    new_field, frame = tick(field, swarm_config, cruise_input, 0.0, rng)
    assert new_field is not field
    assert isinstance(frame, FrameBuffer)
    assert len(frame) == field.population_size


def test_paused_tick_produces_no_frame(rng, swarm_config, cruise_input):
    field = create_particle_field(swarm_config.population_size, swarm_config.render_mode, rng)
    before = field.positions.copy()
    same, frame = tick(field, swarm_config.with_changes(paused=True), cruise_input, 1.0, rng)
    assert same is field
    assert frame is None
    np.testing.assert_array_equal(field.positions, before)


def test_same_seed_same_frames(cruise_input):
    a = FlowSimulation(SimulationConfig(population_size=300), seed=42)
    b = FlowSimulation(SimulationConfig(population_size=300), seed=42)
    for i in range(20):
        fa = a.step(cruise_input, i * 0.03)
        fb = b.step(cruise_input, i * 0.03)
    np.testing.assert_array_equal(fa.positions, fb.positions)
    np.testing.assert_array_equal(fa.colors, fb.colors)


def test_configure_rebuilds_only_on_size_or_mode_change():
    sim = FlowSimulation(SimulationConfig(population_size=100), seed=0)
    field = sim.field

    assert sim.update(turbulence_intensity=2.5) is False
    assert sim.field is field
    assert sim.config.turbulence_intensity == 2.5

    assert sim.update(heatmap_enabled=True, wake_enabled=False) is False
    assert sim.field is field

    assert sim.update(population_size=150) is True
    assert sim.field.population_size == 150

    assert sim.update(render_mode=RenderMode.STREAMLINES) is True
    assert sim.field.streamlines is not None
    assert sim.last_frame is None


def test_pause_and_resume_continue_from_frozen_state(cruise_input):
    sim = FlowSimulation(SimulationConfig(population_size=200), seed=5)
    sim.step(cruise_input, 0.0)
    frozen = sim.field.positions.copy()

    sim.update(paused=True)
    for i in range(5):
        assert sim.step(cruise_input, 0.03 * (i + 1)) is None
    np.testing.assert_array_equal(sim.field.positions, frozen)
    assert sim.ticks == 1

    sim.update(paused=False)
    frame = sim.step(cruise_input, 0.2)
    assert frame is not None
    assert sim.ticks == 2
    kept = sim.field.positions[:, 0] > frozen[:, 0]
    assert kept.sum() > 150


def test_step_requires_aerodynamic_input():
    sim = FlowSimulation(SimulationConfig(population_size=10), seed=0)
    with pytest.raises(TypeError):
        sim.step((10.0, 12.0), 0.0)


def test_streamlines_heatmap_runs_hot_in_the_wake(stalled_input):
    sim = FlowSimulation(SimulationConfig(population_size=1000, render_mode=RenderMode.STREAMLINES,
                                          heatmap_enabled=True), seed=11)
    for i in range(80):
        frame = sim.step(stalled_input, i * 0.03)
    spread = sim.field.wake_spread
    assert spread.max() > 0.3
    assert np.all(np.isfinite(frame.colors))

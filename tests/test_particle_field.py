import dataclasses

import numpy as np
import pytest

from wingflow import config
from wingflow.core.parameters import AerodynamicInput, ConfigurationError, RenderMode, SimulationConfig
from wingflow.physics.particle_field import advance_field, create_particle_field, lane_centers

LOWER_BOUND = config.X_MIN - config.REENTRY_JITTER_MAX


def test_create_swarm_field(rng):
    field = create_particle_field(1000, RenderMode.SWARM, rng)
    assert field.population_size == 1000
    assert field.positions.shape == (1000, 3)
    assert field.streamlines is None
    assert field.wake_spread is None
    assert np.all((field.positions[:, 0] >= config.X_MIN) & (field.positions[:, 0] <= config.X_MAX))
    assert np.all(np.abs(field.positions[:, 1]) <= config.SWARM_Y_SPREAD / 2)
    assert np.all((field.speed_bias >= 0) & (field.speed_bias < config.SPEED_BIAS_MAX))
    assert np.all((field.phase >= 0) & (field.phase < 2 * np.pi))


def test_create_streamlines_groups_particles_into_lanes(rng):
    field = create_particle_field(1000, RenderMode.STREAMLINES, rng)
    lane_index = field.streamlines.lane_index
    centers = lane_centers()
    assert len(centers) == config.STREAMLINE_LANES
    assert centers[0] == pytest.approx(-config.STREAMLINE_Y_SPAN / 2)
    assert centers[-1] == pytest.approx(config.STREAMLINE_Y_SPAN / 2)
    assert np.all(np.abs(field.lanes - centers[lane_index]) <= config.STREAMLINE_LANE_JITTER / 2)
    np.testing.assert_array_equal(field.positions[:, 1], field.lanes)
    assert np.all(field.wake_spread == 0.0)
    assert set(np.unique(lane_index)) == set(range(config.STREAMLINE_LANES))


def test_identity_arrays_are_read_only(rng):
    field = create_particle_field(10, RenderMode.SWARM, rng)
    with pytest.raises(ValueError):
        field.lanes[0] = 1.0
    with pytest.raises(ValueError):
        field.phase[0] = 1.0


def test_rejects_empty_population(rng):
    with pytest.raises(ConfigurationError):
        create_particle_field(0, RenderMode.SWARM, rng)


@pytest.mark.parametrize("mode", list(RenderMode))
@pytest.mark.parametrize("angle", [-40.0, -10.0, 0.0, 18.0])
def test_positions_stay_bounded(rng, mode, angle):
    sim_config = SimulationConfig(population_size=400, render_mode=mode, base_speed=0.5,
                                  turbulence_intensity=3.0)
    aero = AerodynamicInput(angle, 25.0)
    field = create_particle_field(400, mode, rng)
    for i in range(120):
        field, _ = advance_field(field, sim_config, aero, i * 0.03, rng)
        x = field.positions[:, 0]
        assert np.all(x > LOWER_BOUND)
        assert np.all(x <= config.X_MAX)


@pytest.mark.parametrize("mode", list(RenderMode))
def test_recycling_preserves_identity(rng, mode):
    sim_config = SimulationConfig(population_size=200, render_mode=mode, base_speed=1.0)
    aero = AerodynamicInput(-12.0, 14.0)
    field = create_particle_field(200, mode, rng)
    lanes = field.lanes.copy()
    bias = field.speed_bias.copy()
    phase = field.phase.copy()

    recycled = 0
    for i in range(100):
        field, sample = advance_field(field, sim_config, aero, i * 0.03, rng)
        recycled += int(sample.recycled.sum())

    assert recycled > 200
    np.testing.assert_array_equal(field.lanes, lanes)
    np.testing.assert_array_equal(field.speed_bias, bias)
    np.testing.assert_array_equal(field.phase, phase)


def test_paused_tick_changes_nothing(rng, swarm_config, cruise_input):
    field = create_particle_field(swarm_config.population_size, swarm_config.render_mode, rng)
    before = field.positions.copy()
    paused = swarm_config.with_changes(paused=True)
    for i in range(10):
        result, sample = advance_field(field, paused, cruise_input, float(i), rng)
        assert result is field
        assert not sample.recycled.any()
    np.testing.assert_array_equal(field.positions, before)


def test_advance_does_not_mutate_input(rng, streamlines_config, cruise_input):
    field = create_particle_field(streamlines_config.population_size, streamlines_config.render_mode, rng)
    before = field.positions.copy()
    spread_before = field.wake_spread.copy()
    new, _ = advance_field(field, streamlines_config, cruise_input, 0.0, rng)
    np.testing.assert_array_equal(field.positions, before)
    np.testing.assert_array_equal(field.wake_spread, spread_before)
    assert new.lanes is field.lanes


def test_same_state_and_clock_give_same_result(swarm_config, stalled_input):
    field = create_particle_field(swarm_config.population_size, swarm_config.render_mode,
                                  np.random.default_rng(3))
    a, sample_a = advance_field(field, swarm_config, stalled_input, 1.25, np.random.default_rng(99))
    b, sample_b = advance_field(field, swarm_config, stalled_input, 1.25, np.random.default_rng(99))
    np.testing.assert_array_equal(a.positions, b.positions)
    np.testing.assert_array_equal(sample_a.intensity, sample_b.intensity)


def test_single_particle_wraps_once(rng):
    sim_config = SimulationConfig(population_size=1, render_mode=RenderMode.SWARM, base_speed=1.0)
    field = create_particle_field(1, RenderMode.SWARM, rng)
    field = dataclasses.replace(field, positions=np.array([[config.X_MAX - 0.01, 0.3, 0.0]]))

    new, sample = advance_field(field, sim_config, AerodynamicInput(-10.0, 14.0), 0.0, rng)

    assert sample.recycled.tolist() == [True]
    assert LOWER_BOUND < new.positions[0, 0] <= config.X_MIN
    assert new.positions[0, 1] == field.lanes[0]

    after, sample = advance_field(new, sim_config, AerodynamicInput(-10.0, 14.0), 0.03, rng)
    assert sample.recycled.tolist() == [False]
    assert after.positions[0, 0] == pytest.approx(new.positions[0, 0] + 1.0 + field.speed_bias[0])


def test_disabled_wake_clears_spread(rng, streamlines_config):
    aero = AerodynamicInput(18.0, 20.0)
    field = create_particle_field(streamlines_config.population_size, streamlines_config.render_mode, rng)
    for i in range(60):
        field, _ = advance_field(field, streamlines_config, aero, i * 0.03, rng)
    assert field.wake_spread.max() > 0

    field, _ = advance_field(field, streamlines_config.with_changes(wake_enabled=False), aero, 2.0, rng)
    assert np.all(field.wake_spread == 0.0)


def test_zero_input_drifts_straight(rng):
    sim_config = SimulationConfig(population_size=300, render_mode=RenderMode.SWARM, turbulence_intensity=2.0)
    field = create_particle_field(300, RenderMode.SWARM, rng)
    new, sample = advance_field(field, sim_config, AerodynamicInput(0.0, 0.0), 0.5, rng)
    kept = ~sample.recycled
    np.testing.assert_array_equal(new.positions[kept, 1], field.positions[kept, 1])
    np.testing.assert_allclose(new.positions[kept, 0],
                               field.positions[kept, 0] + sim_config.base_speed + field.speed_bias[kept])


def test_zero_input_streamlines_stay_in_their_lanes(rng):
    sim_config = SimulationConfig(population_size=500, render_mode=RenderMode.STREAMLINES, turbulence_intensity=2.0)
    field = create_particle_field(500, RenderMode.STREAMLINES, rng)
    aero = AerodynamicInput(0.0, 0.0)
    for i in range(100):
        field, _ = advance_field(field, sim_config, aero, i * 0.03, rng)
    assert np.all(field.wake_spread == 0.0)
    np.testing.assert_array_equal(field.positions[:, 1], field.lanes)

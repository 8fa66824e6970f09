import numpy as np
import pytest

from wingflow import config
from wingflow.physics.deflection import compute_deflection, interaction_radius


def grid_near_body():
    xs, ys = np.meshgrid(np.linspace(-2, 3, 21), np.linspace(-2, 2, 17))
    return xs.ravel(), ys.ravel()


def test_zero_input_gives_zero_perturbation():
    x, y = grid_near_body()
    result = compute_deflection(x, y, 0.0, 0.0)
    assert np.all(result.dx == 0.0)
    assert np.all(result.dy == 0.0)
    assert np.all(np.isfinite(result.intensity))


def test_far_particles_are_untouched():
    cutoff = interaction_radius(40.0) * config.INFLUENCE_CUTOFF_FACTOR
    x = np.array([config.BODY_X + cutoff + 0.1, config.BODY_X - cutoff - 0.1, config.BODY_X])
    y = np.array([0.0, 0.0, cutoff + 0.1])
    result = compute_deflection(x, y, 40.0, -30.0)
    assert np.all(result.dy == 0.0)
    assert np.all(result.intensity == 0.0)


def test_thickness_pushes_away_from_centerline():
    x = np.full(3, config.BODY_X)
    y = np.array([0.4, -0.4, 0.0])
    result = compute_deflection(x, y, 20.0, 0.0)
    assert result.dy[0] > 0
    assert result.dy[1] < 0
    assert result.dy[0] == pytest.approx(-result.dy[1])
    # The centerline itself counts as the upper side
    assert result.dy[2] > 0


def test_upwash_ahead_and_downwash_behind():
    x = np.array([config.BODY_X - 0.3, config.BODY_X + 0.3])
    y = np.array([0.5, 0.5])
    result = compute_deflection(x, y, 0.0, 10.0)
    assert result.dy[0] > 0
    assert result.dy[1] < 0

    negative = compute_deflection(x, y, 0.0, -10.0)
    np.testing.assert_allclose(negative.dy, -result.dy)


def test_intensity_peaks_at_reference_point():
    x = np.array([config.BODY_X, config.BODY_X + 0.5])
    y = np.zeros(2)
    result = compute_deflection(x, y, 12.0, 5.0)
    assert result.intensity[0] == pytest.approx(config.DEFLECTION_INTENSITY_WEIGHT)
    assert result.intensity[1] < result.intensity[0]
    assert np.all(result.dx == 0.0)

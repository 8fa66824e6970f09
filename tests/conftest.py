import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from wingflow.core.parameters import AerodynamicInput, RenderMode, SimulationConfig


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def swarm_config():
    return SimulationConfig(population_size=500, render_mode=RenderMode.SWARM)


@pytest.fixture
def streamlines_config():
    return SimulationConfig(population_size=500, render_mode=RenderMode.STREAMLINES)


@pytest.fixture
def cruise_input():
    return AerodynamicInput(angle_of_attack_deg=-10.0, thickness_percent=14.0)


@pytest.fixture
def stalled_input():
    return AerodynamicInput(angle_of_attack_deg=18.0, thickness_percent=12.0)

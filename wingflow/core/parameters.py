"""
Simulation parameters for WingFlow.

Defines the run configuration, the per-tick aerodynamic input, and the
validation that happens at the configuration boundary. Nothing inside the
simulation loop re-checks these values.
"""

import dataclasses
import json
import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np

from .. import config

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a configuration or input value is invalid."""


class RenderMode(Enum):
    """Particle behavior and lifecycle variant."""

    SWARM = "swarm"
    STREAMLINES = "streamlines"

    @classmethod
    def parse(cls, value):
        """Parse a mode name. Accepts the legacy names 'discrete' and 'steam'."""
        if isinstance(value, cls):
            return value
        aliases = {"discrete": cls.SWARM, "steam": cls.STREAMLINES}
        key = str(value).strip().lower()
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ConfigurationError(f"Unknown render mode {value!r} (expected one of: {choices})") from None


def _real(name, value):
    """Finite float from a real number; anything else is a ConfigurationError."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    return value


@dataclass(frozen=True)
class SimulationConfig:
    """Run configuration, replaced wholesale on change."""

    population_size: int = config.DEFAULT_NUM_PARTICLES
    base_speed: float = config.DEFAULT_BASE_SPEED
    turbulence_intensity: float = config.DEFAULT_TURBULENCE
    render_mode: RenderMode = RenderMode.SWARM
    wake_enabled: bool = True
    heatmap_enabled: bool = False
    paused: bool = False

    def __post_init__(self):
        object.__setattr__(self, "render_mode", RenderMode.parse(self.render_mode))
        size = _real("population_size", self.population_size)
        if size != int(size):
            raise ConfigurationError(f"population_size must be an integer, got {self.population_size!r}")
        object.__setattr__(self, "population_size", int(size))
        if self.population_size <= 0:
            raise ConfigurationError(f"population_size must be > 0, got {self.population_size}")

        object.__setattr__(self, "base_speed", _real("base_speed", self.base_speed))
        if self.base_speed <= 0:
            raise ConfigurationError(f"base_speed must be > 0, got {self.base_speed}")
        object.__setattr__(self, "turbulence_intensity", _real("turbulence_intensity", self.turbulence_intensity))
        if self.turbulence_intensity < 0:
            raise ConfigurationError(f"turbulence_intensity must be >= 0, got {self.turbulence_intensity}")

        for name in ("wake_enabled", "heatmap_enabled", "paused"):
            value = getattr(self, name)
            if not isinstance(value, (bool, np.bool_)):
                raise ConfigurationError(f"{name} must be true or false, got {value!r}")
            object.__setattr__(self, name, bool(value))

    def with_changes(self, **changes):
        """Return a new validated config with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    def requires_rebuild(self, other):
        """True when switching from this config to `other` invalidates the particle field."""
        return (self.population_size != other.population_size
                or self.render_mode is not other.render_mode)

    def to_dict(self):
        data = dataclasses.asdict(self)
        data["render_mode"] = self.render_mode.value
        return data


@dataclass(frozen=True)
class AerodynamicInput:
    """Per-tick input from the geometry model."""

    angle_of_attack_deg: float = 0.0
    thickness_percent: float = 12.0

    @classmethod
    def clamped(cls, angle_of_attack_deg, thickness_percent):
        """
        Build an input clamped into the supported domain.

        Args:
            angle_of_attack_deg (float): Angle of attack in degrees
            thickness_percent (float): Maximum thickness as % of chord

        Returns:
            AerodynamicInput: Input with both values inside their domains

        Raises:
            ConfigurationError: If either value is not a finite number
        """
        angle = _real("angle_of_attack_deg", angle_of_attack_deg)
        thickness = _real("thickness_percent", thickness_percent)

        clamped_angle = min(max(angle, config.ANGLE_MIN_DEG), config.ANGLE_MAX_DEG)
        clamped_thickness = min(max(thickness, config.THICKNESS_MIN_PERCENT), config.THICKNESS_MAX_PERCENT)
        if clamped_angle != angle or clamped_thickness != thickness:
            logger.debug("Clamped aerodynamic input (%.2f deg, %.2f%%) -> (%.2f deg, %.2f%%)",
                         angle, thickness, clamped_angle, clamped_thickness)
        return cls(clamped_angle, clamped_thickness)


def load_simulation_config(path, base=None):
    """
    Load a SimulationConfig from a JSON file.

    The file holds a single object whose keys are SimulationConfig field
    names. Missing keys keep the values of `base` (or the defaults).

    Args:
        path (str or Path): JSON file path
        base (SimulationConfig, optional): Config supplying unspecified fields

    Returns:
        SimulationConfig: Validated configuration
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path}: invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a JSON object")

    field_names = {f.name for f in dataclasses.fields(SimulationConfig)}
    unknown = sorted(set(data) - field_names)
    if unknown:
        raise ConfigurationError(f"{path}: unknown configuration keys: {', '.join(unknown)}")

    base = base or SimulationConfig()
    logger.debug("Loaded configuration from %s: %s", path, data)
    return base.with_changes(**data)


def save_simulation_config(sim_config, path):
    """Write a SimulationConfig to a JSON file."""
    with open(path, "w") as f:
        json.dump(sim_config.to_dict(), f, indent=2)

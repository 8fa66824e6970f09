"""
Wake model for WingFlow.

Turbulent wake and periodic vortex shedding downstream of the separation
point. Stall is a binary regime switch on the angle-of-attack magnitude.
Swarm particles oscillate in a von Karman street approximation;
Streamlines particles diffuse into an expanding plume instead.
"""

from typing import NamedTuple

import numpy as np

from .. import config
from .deflection import centerline_side


class WakeEffect(NamedTuple):
    """Per-particle wake perturbation, heatmap contribution and updated spread."""

    dx: np.ndarray
    dy: np.ndarray
    intensity: np.ndarray
    wake_spread: np.ndarray = None


def is_stalled(angle_of_attack_deg):
    return abs(angle_of_attack_deg) > config.STALL_THRESHOLD_DEG


def separation_point(angle_of_attack_deg):
    """x-offset past which the flow is detached from the body."""
    if is_stalled(angle_of_attack_deg):
        return config.SEPARATION_STALLED
    return config.SEPARATION_ATTACHED


def wake_half_width(thickness_percent, angle_of_attack_deg, distance_behind):
    """Half-width of the wake cone, widening linearly downstream."""
    return (thickness_percent / 100.0
            + abs(angle_of_attack_deg) / config.WAKE_ANGLE_NORM_DEG
            + distance_behind * config.WAKE_GROWTH_RATE)


def wake_obstruction(thickness_percent, angle_of_attack_deg):
    """Body obstruction factor in [0, 1]; 0 for a body with no thickness and no incidence."""
    base_width = thickness_percent / 100.0 + abs(angle_of_attack_deg) / config.WAKE_ANGLE_NORM_DEG
    return min(1.0, base_width / config.WAKE_FULL_OBSTRUCTION)


def wake_intensity(angle_of_attack_deg, thickness_percent, distance_behind, turbulence_intensity):
    """
    Strength of the wake at a distance behind the separation point.

    Args:
        angle_of_attack_deg (float): Angle of attack in degrees
        thickness_percent (float): Maximum thickness as % of chord
        distance_behind (np.ndarray or float): Distance past separation
        turbulence_intensity (float): Wake chaos multiplier

    Returns:
        np.ndarray or float: Wake intensity, same shape as distance_behind
    """
    base = min(1.0, abs(angle_of_attack_deg) / config.WAKE_INTENSITY_ANGLE_NORM_DEG + config.WAKE_INTENSITY_FLOOR)
    return (base
            * np.exp(-np.asarray(distance_behind) * config.WAKE_DECAY_RATE)
            * turbulence_intensity
            * wake_obstruction(thickness_percent, angle_of_attack_deg))


def vortex_amplitude(angle_of_attack_deg, turbulence_intensity):
    return abs(angle_of_attack_deg) / config.VORTEX_AMP_ANGLE_NORM_DEG * config.VORTEX_AMP_GAIN * turbulence_intensity


def _jitter(rng, size, amplitude):
    """Uniform noise in [-amplitude/2, amplitude/2)."""
    return (rng.random(size) - 0.5) * amplitude


def apply_swarm_wake(x, y, phase, aero, turbulence_intensity, clock, rng):
    """
    Vortex-shedding perturbation for Swarm particles.

    Args:
        x, y (np.ndarray): Particle coordinates after deflection, shape (N,)
        phase (np.ndarray): Per-particle oscillation phase, shape (N,)
        aero (AerodynamicInput): Current angle of attack and thickness
        turbulence_intensity (float): Wake chaos multiplier
        clock (float): Simulation clock in seconds
        rng (np.random.Generator): Source of jitter

    Returns:
        WakeEffect: dx, dy and intensity arrays, each shape (N,)
    """
    angle = aero.angle_of_attack_deg
    thickness = aero.thickness_percent
    dx = np.zeros_like(x)
    dy = np.zeros_like(y)
    intensity = np.zeros_like(x)

    sep = separation_point(angle)
    distance = x - sep
    in_wake = (x > sep) & (np.abs(y) < wake_half_width(thickness, angle, distance))
    idx = np.flatnonzero(in_wake)
    if idx.size == 0:
        return WakeEffect(dx, dy, intensity)

    d = distance[idx]
    y_w = y[idx]
    strength = wake_intensity(angle, thickness, d, turbulence_intensity)
    oscillation = (np.sin(d * config.VORTEX_FREQUENCY - clock * config.VORTEX_SPEED + phase[idx])
                   * vortex_amplitude(angle, turbulence_intensity)
                   * centerline_side(y_w))
    jitter_x = _jitter(rng, idx.size, config.WAKE_JITTER) * strength
    jitter_y = _jitter(rng, idx.size, config.WAKE_JITTER) * strength

    if is_stalled(angle):
        dy[idx] = oscillation * config.STALL_GAIN + jitter_y * config.STALL_GAIN
        dx[idx] = jitter_x * config.STALL_GAIN
    else:
        dy[idx] = (oscillation * np.exp(-np.abs(y_w) * config.ATTACHED_DAMPING)
                   + jitter_y * config.ATTACHED_JITTER_GAIN)

    hot = strength > config.WAKE_INTENSITY_MIN
    intensity[idx[hot]] = strength[hot] * config.WAKE_INTENSITY_WEIGHT
    return WakeEffect(dx, dy, intensity)


def apply_streamline_wake(x, y, wake_spread, aero, turbulence_intensity, rng):
    """
    Plume diffusion for Streamlines particles.

    A particle joins the wake once it is past the separation point and
    inside the wake cone, and stays in it while its spread is non-zero.
    Particles at or ahead of the separation point lose their spread. Growth
    and diffusion scale with the body obstruction, so a section with no
    thickness and no incidence leaves the lanes undisturbed.

    Args:
        x, y (np.ndarray): Particle coordinates after deflection, shape (N,)
        wake_spread (np.ndarray): Current spread per particle, shape (N,)
        aero (AerodynamicInput): Current angle of attack and thickness
        turbulence_intensity (float): Wake chaos multiplier
        rng (np.random.Generator): Source of diffusion noise

    Returns:
        WakeEffect: dx, dy, intensity and the new wake_spread array
    """
    angle = aero.angle_of_attack_deg
    thickness = aero.thickness_percent
    dx = np.zeros_like(x)
    dy = np.zeros_like(y)
    intensity = np.zeros_like(x)
    spread = np.array(wake_spread, dtype=float, copy=True)
    obstruction = wake_obstruction(thickness, angle)

    sep = separation_point(angle)
    behind = x > sep
    distance = x - sep
    in_wake = behind & ((np.abs(y) < wake_half_width(thickness, angle, distance)) | (spread > 0))
    spread[~behind] = 0.0

    idx = np.flatnonzero(in_wake)
    if idx.size == 0:
        return WakeEffect(dx, dy, intensity, spread)

    growth = config.SPREAD_RATE * turbulence_intensity * obstruction
    grown = np.minimum(config.SPREAD_MAX, spread[idx] + growth)
    spread[idx] = grown
    dx[idx] = _jitter(rng, idx.size, config.SPREAD_JITTER_X) * turbulence_intensity * obstruction
    dy[idx] = _jitter(rng, idx.size, config.SPREAD_JITTER_Y) * grown
    intensity[idx] = grown * config.SPREAD_INTENSITY_WEIGHT
    return WakeEffect(dx, dy, intensity, spread)

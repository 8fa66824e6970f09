"""
Deflection model for WingFlow.

Approximates the velocity perturbation a body induces on nearby particles
without solving a field equation. The body is a single point of influence
near the leading region with a Gaussian falloff.
"""

from typing import NamedTuple

import numpy as np

from .. import config


class Deflection(NamedTuple):
    """Per-particle perturbation and heatmap intensity."""

    dx: np.ndarray
    dy: np.ndarray
    intensity: np.ndarray


def interaction_radius(thickness_percent):
    """Characteristic influence radius of the body."""
    return config.INTERACTION_RADIUS_BASE + thickness_percent * config.INTERACTION_RADIUS_PER_THICKNESS


def centerline_side(y):
    """Sign of y with the centerline itself counted as the upper side."""
    return np.where(y < 0, -1.0, 1.0)


def compute_deflection(x, y, thickness_percent, angle_of_attack_deg):
    """
    Compute the body-induced perturbation for a set of particles.

    Only particles inside the cutoff radius are evaluated; the rest get a
    zero perturbation and zero intensity.

    Args:
        x (np.ndarray): Particle x coordinates, shape (N,)
        y (np.ndarray): Particle y coordinates, shape (N,)
        thickness_percent (float): Maximum thickness as % of chord
        angle_of_attack_deg (float): Angle of attack in degrees

    Returns:
        Deflection: dx, dy and intensity arrays, each shape (N,)
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    dx_out = np.zeros_like(x)
    dy_out = np.zeros_like(y)
    intensity = np.zeros_like(x)

    rel_x = x - config.BODY_X
    dist_sq = rel_x * rel_x + y * y
    cutoff = interaction_radius(thickness_percent) * config.INFLUENCE_CUTOFF_FACTOR
    near = dist_sq < cutoff * cutoff
    if not np.any(near):
        return Deflection(dx_out, dy_out, intensity)

    influence = np.exp(-config.INFLUENCE_FALLOFF * dist_sq[near])
    y_near = y[near]

    thickness_push = centerline_side(y_near) * influence * (thickness_percent / 100.0) * config.THICKNESS_PUSH_GAIN

    lift = np.sin(np.radians(angle_of_attack_deg)) * config.LIFT_GAIN
    # Upwash ahead of the body, downwash behind it
    direction = np.where(rel_x[near] < 0, 1.0, -1.0)
    lift_push = direction * influence * lift * config.LIFT_PUSH_GAIN

    dy_out[near] = thickness_push + lift_push
    intensity[near] = influence * config.DEFLECTION_INTENSITY_WEIGHT
    return Deflection(dx_out, dy_out, intensity)

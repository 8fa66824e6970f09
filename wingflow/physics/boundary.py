"""
Boundary policy for WingFlow.

Recycles particles that leave the simulated volume so a finite population
looks like an unbounded flow, and provides the fade applied near both ends
of the volume so that recycling never reads as a pop.
"""

import numpy as np

from .. import config


def smoothstep(edge0, edge1, x):
    """Hermite smoothstep of x between edge0 and edge1, clamped to [0, 1]."""
    t = np.clip((np.asarray(x, dtype=float) - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def fade_factor(x):
    """
    Visibility factor for particles at x.

    Fades in over FADE_DISTANCE after X_MIN and out over FADE_DISTANCE
    before X_MAX.
    """
    fade_in = smoothstep(config.X_MIN, config.X_MIN + config.FADE_DISTANCE, x)
    fade_out = smoothstep(config.X_MAX - config.FADE_DISTANCE, config.X_MAX, x)
    return fade_in * (1.0 - fade_out)


def exited(positions):
    """Mask of particles past the downstream bound."""
    return positions[:, 0] > config.X_MAX


def recycle_particles(positions, lanes, rng, wake_spread=None):
    """
    Re-seed particles past X_MAX just upstream of X_MIN, in place.

    The re-entry x is jittered by up to REENTRY_JITTER_MAX so particles do
    not arrive as a visible wall. y returns to the particle's lane and any
    wake spread is cleared. z is untouched.

    Args:
        positions (np.ndarray): Particle positions, shape (N, 3), modified in place
        lanes (np.ndarray): Home y per particle, shape (N,)
        rng (np.random.Generator): Source of re-entry jitter
        wake_spread (np.ndarray, optional): Streamlines spread, modified in place

    Returns:
        np.ndarray: Boolean mask of recycled particles
    """
    mask = exited(positions)
    count = int(mask.sum())
    if count == 0:
        return mask

    positions[mask, 0] = config.X_MIN - rng.random(count) * config.REENTRY_JITTER_MAX
    positions[mask, 1] = lanes[mask]
    if wake_spread is not None:
        wake_spread[mask] = 0.0
    return mask
